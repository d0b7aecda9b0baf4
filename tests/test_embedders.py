# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-29
# Description: test_embedders.py
# -----------------------------------------------------------------------------
import json
import os
from types import SimpleNamespace

import httpx
import openai
import pytest

from config.Config import Config
from embedding.EmbedderFactory import build_embedder
from embedding.GeminiEmbedder import GeminiEmbedder
from embedding.OpenAIEmbedder import OpenAIEmbedder
from errors.SearchErrors import Internal, InvalidArgument, Unavailable

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/embeddings")


class FakeEmbeddings:
    def __init__(self, error=None, shuffle=False):
        self.error = error
        self.shuffle = shuffle
        self.calls = []

    def create(self, model, input):
        self.calls.append((model, list(input)))
        if self.error is not None:
            raise self.error
        items = [
            SimpleNamespace(index=i, embedding=[float(len(text)), 0.0])
            for i, text in enumerate(input)
        ]
        if self.shuffle:
            items.reverse()
        return SimpleNamespace(data=items)


def _openai(error=None, shuffle=False, **kwargs):
    embeddings = FakeEmbeddings(error=error, shuffle=shuffle)
    client = SimpleNamespace(embeddings=embeddings)
    cfg = Config(openai_api_key="test")
    return OpenAIEmbedder(cfg, client=client, **kwargs), embeddings


def test_openai_embed_batch_chunks_and_keeps_order():
    embedder, fake = _openai(shuffle=True, batch_size=2, normalize=False)

    vectors = embedder.embed_batch(["a", "bbb", "cc"])

    assert vectors == [[1.0, 0.0], [3.0, 0.0], [2.0, 0.0]]
    assert [len(texts) for _, texts in fake.calls] == [2, 1]
    assert fake.calls[0][0] == "text-embedding-3-small"


def test_openai_normalizes_by_default():
    embedder, _ = _openai()
    assert embedder.embed("abcd") == pytest.approx([1.0, 0.0])


def test_openai_rejects_empty_text_before_calling():
    embedder, fake = _openai()
    with pytest.raises(InvalidArgument):
        embedder.embed("  ")
    assert fake.calls == []


@pytest.mark.parametrize(
    "error,expected",
    [
        (openai.APIConnectionError(request=_REQUEST), Unavailable),
        (openai.RateLimitError("slow down", response=httpx.Response(429, request=_REQUEST), body=None), Unavailable),
        (openai.InternalServerError("boom", response=httpx.Response(500, request=_REQUEST), body=None), Unavailable),
        (openai.BadRequestError("bad", response=httpx.Response(400, request=_REQUEST), body=None), InvalidArgument),
        (openai.AuthenticationError("nope", response=httpx.Response(401, request=_REQUEST), body=None), Internal),
    ],
)
def test_openai_error_mapping(error, expected):
    embedder, fake = _openai(error=error)
    with pytest.raises(expected):
        embedder.embed("hello")
    # no internal retry
    assert len(fake.calls) == 1


def test_openai_test_connection_reports_failure():
    embedder, _ = _openai(error=openai.APIConnectionError(request=_REQUEST))
    assert embedder.test_connection() is False


def test_azure_uses_deployment_as_model():
    cfg = Config(
        embedding_provider="azure",
        openai_azure_api_key="k",
        openai_azure_endpoint="https://example.openai.azure.com/",
        openai_azure_embed_deployment="embed-deploy",
    )
    fake = FakeEmbeddings()
    embedder = OpenAIEmbedder(cfg, client=SimpleNamespace(embeddings=fake))
    embedder.embed("x")
    assert fake.calls[0][0] == "embed-deploy"


def test_openai_requests_shortened_vectors_only_when_configured():
    requests = []

    class RecordingEmbeddings:
        def create(self, **kwargs):
            requests.append(kwargs)
            return SimpleNamespace(data=[SimpleNamespace(index=0, embedding=[1.0, 0.0])])

    client = SimpleNamespace(embeddings=RecordingEmbeddings())
    OpenAIEmbedder(Config(openai_api_key="k"), client=client).embed("a")
    OpenAIEmbedder(Config(openai_api_key="k", embedding_dimensions=256), client=client).embed("b")

    assert "dimensions" not in requests[0]
    assert requests[1]["dimensions"] == 256


def _gemini(handler, **kwargs):
    cfg = Config(embedding_provider="gemini", gemini_api_key="g-key")
    http = httpx.Client(base_url=cfg.gemini_base_url, transport=httpx.MockTransport(handler))
    return GeminiEmbedder(cfg, http_client=http, **kwargs)


def test_gemini_embed_single_and_batch():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        assert request.headers["x-goog-api-key"] == "g-key"
        body = json.loads(request.content)
        if request.url.path.endswith(":embedContent"):
            return httpx.Response(200, json={"embedding": {"values": [0.1, 0.2]}})
        values = [{"values": [float(i), 1.0]} for i, _ in enumerate(body["requests"])]
        return httpx.Response(200, json={"embeddings": values})

    embedder = _gemini(handler, batch_size=2)
    assert embedder.model_name == "text-embedding-004"
    assert embedder.embed("hello") == [0.1, 0.2]
    assert embedder.embed_batch(["a", "b", "c"]) == [[0.0, 1.0], [1.0, 1.0], [0.0, 1.0]]
    assert seen[0].url.path.endswith("/models/text-embedding-004:embedContent")
    assert len(seen) == 3


@pytest.mark.parametrize("status,expected", [(429, Unavailable), (503, Unavailable), (400, InvalidArgument), (403, Internal)])
def test_gemini_error_mapping(status, expected):
    embedder = _gemini(lambda request: httpx.Response(status, json={"error": {"message": "x"}}))
    with pytest.raises(expected):
        embedder.embed("hello")


def test_gemini_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    embedder = _gemini(handler)
    with pytest.raises(Unavailable):
        embedder.embed("hello")
    assert embedder.test_connection() is False


def test_factory_selects_provider():
    assert isinstance(build_embedder(Config(embedding_provider="gemini", gemini_api_key="k")), GeminiEmbedder)
    assert isinstance(build_embedder(Config(openai_api_key="k")), OpenAIEmbedder)


@pytest.mark.integration
def test_openai_embedder_live():
    if not os.getenv(Config.ENV_VARS["openai_api_key"]):
        pytest.skip("OPENAI_API_KEY not set")
    embedder = OpenAIEmbedder(Config(openai_api_key=os.environ["OPENAI_API_KEY"]))
    vec = embedder.embed("camera rig for night shoot")
    assert len(vec) > 0
