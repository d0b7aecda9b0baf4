# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-29
# Description: GeminiEmbedder
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.Config import Config
from embedding.EmbeddingProvider import EmbeddingProvider, validate_texts
from errors.SearchErrors import Internal, InvalidArgument, SearchServiceError, Unavailable
from utility.logging_utils import get_class_logger

# batchEmbedContents accepts at most 100 requests per call
GEMINI_MAX_BATCH = 100


class GeminiEmbedder(EmbeddingProvider):
    """
    Embeddings via the Generative Language REST API:
      POST {base}/models/{model}:embedContent
      POST {base}/models/{model}:batchEmbedContents
    """

    def __init__(
            self,
            cfg: Config,
            *,
            http_client: Optional[httpx.Client] = None,
            batch_size: Optional[int] = None,
            logger=None,
    ):
        self.cfg = cfg
        self.model_name = cfg.resolved_embedding_model
        self.batch_size = min(batch_size or cfg.embedding_batch_size, GEMINI_MAX_BATCH)
        self.logger = logger or get_class_logger(self.__class__)

        self.http = http_client or httpx.Client(
            base_url=cfg.gemini_base_url.rstrip("/"),
            timeout=cfg.embedding_timeout_seconds,
        )
        self.logger.info("Gemini embedder initialized (model=%s, batch=%d)", self.model_name, self.batch_size)

    @property
    def _model_path(self) -> str:
        return f"models/{self.model_name}"

    def _post(self, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"/{self._model_path}:{action}"
        try:
            resp = self.http.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.cfg.gemini_api_key},
            )
        except httpx.TransportError as e:
            self.logger.warning("Gemini %s transport error: %s", action, e)
            raise Unavailable(f"Embedding provider unreachable: {e}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise Unavailable(f"Embedding provider temporarily unavailable ({resp.status_code}): {resp.text}")
        if resp.status_code == 400:
            raise InvalidArgument(f"Embedding provider rejected input: {resp.text}")
        if resp.status_code >= 300:
            raise Internal(f"Embedding request failed ({resp.status_code}): {resp.text}")

        try:
            return resp.json()
        except ValueError as e:
            raise Internal(f"Embedding provider returned invalid JSON: {e}") from e

    @staticmethod
    def _values(embedding: Any) -> List[float]:
        values = (embedding or {}).get("values") if isinstance(embedding, dict) else None
        if not values:
            raise Internal("Embedding provider returned an empty embedding")
        return [float(v) for v in values]

    def _content(self, text: str) -> Dict[str, Any]:
        return {"model": self._model_path, "content": {"parts": [{"text": text}]}}

    def embed(self, text: str) -> List[float]:
        validate_texts([text])
        body = self._post("embedContent", self._content(text))
        return self._values(body.get("embedding"))

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        items = validate_texts(texts)
        out: List[List[float]] = []
        for i in range(0, len(items), self.batch_size):
            chunk = items[i:i + self.batch_size]
            body = self._post("batchEmbedContents", {"requests": [self._content(t) for t in chunk]})
            embeddings = body.get("embeddings") or []
            if len(embeddings) != len(chunk):
                raise Internal(f"Embedding count mismatch: {len(embeddings)} != {len(chunk)}")
            out.extend(self._values(e) for e in embeddings)
        return out

    def test_connection(self) -> bool:
        try:
            return len(self.embed("embedding healthcheck")) > 0
        except SearchServiceError as e:
            self.logger.error("Gemini embedding healthcheck failed: %s", e)
            return False
