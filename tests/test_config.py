# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Updated: 2026-02-05
# Description: test_config.py
# -----------------------------------------------------------------------------
import pytest

from config.Config import Config


def _clear(monkeypatch):
    for env_name in Config.ENV_VARS.values():
        monkeypatch.delenv(env_name, raising=False)


def test_from_env_reads_and_coerces(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("TS_JOB_BATCH_SIZE", "25")
    monkeypatch.setenv("TS_JOB_RATE_LIMIT", "2.5")
    monkeypatch.setenv("TS_JWT_ALGORITHMS", "HS256, RS256")

    cfg = Config.from_env()

    assert cfg.openai_api_key == "sk-test"
    assert cfg.job_batch_size == 25
    assert cfg.job_rate_limit == 2.5
    assert cfg.jwt_algorithms == ("HS256", "RS256")
    assert cfg.job_collection == "indexingJobs"


def test_missing_provider_credentials_fail_fast(monkeypatch):
    _clear(monkeypatch)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        Config.from_env()
    with pytest.raises(ValueError, match="AZURE_OPENAI_ENDPOINT"):
        Config(embedding_provider="azure", openai_azure_api_key="k", openai_azure_embed_deployment="d")


def test_bad_values_are_rejected(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("TS_JOB_BATCH_SIZE", "many")
    with pytest.raises(ValueError, match="TS_JOB_BATCH_SIZE"):
        Config.from_env()

    with pytest.raises(ValueError):
        Config(openai_api_key="k", store_backend="mongo")
    with pytest.raises(ValueError):
        Config(openai_api_key="k", job_rate_limit=0)


def test_summary_omits_secrets():
    cfg = Config(openai_api_key="sk-secret", jwt_secret="jwt-secret")
    flat = str(cfg.summary())
    assert "sk-secret" not in flat
    assert "jwt-secret" not in flat
    assert cfg.uses_chroma_cloud is False


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({"openai_api_key": "k"}, 1536),
        ({"openai_api_key": "k", "embedding_model": "text-embedding-3-large"}, 3072),
        ({"openai_api_key": "k", "embedding_model": "text-embedding-3-large", "embedding_dimensions": 1024}, 1024),
        ({"embedding_provider": "gemini", "gemini_api_key": "k"}, 768),
        ({"openai_api_key": "k", "embedding_model": "in-house-embedder", "embedding_dimensions": 384}, 384),
    ],
)
def test_embedding_dimensions_follow_the_model(kwargs, expected):
    assert Config(**kwargs).embedding_dimensions == expected


def test_gemini_resolves_its_own_model():
    cfg = Config(embedding_provider="gemini", gemini_api_key="k")
    assert cfg.resolved_embedding_model == "text-embedding-004"
    assert cfg.shortened_dimensions is None


def test_impossible_embedding_dimensions_fail_fast(monkeypatch):
    with pytest.raises(ValueError, match="text-embedding-004"):
        Config(embedding_provider="gemini", gemini_api_key="k", embedding_dimensions=1536)
    with pytest.raises(ValueError, match="text-embedding-3-small"):
        Config(openai_api_key="k", embedding_dimensions=4096)

    _clear(monkeypatch)
    monkeypatch.setenv("TS_EMBEDDING_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setenv("TS_EMBEDDING_DIMENSIONS", "768")
    assert Config.from_env().embedding_dimensions == 768
