# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-29
# Description: EmbedderFactory
# -----------------------------------------------------------------------------
from config.Config import Config
from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.GeminiEmbedder import GeminiEmbedder
from embedding.OpenAIEmbedder import OpenAIEmbedder


def build_embedder(cfg: Config) -> EmbeddingProvider:
    provider = cfg.embedding_provider.lower()
    if provider in ("openai", "azure"):
        return OpenAIEmbedder(cfg)
    if provider == "gemini":
        return GeminiEmbedder(cfg)
    # Config.__post_init__ already rejects unknown providers
    raise ValueError(f"Unsupported embedding provider: {cfg.embedding_provider!r}")
