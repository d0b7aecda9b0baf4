# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-02-05
# Description: OpenAIEmbedder
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import openai
from openai import AzureOpenAI, OpenAI

from config.Config import Config
from embedding.EmbeddingProvider import EmbeddingProvider, validate_texts
from errors.SearchErrors import Internal, InvalidArgument, SearchServiceError, Unavailable
from utility.logging_utils import get_class_logger


class OpenAIEmbedder(EmbeddingProvider):
    """
    Embeddings via the OpenAI SDK, either OpenAI direct or an Azure OpenAI
    deployment (cfg.embedding_provider == "azure").

    Transport failures surface as Unavailable; the SDK's own retries are
    switched off so the caller decides whether to try again.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: Any = None,
            batch_size: Optional[int] = None,
            normalize: bool = True,
            logger=None,
    ):
        self.cfg = cfg
        self.batch_size = batch_size or cfg.embedding_batch_size
        self.normalize = normalize
        self.logger = logger or get_class_logger(self.__class__)

        self.is_azure = cfg.embedding_provider.lower() == "azure"
        if self.is_azure:
            self.model_name = cfg.openai_azure_embed_deployment or cfg.embedding_model
        else:
            self.model_name = cfg.resolved_embedding_model
        self.dimensions = cfg.shortened_dimensions

        self.client = client if client is not None else self._init_client()
        self.logger.info(
            "OpenAI embedder initialized (model=%s, azure=%s, batch=%d)",
            self.model_name,
            self.is_azure,
            self.batch_size,
        )

    def _init_client(self):
        if self.is_azure:
            return AzureOpenAI(
                api_key=self.cfg.openai_azure_api_key,
                azure_endpoint=self.cfg.openai_azure_endpoint.rstrip("/"),
                api_version=self.cfg.openai_azure_api_version,
                timeout=self.cfg.embedding_timeout_seconds,
                max_retries=0,
            )
        return OpenAI(
            api_key=self.cfg.openai_api_key,
            base_url=self.cfg.openai_base_url or None,
            timeout=self.cfg.embedding_timeout_seconds,
            max_retries=0,
        )

    @staticmethod
    def _map_error(e: Exception) -> SearchServiceError:
        # APITimeoutError is a subclass of APIConnectionError
        if isinstance(e, openai.APIConnectionError):
            return Unavailable(f"Embedding provider unreachable: {e}")
        if isinstance(e, (openai.RateLimitError, openai.InternalServerError)):
            return Unavailable(f"Embedding provider temporarily unavailable: {e}")
        if isinstance(e, (openai.BadRequestError, openai.UnprocessableEntityError)):
            return InvalidArgument(f"Embedding provider rejected input: {e}")
        return Internal(f"Embedding request failed: {e}")

    def _embed_chunk(self, texts: List[str]) -> List[List[float]]:
        try:
            kwargs: Dict[str, Any] = {"model": self.model_name, "input": texts}
            if self.dimensions:
                kwargs["dimensions"] = self.dimensions
            resp = self.client.embeddings.create(**kwargs)
        except openai.OpenAIError as e:
            self.logger.warning("Embedding request for %d texts failed: %s", len(texts), e)
            raise self._map_error(e) from e

        data = sorted(resp.data, key=lambda d: getattr(d, "index", 0))
        if len(data) != len(texts):
            raise Internal(f"Embedding count mismatch: {len(data)} != {len(texts)}")

        arr = np.asarray([d.embedding for d in data], dtype=np.float32)

        # Normalize vectors (cosine-friendly)
        if self.normalize:
            norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
            arr = arr / norms

        return arr.astype(float).tolist()

    def embed(self, text: str) -> List[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        items = validate_texts(texts)
        if not items:
            return []

        out: List[List[float]] = []
        for i in range(0, len(items), self.batch_size):
            out.extend(self._embed_chunk(items[i:i + self.batch_size]))

        self.logger.debug("Embedded %d texts with model=%s", len(out), self.model_name)
        return out

    def test_connection(self) -> bool:
        try:
            vec = self.embed("embedding healthcheck")
            return len(vec) > 0
        except SearchServiceError as e:
            self.logger.error("Embedding healthcheck failed: %s", e)
            return False
