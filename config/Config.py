# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-02-05
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)

DEFAULT_OPENAI_MODEL = "text-embedding-3-small"
DEFAULT_GEMINI_MODEL = "text-embedding-004"

# Native output size per known embedding model
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "text-embedding-004": 768,
}

# Models that can return a shorter vector via the ``dimensions`` request option
SHORTENABLE_MODELS = ("text-embedding-3-small", "text-embedding-3-large")

FALLBACK_DIMENSIONS = 1536


@dataclass(frozen=True)
class Config:
    # Embedding provider: "openai" | "azure" | "gemini"
    embedding_provider: str = "openai"
    embedding_model: str = DEFAULT_OPENAI_MODEL
    # 0 = derive from the resolved model
    embedding_dimensions: int = 0
    embedding_batch_size: int = 64
    embedding_timeout_seconds: float = 30.0

    # OpenAI (direct)
    openai_base_url: str = ""
    openai_api_key: str = ""

    # Azure OpenAI
    openai_azure_api_key: str = ""
    openai_azure_endpoint: str = ""
    openai_azure_embed_deployment: str = ""
    openai_azure_api_version: str = "2024-10-21"

    # Gemini (Generative Language REST API)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Document store: "memory" | "chroma"
    store_backend: str = "memory"
    chroma_path: str = "./chroma"
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""

    # Identity (JWT bearer tokens)
    jwt_secret: str = ""
    jwt_algorithms: Tuple[str, ...] = ("HS256",)
    jwt_audience: str = ""
    jwt_issuer: str = ""
    org_claim: str = "organizationId"
    users_collection: str = "users"

    # Batch indexing jobs
    job_collection: str = "indexingJobs"
    job_batch_size: int = 50
    job_rate_limit: float = 10.0
    job_persist_every: int = 10
    job_max_errors: int = 100

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # Embeddings
        "embedding_provider": "TS_EMBEDDING_PROVIDER",
        "embedding_model": "TS_EMBEDDING_MODEL",
        "embedding_dimensions": "TS_EMBEDDING_DIMENSIONS",
        "embedding_batch_size": "TS_EMBEDDING_BATCH_SIZE",
        "embedding_timeout_seconds": "TS_EMBEDDING_TIMEOUT_SECONDS",

        # OpenAI direct
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_api_key": "OPENAI_API_KEY",

        # Azure OpenAI
        "openai_azure_api_key": "AZURE_OPENAI_API_KEY",
        "openai_azure_endpoint": "AZURE_OPENAI_ENDPOINT",
        "openai_azure_embed_deployment": "AZURE_OPENAI_EMBED_DEPLOYMENT",
        "openai_azure_api_version": "AZURE_OPENAI_API_VERSION",

        # Gemini
        "gemini_api_key": "GEMINI_API_KEY",
        "gemini_base_url": "GEMINI_BASE_URL",

        # Store
        "store_backend": "TS_STORE_BACKEND",
        "chroma_path": "CHROMA_PATH",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",

        # Identity
        "jwt_secret": "TS_JWT_SECRET",
        "jwt_algorithms": "TS_JWT_ALGORITHMS",
        "jwt_audience": "TS_JWT_AUDIENCE",
        "jwt_issuer": "TS_JWT_ISSUER",
        "org_claim": "TS_ORG_CLAIM",
        "users_collection": "TS_USERS_COLLECTION",

        # Jobs
        "job_collection": "TS_JOB_COLLECTION",
        "job_batch_size": "TS_JOB_BATCH_SIZE",
        "job_rate_limit": "TS_JOB_RATE_LIMIT",
        "job_persist_every": "TS_JOB_PERSIST_EVERY",
        "job_max_errors": "TS_JOB_MAX_ERRORS",
    }

    # Required env vars per embedding provider
    PROVIDER_ENV_VARS = {
        "openai": ("OPENAI_API_KEY",),
        "azure": (
            "AZURE_OPENAI_API_KEY",
            "AZURE_OPENAI_ENDPOINT",
            "AZURE_OPENAI_EMBED_DEPLOYMENT",
        ),
        "gemini": ("GEMINI_API_KEY",),
    }

    STORE_BACKENDS = ("memory", "chroma")

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables (unset vars keep defaults)."""
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            raw = os.getenv(env_name)
            if raw is None or raw.strip() == "":
                continue
            kwargs[field_name] = Config._coerce(field_name, env_name, raw.strip())
        return Config(**kwargs)

    @staticmethod
    def _coerce(field_name: str, env_name: str, raw: str):
        default = Config.__dataclass_fields__[field_name].default
        try:
            if isinstance(default, bool):
                return raw.lower() in ("1", "true", "t", "yes", "y", "on")
            if isinstance(default, int):
                return int(raw)
            if isinstance(default, float):
                return float(raw)
        except ValueError as e:
            raise ValueError(f"Env var {env_name} must be a {type(default).__name__}, got {raw!r}") from e
        if isinstance(default, tuple):
            return tuple(part.strip() for part in raw.split(",") if part.strip())
        return raw

    def __post_init__(self):
        """
        Fail fast on an unknown provider/backend, missing provider credentials
        or an embedding size the configured model cannot produce.
        """
        provider = self.embedding_provider.lower()
        if provider not in self.PROVIDER_ENV_VARS:
            raise ValueError(
                f"Unsupported embedding provider {self.embedding_provider!r}; "
                f"expected one of {sorted(self.PROVIDER_ENV_VARS)}"
            )
        if self.store_backend.lower() not in self.STORE_BACKENDS:
            raise ValueError(
                f"Unsupported store backend {self.store_backend!r}; expected one of {list(self.STORE_BACKENDS)}"
            )

        env_to_field = {v: k for k, v in self.ENV_VARS.items()}
        missing_env_vars = [
            env_name
            for env_name in self.PROVIDER_ENV_VARS[provider]
            if not getattr(self, env_to_field[env_name])
        ]
        if missing_env_vars:
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

        if self.job_batch_size <= 0 or self.job_rate_limit <= 0:
            raise ValueError("TS_JOB_BATCH_SIZE and TS_JOB_RATE_LIMIT must be positive")

        # frozen dataclass: the resolved size is written once, here
        object.__setattr__(self, "embedding_dimensions", self._resolve_dimensions())

    @property
    def resolved_embedding_model(self) -> str:
        """Underlying embedding model; an Azure deployment is assumed to serve ``embedding_model``."""
        model = (self.embedding_model or "").strip()
        if self.embedding_provider.lower() == "gemini":
            # The OpenAI default model name is meaningless there
            if not model or model.startswith("text-embedding-3"):
                return DEFAULT_GEMINI_MODEL
            return model
        return model or DEFAULT_OPENAI_MODEL

    def _resolve_dimensions(self) -> int:
        model = self.resolved_embedding_model
        native = MODEL_DIMENSIONS.get(model)
        requested = self.embedding_dimensions

        if requested < 0:
            raise ValueError("TS_EMBEDDING_DIMENSIONS must not be negative")
        if not requested:
            return native or FALLBACK_DIMENSIONS
        if native is None or requested == native:
            return requested
        if model in SHORTENABLE_MODELS and requested < native:
            return requested
        raise ValueError(
            f"TS_EMBEDDING_DIMENSIONS={requested} does not match model {model!r} ({native} dimensions)"
        )

    @property
    def shortened_dimensions(self) -> Optional[int]:
        """Size to request from the provider when it differs from the model's native output."""
        native = MODEL_DIMENSIONS.get(self.resolved_embedding_model)
        if native is not None and self.embedding_dimensions != native:
            return self.embedding_dimensions
        return None

    @property
    def uses_chroma_cloud(self) -> bool:
        return bool(self.chroma_api_key and self.chroma_tenant and self.chroma_database)

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "embedding_provider": self.embedding_provider,
            "embedding_model": self.embedding_model,
            "embedding_dimensions": self.embedding_dimensions,
            "openai_base_url": self.openai_base_url,
            "openai_azure_endpoint": self.openai_azure_endpoint,
            "openai_azure_embed_deployment": self.openai_azure_embed_deployment,
            "store_backend": self.store_backend,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "job_collection": self.job_collection,
            "job_batch_size": self.job_batch_size,
            "job_rate_limit": self.job_rate_limit,
        }
