# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-30
# Description: IdentityProvider
# -----------------------------------------------------------------------------
from typing import Any, Dict, Protocol, runtime_checkable

from jose import JWTError, jwt

from config.Config import Config
from errors.SearchErrors import Unauthenticated
from utility.logging_utils import get_class_logger


@runtime_checkable
class IdentityProvider(Protocol):
    def verify(self, token: str) -> Dict[str, Any]:
        """Validate a bearer token and return its claims, or raise Unauthenticated."""
        ...


class JWTIdentityProvider(IdentityProvider):
    """
    Verifies signed JWTs (shared secret or PEM public key in TS_JWT_SECRET).
    Audience / issuer are checked only when configured.
    """

    def __init__(self, cfg: Config, logger=None) -> None:
        if not cfg.jwt_secret:
            raise ValueError("Missing required environment variables: ['TS_JWT_SECRET']")
        self.key = cfg.jwt_secret
        self.algorithms = list(cfg.jwt_algorithms)
        self.audience = cfg.jwt_audience or None
        self.issuer = cfg.jwt_issuer or None
        self.logger = logger or get_class_logger(self.__class__)

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            self.logger.warning("Token verification failed: %s", e)
            raise Unauthenticated("Invalid or expired token") from e

        if not claims.get("sub"):
            raise Unauthenticated("Token has no subject")
        return claims
