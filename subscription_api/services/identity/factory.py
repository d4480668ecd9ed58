"""
Identity oracle factory
"""
import logging

from ...core.config import Settings
from .base import IdentityOracle
from .jwt_oracle import JWTIdentityOracle
from .stub_oracle import StubIdentityOracle

logger = logging.getLogger(__name__)


def get_identity_oracle(settings: Settings) -> IdentityOracle:
    """
    Build the identity oracle selected by IDENTITY_PROVIDER.

    Raises:
        ValueError: For an unknown provider or missing JWT secret
    """
    provider_type = settings.IDENTITY_PROVIDER.lower()

    if provider_type == "jwt":
        try:
            oracle = JWTIdentityOracle(
                secret=settings.JWT_SECRET,
                algorithm=settings.JWT_ALGORITHM,
                audience=settings.JWT_AUDIENCE,
                issuer=settings.JWT_ISSUER,
            )
        except ValueError as e:
            logger.error(f"[Auth] Failed to initialize JWT oracle: {e}")
            raise
        logger.info("[Auth] Using JWT identity oracle")
        return oracle

    elif provider_type == "stub":
        logger.info("[Auth] Using stub identity oracle")
        return StubIdentityOracle(env=settings.ENV)

    else:
        raise ValueError(f"Unknown identity provider: {provider_type}. Must be one of: jwt, stub")
