"""
Stub identity oracle for dev/test environments
"""
import logging

from ...core.errors import Unauthorized
from .base import IdentityOracle

logger = logging.getLogger(__name__)


class StubIdentityOracle(IdentityOracle):
    """
    Treats the bearer token text as the user id.

    Never enable outside local development; validate_config refuses it in prod.
    """

    def __init__(self, env: str = "dev"):
        if env == "prod":
            logger.warning("[Auth][Stub] WARNING: Stub identity oracle enabled in production! This should not happen.")
        else:
            logger.info(f"[Auth][Stub] Stub identity oracle enabled for environment: {env}")

    async def verify_token(self, token: str) -> str:
        token = (token or "").strip()
        if not token:
            raise Unauthorized("Missing authorization token")
        return token
