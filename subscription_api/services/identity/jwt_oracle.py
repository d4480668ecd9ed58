"""
JWT identity oracle (python-jose)
"""
import logging
from typing import Optional

from jose import jwt, JWTError

from ...core.errors import Unauthorized
from .base import IdentityOracle

logger = logging.getLogger(__name__)


class JWTIdentityOracle(IdentityOracle):
    """Verifies signed JWTs and returns the ``sub`` claim."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        if not secret:
            raise ValueError("JWT_SECRET must be set for the jwt identity provider")
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience or None
        self.issuer = issuer or None

    async def verify_token(self, token: str) -> str:
        if not token:
            raise Unauthorized("Missing authorization token")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthorized("Token has expired")
        except JWTError as e:
            logger.info(f"[Auth] Token rejected: {type(e).__name__}")
            raise Unauthorized("Invalid token")

        user_id = payload.get("sub")
        if not user_id:
            raise Unauthorized("Invalid token")
        return str(user_id)
