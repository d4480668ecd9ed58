"""
Abstract identity oracle interface
"""
from abc import ABC, abstractmethod


class IdentityOracle(ABC):
    """Abstract base class for identity oracles"""

    @abstractmethod
    async def verify_token(self, token: str) -> str:
        """
        Verify a bearer credential.

        Args:
            token: Opaque bearer token (without the "Bearer " prefix)

        Returns:
            Verified user id

        Raises:
            Unauthorized: If the token is missing, invalid or expired
        """
        pass
