"""
Bearer token -> verified user id
"""
from .base import IdentityOracle
from .factory import get_identity_oracle

__all__ = ["IdentityOracle", "get_identity_oracle"]
