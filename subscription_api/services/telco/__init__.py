"""
Upstream telecom provider access
"""
from .providers import (
    Provider,
    Operation,
    ProviderConfig,
    API_ENDPOINTS,
    SUCCESS_STATUS_CODE,
    build_provider_table,
)
from .client import ProviderClient, ProviderResponse

__all__ = [
    "Provider",
    "Operation",
    "ProviderConfig",
    "API_ENDPOINTS",
    "SUCCESS_STATUS_CODE",
    "build_provider_table",
    "ProviderClient",
    "ProviderResponse",
]
