"""
HTTP transport for upstream telecom provider APIs
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from ...core.errors import ProviderNotConfigured
from .providers import Operation, ProviderConfig

logger = logging.getLogger(__name__)

UNAVAILABLE_STATUS = 504


@dataclass
class ProviderResponse:
    """
    Result of one upstream call.

    Transport failures are carried here (``unavailable=True``) rather than
    raised, so callers classify every outcome in one place.
    """
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)
    unavailable: bool = False
    error: Optional[str] = None

    @property
    def status_detail(self) -> str:
        return str(self.data.get("statusDetail") or self.error or "Upstream request failed")


class ProviderClient:
    """
    Posts JSON payloads to provider endpoints.

    Each call uses its own httpx.AsyncClient with an explicit timeout.
    ``transport`` can be injected (e.g. httpx.MockTransport in tests).
    """

    def __init__(self, timeout_seconds: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def post(self, config: ProviderConfig, operation: Operation, body: Dict[str, Any]) -> ProviderResponse:
        """
        Send ``body`` (merged with the provider credentials) to ``operation``.

        Raises:
            ProviderNotConfigured: If the provider has no credentials
        """
        if not config.is_configured:
            logger.error(f"[OTP][{config.provider.value}] application id or password not configured")
            raise ProviderNotConfigured()

        url = config.url_for(operation)
        payload = {**config.credentials(), **body}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException:
            logger.error(
                f"[OTP][{config.provider.value}] Timeout calling {operation.value} (>{self.timeout_seconds}s)"
            )
            return ProviderResponse(
                status_code=UNAVAILABLE_STATUS,
                unavailable=True,
                error=f"Timeout: provider did not respond within {self.timeout_seconds} seconds",
            )
        except httpx.HTTPError as e:
            logger.error(f"[OTP][{config.provider.value}] Network error calling {operation.value}: {type(e).__name__}: {e}")
            return ProviderResponse(
                status_code=UNAVAILABLE_STATUS,
                unavailable=True,
                error="Network error connecting to service provider",
            )

        try:
            data = response.json()
        except ValueError:
            data = {"statusDetail": response.text[:500]}
        if not isinstance(data, dict):
            data = {"data": data}

        logger.info(
            f"[OTP][{config.provider.value}] {operation.value} -> HTTP {response.status_code}, "
            f"statusCode={data.get('statusCode')}"
        )
        return ProviderResponse(status_code=response.status_code, data=data)
