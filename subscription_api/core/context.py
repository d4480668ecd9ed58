"""
Process-wide application context.

Built once in the lifespan and stored on ``app.state.context``; request
handlers reach shared collaborators through it instead of module globals.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from .config import Settings
from ..services.identity import IdentityOracle, get_identity_oracle
from ..services.telco import Provider, ProviderClient, ProviderConfig, build_provider_table
from ..services.whitelist import WhitelistBypass

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    identity_oracle: IdentityOracle
    providers: Dict[Provider, ProviderConfig]
    provider_client: ProviderClient
    whitelist: WhitelistBypass


def build_context(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    identity_oracle: Optional[IdentityOracle] = None,
) -> AppContext:
    """Assemble the context from configuration."""
    context = AppContext(
        settings=settings,
        identity_oracle=identity_oracle or get_identity_oracle(settings),
        providers=build_provider_table(settings),
        provider_client=ProviderClient(
            timeout_seconds=settings.UPSTREAM_TIMEOUT_SECONDS,
            transport=transport,
        ),
        whitelist=WhitelistBypass(
            enabled=settings.ENABLE_WHITELIST,
            subscriber_ids=settings.whitelisted_subscriber_ids,
        ),
    )
    configured = [p.value for p, c in context.providers.items() if c.is_configured]
    logger.info(f"[Context] Providers configured: {configured or 'none'}")
    return context
