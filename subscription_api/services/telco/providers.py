"""
Per-provider configuration table.

Adding a provider means adding a row here (and a routing rule); the OTP
workflow only ever looks providers up by key.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from ...core.config import Settings


class Provider(str, Enum):
    MOBITEL = "mobitel"
    DIALOG = "dialog"


class Operation(str, Enum):
    OTP_REQUEST = "OTP_REQUEST"
    OTP_VERIFY = "OTP_VERIFY"
    UNSUBSCRIBE = "UNSUBSCRIBE"
    GET_STATUS = "GET_STATUS"
    GET_CHARGING_INFO = "GET_CHARGING_INFO"


SUCCESS_STATUS_CODE = "S1000"

_SUBSCRIPTION_PATHS = {
    Operation.UNSUBSCRIBE: "/subscription/send",
    Operation.GET_STATUS: "/subscription/getStatus",
    Operation.GET_CHARGING_INFO: "/subscription/getSubscriberChargingInfo",
}

API_ENDPOINTS: Dict[Provider, Dict[Operation, str]] = {
    Provider.MOBITEL: {
        Operation.OTP_REQUEST: "/otp/request",
        Operation.OTP_VERIFY: "/otp/verify",
        **_SUBSCRIPTION_PATHS,
    },
    Provider.DIALOG: {
        Operation.OTP_REQUEST: "/subscription/otp/request",
        Operation.OTP_VERIFY: "/subscription/otp/verify",
        **_SUBSCRIPTION_PATHS,
    },
}


@dataclass(frozen=True)
class ProviderConfig:
    provider: Provider
    base_url: str
    application_id: str
    password: str
    paths: Dict[Operation, str] = field(default_factory=dict)
    success_code: str = SUCCESS_STATUS_CODE

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.application_id and self.password)

    def url_for(self, operation: Operation) -> str:
        return f"{self.base_url.rstrip('/')}{self.paths[operation]}"

    def credentials(self) -> Dict[str, str]:
        return {"applicationId": self.application_id, "password": self.password}


def build_provider_table(settings: Settings) -> Dict[Provider, ProviderConfig]:
    """Build the provider table from configuration."""
    return {
        Provider.MOBITEL: ProviderConfig(
            provider=Provider.MOBITEL,
            base_url=settings.MOBITEL_BASE_URL,
            application_id=settings.MOBITEL_APP_ID,
            password=settings.MOBITEL_APP_PASSWORD,
            paths=API_ENDPOINTS[Provider.MOBITEL],
        ),
        Provider.DIALOG: ProviderConfig(
            provider=Provider.DIALOG,
            base_url=settings.DIALOG_BASE_URL,
            application_id=settings.DIALOG_APP_ID,
            password=settings.DIALOG_APP_PASSWORD,
            paths=API_ENDPOINTS[Provider.DIALOG],
        ),
    }
