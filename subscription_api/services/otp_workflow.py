"""
OTP subscription workflow.

Orchestrates request/verify/unsubscribe/status/charging-info calls:
normalize the subscriber id, short-circuit whitelisted test subscribers,
route to a provider, resolve masked ids, call upstream and classify the
response. A successful verify persists the subscriber -> masked id
mapping with a bounded retry.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..core.errors import (
    PersistenceRetryExhausted,
    UpstreamError,
    UpstreamUnavailable,
    ValidationError,
)
from ..core.retry import retry_until_true
from ..utils.phone import get_phone_last4, normalize_subscriber_id, to_tel_uri
from .identity_masker import IdentityMasker
from .provider_router import resolve_provider
from .telco.client import ProviderClient, ProviderResponse
from .telco.providers import SUCCESS_STATUS_CODE, Operation, Provider, ProviderConfig
from .whitelist import WhitelistBypass

logger = logging.getLogger(__name__)

APPLICATION_HASH = "abcdefgh"
UNSUBSCRIBE_ACTION = "0"
IDENTITY_NOT_PERSISTED = "IDENTITY_NOT_PERSISTED"

DEFAULT_META_DATA = {
    "client": "MOBILEAPP",
    "device": "NOT_PROVIDED",
    "os": "NOT_PROVIDED",
    "appCode": "https://play.google.com/store/apps/details?id=lk",
}


def classify_response(config: Optional[ProviderConfig], response: ProviderResponse) -> Dict[str, Any]:
    """
    Turn a provider response into a success body or a typed failure.

    Success iff the body's statusCode equals the provider's success sentinel.

    Raises:
        UpstreamUnavailable: Transport failure or timeout
        UpstreamError: Any other non-success; HTTP status passed through
            unless it was 200, in which case 400
    """
    if response.unavailable:
        raise UpstreamUnavailable(response.status_detail)

    success_code = config.success_code if config is not None else SUCCESS_STATUS_CODE

    if response.data.get("statusCode") == success_code:
        return {"apiStatus": "success", **response.data}

    status = 400 if response.status_code == 200 else response.status_code
    raise UpstreamError(response.status_detail, status_code=status, body=response.data)


class OtpWorkflow:
    """Request-scoped orchestrator; built per request from the app context."""

    def __init__(
        self,
        providers: Dict[Provider, ProviderConfig],
        client: ProviderClient,
        masker: IdentityMasker,
        whitelist: WhitelistBypass,
        save_max_attempts: int = 5,
        save_backoff_seconds: float = 0.0,
    ):
        self.providers = providers
        self.client = client
        self.masker = masker
        self.whitelist = whitelist
        self.save_max_attempts = save_max_attempts
        self.save_backoff_seconds = save_backoff_seconds

    def _config_for(self, canonical_id: str) -> ProviderConfig:
        provider = resolve_provider(canonical_id)
        return self.providers[provider]

    async def _call(self, config: ProviderConfig, operation: Operation, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.post(config, operation, body)
        return classify_response(config, response)

    async def request_otp(
        self,
        raw_subscriber_id: Union[str, int, None],
        device: Optional[str] = None,
        os: Optional[str] = None,
    ) -> Dict[str, Any]:
        canonical_id = normalize_subscriber_id(raw_subscriber_id)

        if self.whitelist.is_whitelisted(canonical_id):
            return classify_response(None, self.whitelist.otp_request_response(canonical_id))

        config = self._config_for(canonical_id)
        logger.info(
            f"[OTP][{config.provider.value}] Requesting OTP for subscriber ending {get_phone_last4(canonical_id)}"
        )
        body = {
            "subscriberId": to_tel_uri(canonical_id),
            "applicationHash": APPLICATION_HASH,
            "applicationMetaData": {
                **DEFAULT_META_DATA,
                "device": device or DEFAULT_META_DATA["device"],
                "os": os or DEFAULT_META_DATA["os"],
            },
        }
        return await self._call(config, Operation.OTP_REQUEST, body)

    async def verify_otp(
        self,
        raw_subscriber_id: Union[str, int, None],
        reference_no: Optional[str],
        otp: Optional[str],
        owner_user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Verify an OTP and persist the resulting masked id.

        The upstream success is reported even when the mapping cannot be
        saved; in that case the body carries
        ``warnings: ["IDENTITY_NOT_PERSISTED"]``.
        """
        canonical_id = normalize_subscriber_id(raw_subscriber_id)
        if not reference_no:
            raise ValidationError("referenceNo is required")
        if not otp:
            raise ValidationError("otp is required")

        if self.whitelist.is_whitelisted(canonical_id):
            return classify_response(None, self.whitelist.otp_verify_response(otp))

        config = self._config_for(canonical_id)
        result = await self._call(config, Operation.OTP_VERIFY, {"referenceNo": reference_no, "otp": otp})

        masked_id = result.get("subscriberId")
        saved, attempts = await retry_until_true(
            lambda: self.masker.save_identity(owner_user_id, canonical_id, masked_id),
            max_attempts=self.save_max_attempts,
            initial_delay=self.save_backoff_seconds,
        )
        if not saved:
            exhausted = PersistenceRetryExhausted(canonical_id, attempts)
            logger.error(f"[Identity] {exhausted.message} (subscriber ending {get_phone_last4(canonical_id)})")
            result["warnings"] = [IDENTITY_NOT_PERSISTED]
        return result

    async def unsubscribe(self, raw_subscriber_id: Union[str, int, None]) -> Dict[str, Any]:
        canonical_id = normalize_subscriber_id(raw_subscriber_id)

        if self.whitelist.is_whitelisted(canonical_id):
            return classify_response(None, self.whitelist.unsubscribe_response())

        masked_id = self.masker.get_masked_id(canonical_id)
        config = self._config_for(canonical_id)
        return await self._call(
            config,
            Operation.UNSUBSCRIBE,
            {"subscriberId": masked_id, "action": UNSUBSCRIBE_ACTION},
        )

    async def get_status(self, raw_subscriber_id: Union[str, int, None]) -> Dict[str, Any]:
        canonical_id = normalize_subscriber_id(raw_subscriber_id)

        if self.whitelist.is_whitelisted(canonical_id):
            return classify_response(None, self.whitelist.get_status_response())

        masked_id = self.masker.get_masked_id(canonical_id)
        config = self._config_for(canonical_id)
        return await self._call(config, Operation.GET_STATUS, {"subscriberId": masked_id})

    async def get_charging_info(
        self,
        raw_subscriber_ids: Union[str, int, Iterable[Union[str, int]], None],
    ) -> Dict[str, Any]:
        """
        Charging info for one or more subscribers in a single upstream call.

        All ids are routed by the first one; the providers answer for their
        own subscribers only.
        """
        if raw_subscriber_ids is None or isinstance(raw_subscriber_ids, (str, int)):
            raw_subscriber_ids = [raw_subscriber_ids]
        canonical_ids: List[str] = [normalize_subscriber_id(raw) for raw in raw_subscriber_ids]
        if not canonical_ids:
            raise ValidationError("subscriberId is required")

        if self.whitelist.is_whitelisted(canonical_ids[0]):
            return classify_response(None, self.whitelist.get_charging_info_response())

        masked_ids = [self.masker.get_masked_id(canonical_id) for canonical_id in canonical_ids]
        config = self._config_for(canonical_ids[0])
        return await self._call(config, Operation.GET_CHARGING_INFO, {"subscriberIds": masked_ids})
