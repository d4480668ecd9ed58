"""
Whitelist bypass for designated test subscribers.

When ENABLE_WHITELIST is on, allowlisted subscriber ids never reach an
upstream provider: every operation answers with a canned response shaped
exactly like the real provider body, so classification downstream treats
it the same way.
"""
import logging
from typing import Iterable, Optional

from .telco.client import ProviderResponse
from .telco.providers import SUCCESS_STATUS_CODE
from ..utils.phone import get_phone_last4

logger = logging.getLogger(__name__)

TEST_OTP = "123456"
INVALID_OTP_STATUS_CODE = "E1850"
MOCK_MASKED_ID = "tel:sdfasdfasdfwqerqwtgfgsafgasfgasdfasdfasdfasdfasdfasf"


class WhitelistBypass:
    """Allowlist check plus canned provider responses."""

    def __init__(self, enabled: bool = False, subscriber_ids: Optional[Iterable[str]] = None):
        self.enabled = enabled
        self.subscriber_ids = frozenset(subscriber_ids or ())

        if self.enabled:
            logger.info(f"[Whitelist] Bypass enabled: {len(self.subscriber_ids)} subscriber(s)")

    def is_whitelisted(self, canonical_id: str) -> bool:
        if not self.enabled:
            return False
        matched = canonical_id in self.subscriber_ids
        if matched:
            logger.info(f"[Whitelist] Bypassing upstream for subscriber ending {get_phone_last4(canonical_id)}")
        return matched

    def otp_request_response(self, canonical_id: str) -> ProviderResponse:
        return ProviderResponse(status_code=200, data={
            "referenceNo": f"{canonical_id}111111111111111111111",
            "statusDetail": "Request was successfully processed.",
            "version": "1.0",
            "statusCode": SUCCESS_STATUS_CODE,
        })

    def otp_verify_response(self, otp: str) -> ProviderResponse:
        if otp == TEST_OTP:
            return ProviderResponse(status_code=200, data={
                "version": "1.0",
                "statusCode": SUCCESS_STATUS_CODE,
                "subscriptionStatus": "REGISTERED",
                "statusDetail": "Success",
                "subscriberId": MOCK_MASKED_ID,
            })
        return ProviderResponse(status_code=200, data={
            "statusDetail": "Invalid OTP",
            "version": "1.0",
            "statusCode": INVALID_OTP_STATUS_CODE,
        })

    def unsubscribe_response(self) -> ProviderResponse:
        return ProviderResponse(status_code=200, data={
            "version": "1.0",
            "statusCode": SUCCESS_STATUS_CODE,
            "statusDetail": "not registered",
            "subscriptionStatus": "UNREGISTERED",
        })

    def get_status_response(self) -> ProviderResponse:
        return ProviderResponse(status_code=200, data={
            "subscriptionStatus": "REGISTERED",
            "statusDetail": "Request was successfully processed.",
            "version": "1.0",
            "statusCode": SUCCESS_STATUS_CODE,
        })

    def get_charging_info_response(self) -> ProviderResponse:
        return ProviderResponse(status_code=200, data={
            "version": "1.0",
            "destinationResponses": [
                {
                    "subscriberId": "tel:94712342345",
                    "subscriptionStatus": "REGISTERED",
                    "lastChargedDate": "2020-01-23 22:03:22",
                    "lastChargedAmount": "30.00 LKR",
                    "numberType": "postpaid",
                    "statusCode": SUCCESS_STATUS_CODE,
                    "statusDetail": "Request was successfully processed",
                },
            ],
            "statusCode": SUCCESS_STATUS_CODE,
            "statusDetail": "Success.",
        })
