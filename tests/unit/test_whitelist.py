"""
Whitelist bypass: canned responses, no upstream traffic
"""
import pytest

from subscription_api.core.errors import UpstreamError
from subscription_api.services.identity_masker import IdentityMasker
from subscription_api.services.otp_workflow import OtpWorkflow
from subscription_api.services.whitelist import WhitelistBypass

WHITELISTED_ID = "94770000001"


@pytest.fixture
def workflow(context, db):
    return OtpWorkflow(context.providers, context.provider_client, IdentityMasker(db), context.whitelist)


def test_disabled_whitelist_matches_nothing():
    whitelist = WhitelistBypass(enabled=False, subscriber_ids=[WHITELISTED_ID])

    assert whitelist.is_whitelisted(WHITELISTED_ID) is False


def test_enabled_whitelist_membership():
    whitelist = WhitelistBypass(enabled=True, subscriber_ids=[WHITELISTED_ID])

    assert whitelist.is_whitelisted(WHITELISTED_ID) is True
    assert whitelist.is_whitelisted("94771234567") is False


@pytest.mark.asyncio
async def test_verify_with_test_otp_succeeds(workflow, upstream):
    result = await workflow.verify_otp(WHITELISTED_ID, "REF", "123456")

    assert result["statusCode"] == "S1000"
    assert result["subscriptionStatus"] == "REGISTERED"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_verify_with_other_otp_fails(workflow, upstream):
    with pytest.raises(UpstreamError) as exc_info:
        await workflow.verify_otp(WHITELISTED_ID, "REF", "654321")

    assert exc_info.value.status_code == 400
    assert exc_info.value.to_body()["statusCode"] == "E1850"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_request_otp_reference_derived_from_id(workflow, upstream):
    result = await workflow.request_otp("0770000001")

    assert result["referenceNo"].startswith(WHITELISTED_ID)
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_masked_id_operations_skip_lookup(workflow, upstream):
    # No mapping saved: the bypass answers before any masked-id lookup
    assert (await workflow.unsubscribe(WHITELISTED_ID))["subscriptionStatus"] == "UNREGISTERED"
    assert (await workflow.get_status(WHITELISTED_ID))["subscriptionStatus"] == "REGISTERED"
    info = await workflow.get_charging_info(WHITELISTED_ID)
    assert info["destinationResponses"][0]["statusCode"] == "S1000"
    assert upstream.requests == []
