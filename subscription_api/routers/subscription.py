"""
OTP subscription endpoints.

Responses are the provider body prefixed with ``apiStatus``. get-status and
get-charging-info skip the device-lock check; every other route requires
the caller's registered device.
"""
from fastapi import APIRouter, Depends

from ..dependencies.auth import get_current_user_id, require_active_device
from ..dependencies.context import get_otp_workflow
from ..schemas.subscription import (
    ChargingInfoRequest,
    OtpRequest,
    OtpVerifyRequest,
    SubscriberRequest,
)
from ..services.otp_workflow import OtpWorkflow

router = APIRouter(prefix="/subscription", tags=["subscription"])


@router.post("/otp/request")
async def request_otp(
    payload: OtpRequest,
    user_id: str = Depends(require_active_device),
    workflow: OtpWorkflow = Depends(get_otp_workflow),
):
    return await workflow.request_otp(payload.subscriberId, device=payload.device, os=payload.os)


@router.post("/otp/verify")
async def verify_otp(
    payload: OtpVerifyRequest,
    user_id: str = Depends(require_active_device),
    workflow: OtpWorkflow = Depends(get_otp_workflow),
):
    return await workflow.verify_otp(
        payload.subscriberId,
        payload.referenceNo,
        payload.otp,
        owner_user_id=user_id,
    )


@router.post("/unsubscribe")
async def unsubscribe(
    payload: SubscriberRequest,
    user_id: str = Depends(require_active_device),
    workflow: OtpWorkflow = Depends(get_otp_workflow),
):
    return await workflow.unsubscribe(payload.subscriberId)


@router.post("/get-status")
async def get_status(
    payload: SubscriberRequest,
    user_id: str = Depends(get_current_user_id),
    workflow: OtpWorkflow = Depends(get_otp_workflow),
):
    return await workflow.get_status(payload.subscriberId)


@router.post("/get-charging-info")
async def get_charging_info(
    payload: ChargingInfoRequest,
    user_id: str = Depends(get_current_user_id),
    workflow: OtpWorkflow = Depends(get_otp_workflow),
):
    return await workflow.get_charging_info(payload.subscriberId)
