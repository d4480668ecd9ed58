"""
Device registration and subscriber lookup for the authenticated user
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from ..core.errors import DeviceIdRequired, DeviceMismatch
from ..dependencies.auth import get_current_user_id
from ..dependencies.context import get_identity_masker, get_session_store
from ..schemas.auth import (
    CheckDeviceResponse,
    SubscriberIdResponse,
    UpdateDeviceRequest,
    UpdateDeviceResponse,
)
from ..services.identity_masker import IdentityMasker
from ..services.session_store import SessionStore


router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/subscriber-id", response_model=SubscriberIdResponse)
def get_subscriber_id(
    user_id: str = Depends(get_current_user_id),
    masker: IdentityMasker = Depends(get_identity_masker),
):
    """Subscriber id most recently verified by the caller."""
    subscriber_id = masker.get_subscriber_id_by_user_id(user_id)
    return SubscriberIdResponse(subscriberId=subscriber_id)


@router.post("/update-device", response_model=UpdateDeviceResponse)
def update_device(
    payload: UpdateDeviceRequest,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    """
    Bind the caller's session to ``deviceId``.

    Exempt from the device-lock check: this is how a new device takes over.
    """
    if not payload.deviceId:
        raise DeviceIdRequired(status_code=400)

    registration = store.register_device(user_id, payload.deviceId)
    return UpdateDeviceResponse(
        message="Device registered successfully",
        updatedAt=registration.updated_at.isoformat(),
    )


@router.get("/check-device", response_model=CheckDeviceResponse)
def check_device(
    user_id: str = Depends(get_current_user_id),
    x_device_id: Optional[str] = Header(None),
    store: SessionStore = Depends(get_session_store),
):
    if not x_device_id:
        raise DeviceIdRequired(status_code=400)

    current = store.get_current_device(user_id)
    if current is None or current.device_id != x_device_id:
        error = DeviceMismatch("Device is not the current registered device")
        return JSONResponse(
            status_code=error.status_code,
            content={
                **error.to_body(),
                "isCurrentDevice": False,
                "updatedAt": current.updated_at.isoformat() if current else None,
            },
        )

    return CheckDeviceResponse(
        message="Device is valid",
        isCurrentDevice=True,
        updatedAt=current.updated_at.isoformat(),
    )
