"""
Authentication and device-lock dependencies
"""
import logging
from typing import Optional

from fastapi import Depends, Header, Request

from ..core.context import AppContext
from ..core.errors import DeviceIdRequired, DeviceMismatch, Unauthorized
from ..services.session_store import SessionStore
from .context import get_context, get_session_store

logger = logging.getLogger(__name__)


async def get_current_user_id(
    request: Request,
    context: AppContext = Depends(get_context),
) -> str:
    """
    Resolve the caller's user id from the Authorization header.

    Raises:
        Unauthorized: If the header is missing or the oracle rejects the token
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise Unauthorized("Missing or invalid authorization header")

    token = auth_header[7:]  # Remove "Bearer " prefix
    user_id = await context.identity_oracle.verify_token(token)

    # Picked up by LoggingMiddleware
    request.state.user_id = user_id
    return user_id


def require_active_device(
    user_id: str = Depends(get_current_user_id),
    x_device_id: Optional[str] = Header(None),
    store: SessionStore = Depends(get_session_store),
) -> str:
    """
    Reject requests from any device other than the user's registered one.

    Raises:
        DeviceIdRequired: If X-Device-Id is missing
        DeviceMismatch: If another device holds the session
    """
    if not x_device_id:
        raise DeviceIdRequired()

    if not store.is_valid_device(user_id, x_device_id):
        logger.info(f"[Session] Device mismatch for user={user_id}")
        raise DeviceMismatch()
    return user_id
