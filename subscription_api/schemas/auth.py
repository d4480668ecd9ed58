"""
Pydantic schemas for device registration.
"""
from pydantic import BaseModel
from typing import Optional


class UpdateDeviceRequest(BaseModel):
    deviceId: Optional[str] = None


class UpdateDeviceResponse(BaseModel):
    apiStatus: str = "success"
    message: str
    updatedAt: str


class CheckDeviceResponse(BaseModel):
    apiStatus: str = "success"
    message: str
    isCurrentDevice: bool
    updatedAt: Optional[str] = None


class SubscriberIdResponse(BaseModel):
    apiStatus: str = "success"
    subscriberId: str
