"""
Pydantic schemas for the subscription endpoints.

Fields are optional at the schema level; presence and format are checked
by the workflow so every route reports the same validation messages.
Provider responses are passed through as-is, so no response models here.
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional, Union

SubscriberIdInput = Optional[Union[str, int]]


class OtpRequest(BaseModel):
    subscriberId: SubscriberIdInput = None
    device: Optional[str] = None
    os: Optional[str] = None


class OtpVerifyRequest(BaseModel):
    subscriberId: SubscriberIdInput = None
    referenceNo: Optional[str] = None
    otp: Optional[str] = None

    @field_validator("referenceNo", "otp", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        # Clients send otp both as "123456" and 123456
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class SubscriberRequest(BaseModel):
    subscriberId: SubscriberIdInput = None


class ChargingInfoRequest(BaseModel):
    subscriberId: Optional[Union[List[Union[str, int]], str, int]] = None
