"""
Device-locked user session.

One row per user (unique on user_id). Re-registering from any device
overwrites device_id in place, which is how the single-active-device
policy is enforced: the displaced device simply stops validating.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Index
from ..db import Base


def _uuid_str():
    return str(uuid.uuid4())


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    user_id = Column(String(128), nullable=False)
    device_id = Column(String(255), nullable=False)

    # No logout path exists; kept so a future revoke does not need a migration
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("uq_user_sessions_user_id", "user_id", unique=True),
    )
