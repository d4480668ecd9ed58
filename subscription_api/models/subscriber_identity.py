from datetime import datetime
from sqlalchemy import Column, String, DateTime, Index
from ..db import Base


class SubscriberIdentity(Base):
    """Canonical subscriber id -> provider-assigned masked id."""
    __tablename__ = "subscriber_identities"

    subscriber_id = Column(String(11), primary_key=True)  # canonical, "94"-prefixed
    masked_id = Column(String(512), nullable=False)
    owner_user_id = Column(String(128), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_subscriber_identity_owner", "owner_user_id", "created_at"),
    )
