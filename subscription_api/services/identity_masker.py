"""
Subscriber id <-> provider masked id mapping.
"""
import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import MaskedIdNotFound, SubscriberIdNotFound
from ..db import dialect_insert
from ..models import SubscriberIdentity
from ..utils.phone import get_phone_last4, normalize_subscriber_id

logger = logging.getLogger(__name__)


class IdentityMasker:
    def __init__(self, db: Session):
        self.db = db

    def save_identity(
        self,
        owner_user_id: Optional[str],
        subscriber_id: Optional[str],
        masked_id: Optional[str],
    ) -> bool:
        """
        Persist the mapping for ``subscriber_id``, overwriting any previous one.

        Never raises. Returns False when either id is missing or the write fails.
        """
        if not subscriber_id or not masked_id:
            logger.warning("[Identity] Missing subscriberId or maskedId, nothing saved")
            return False

        now = datetime.utcnow()
        try:
            insert = dialect_insert(self.db)
            if insert is not None:
                stmt = insert(SubscriberIdentity).values(
                    subscriber_id=subscriber_id,
                    masked_id=masked_id,
                    owner_user_id=owner_user_id,
                    created_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[SubscriberIdentity.subscriber_id],
                    set_={
                        "masked_id": stmt.excluded.masked_id,
                        "owner_user_id": stmt.excluded.owner_user_id,
                        "created_at": stmt.excluded.created_at,
                    },
                )
                self.db.execute(stmt)
            else:
                identity = self.db.execute(
                    select(SubscriberIdentity)
                    .where(SubscriberIdentity.subscriber_id == subscriber_id)
                    .with_for_update()
                ).scalar_one_or_none()
                if identity is None:
                    self.db.add(SubscriberIdentity(
                        subscriber_id=subscriber_id,
                        masked_id=masked_id,
                        owner_user_id=owner_user_id,
                        created_at=now,
                    ))
                else:
                    identity.masked_id = masked_id
                    identity.owner_user_id = owner_user_id
                    identity.created_at = now
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"[Identity] Failed to save mapping for subscriber ending {get_phone_last4(subscriber_id)}: "
                f"{type(e).__name__}: {e}"
            )
            return False

        logger.info(f"[Identity] Saved mapping for subscriber ending {get_phone_last4(subscriber_id)}")
        return True

    def get_masked_id(self, raw_subscriber_id: Union[str, int, None]) -> str:
        """
        Resolve the masked id for a subscriber.

        Raises:
            ValidationError: If the subscriber id does not normalize
            MaskedIdNotFound: If no mapping has been saved
        """
        subscriber_id = normalize_subscriber_id(raw_subscriber_id)
        masked_id = self.db.execute(
            select(SubscriberIdentity.masked_id).where(SubscriberIdentity.subscriber_id == subscriber_id)
        ).scalar_one_or_none()
        if masked_id is None:
            logger.info(f"[Identity] No mapping for subscriber ending {get_phone_last4(subscriber_id)}")
            raise MaskedIdNotFound()
        return masked_id

    def get_subscriber_id_by_user_id(self, user_id: str) -> str:
        """Most recently associated subscriber id for ``user_id``."""
        subscriber_id = self.db.execute(
            select(SubscriberIdentity.subscriber_id)
            .where(SubscriberIdentity.owner_user_id == user_id)
            .order_by(SubscriberIdentity.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()
        if subscriber_id is None:
            raise SubscriberIdNotFound()
        return subscriber_id
