"""
Device-locked session management.

A user has at most one session row. Registering a device always wins:
the row's device_id is overwritten, and the previously registered device
fails validation from its next request onward. There is no notification
to the displaced device.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import dialect_insert
from ..models import UserSession

logger = logging.getLogger(__name__)


@dataclass
class DeviceRegistration:
    session_id: str
    device_id: str
    updated_at: datetime


@dataclass
class CurrentDevice:
    device_id: str
    updated_at: datetime


class SessionStore:
    """Single-active-device session persistence keyed by user id."""

    def __init__(self, db: Session):
        self.db = db

    def _upsert_statement(self, user_id: str, device_id: str, now: datetime):
        insert = dialect_insert(self.db)
        if insert is None:
            return None

        stmt = insert(UserSession).values(
            id=str(uuid.uuid4()),
            user_id=user_id,
            device_id=device_id,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        return stmt.on_conflict_do_update(
            index_elements=[UserSession.user_id],
            set_={
                "device_id": stmt.excluded.device_id,
                "updated_at": stmt.excluded.updated_at,
                "is_active": True,
            },
        )

    def register_device(self, user_id: str, device_id: str) -> DeviceRegistration:
        """
        Create or take over the user's session for ``device_id``.

        A single INSERT ... ON CONFLICT (user_id) DO UPDATE, so two devices
        registering at once serialize on the unique key and the last
        committed write wins.
        """
        now = datetime.utcnow()
        stmt = self._upsert_statement(user_id, device_id, now)

        if stmt is not None:
            self.db.execute(stmt)
        else:
            # Dialects without ON CONFLICT: lock the row, then update or insert
            session = self.db.execute(
                select(UserSession).where(UserSession.user_id == user_id).with_for_update()
            ).scalar_one_or_none()
            if session is None:
                self.db.add(UserSession(user_id=user_id, device_id=device_id, created_at=now, updated_at=now))
            else:
                session.device_id = device_id
                session.updated_at = now
                session.is_active = True
        self.db.commit()

        session = self.db.execute(
            select(UserSession).where(UserSession.user_id == user_id)
        ).scalar_one()
        self.db.refresh(session)

        logger.info(f"[Session] Device registered for user={user_id} session={session.id}")
        return DeviceRegistration(
            session_id=session.id,
            device_id=session.device_id,
            updated_at=session.updated_at,
        )

    def is_valid_device(self, user_id: str, device_id: str) -> bool:
        """True iff the user's active session is bound to exactly ``device_id``."""
        session = self.db.execute(
            select(UserSession.id).where(
                UserSession.user_id == user_id,
                UserSession.device_id == device_id,
                UserSession.is_active.is_(True),
            )
        ).first()
        return session is not None

    def get_current_device(self, user_id: str) -> Optional[CurrentDevice]:
        row = self.db.execute(
            select(UserSession.device_id, UserSession.updated_at).where(
                UserSession.user_id == user_id,
                UserSession.is_active.is_(True),
            )
        ).first()
        if row is None:
            return None
        return CurrentDevice(device_id=row.device_id, updated_at=row.updated_at)
