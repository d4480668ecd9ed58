"""
Concurrent writers against a file-backed database.

Each thread gets its own session and connection, so the unique keys and
ON CONFLICT upserts are what keep the tables consistent.
"""
import threading

import pytest
from sqlalchemy.orm import sessionmaker

from subscription_api.db import Base, build_engine
from subscription_api.models import SubscriberIdentity, UserSession
from subscription_api.services.identity_masker import IdentityMasker
from subscription_api.services.session_store import SessionStore

# Matches the QueuePool size build_engine uses for file-backed SQLite
WRITERS = 5


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'concurrency.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _run_concurrently(target, count):
    barrier = threading.Barrier(count)
    results = [None] * count
    errors = []

    def worker(index):
        barrier.wait()
        try:
            results[index] = target(index)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results, errors


class TestConcurrentDeviceRegistration:
    def test_one_row_and_winner_is_a_contender(self, session_factory):
        devices = [f"device-{i}" for i in range(WRITERS)]

        def register(index):
            session = session_factory()
            try:
                return SessionStore(session).register_device("user-1", devices[index])
            finally:
                session.close()

        results, errors = _run_concurrently(register, WRITERS)

        assert errors == [], f"Unexpected errors: {errors}"
        assert all(result is not None for result in results)

        session = session_factory()
        try:
            rows = session.query(UserSession).filter(UserSession.user_id == "user-1").all()
            assert len(rows) == 1
            assert rows[0].device_id in devices
            # Every caller saw the same row
            assert {result.session_id for result in results} == {rows[0].id}

            store = SessionStore(session)
            valid = [device for device in devices if store.is_valid_device("user-1", device)]
            assert valid == [rows[0].device_id]
        finally:
            session.close()


class TestConcurrentIdentitySave:
    def test_one_mapping_and_winner_is_a_contender(self, session_factory):
        masked_ids = [f"MASK{i}" for i in range(WRITERS)]

        def save(index):
            session = session_factory()
            try:
                return IdentityMasker(session).save_identity("user-1", "94711234567", masked_ids[index])
            finally:
                session.close()

        results, errors = _run_concurrently(save, WRITERS)

        assert errors == [], f"Unexpected errors: {errors}"
        assert any(results)

        session = session_factory()
        try:
            rows = session.query(SubscriberIdentity).filter(
                SubscriberIdentity.subscriber_id == "94711234567"
            ).all()
            assert len(rows) == 1
            assert rows[0].masked_id in masked_ids
            assert IdentityMasker(session).get_masked_id("94711234567") == rows[0].masked_id
        finally:
            session.close()
