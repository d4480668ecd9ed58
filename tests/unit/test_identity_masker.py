"""
Subscriber identity mapping persistence
"""
from datetime import datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from subscription_api.core.errors import MaskedIdNotFound, SubscriberIdNotFound, ValidationError
from subscription_api.models import SubscriberIdentity
from subscription_api.services.identity_masker import IdentityMasker


def test_round_trip(db):
    masker = IdentityMasker(db)

    assert masker.save_identity("user-1", "94711234567", "MASK1") is True
    assert masker.get_masked_id("94711234567") == "MASK1"


def test_lookup_normalizes_input(db):
    masker = IdentityMasker(db)
    masker.save_identity("user-1", "94711234567", "MASK1")

    assert masker.get_masked_id("0711234567") == "MASK1"
    assert masker.get_masked_id("711234567") == "MASK1"


def test_unknown_subscriber_not_found(db):
    masker = IdentityMasker(db)

    with pytest.raises(MaskedIdNotFound) as exc_info:
        masker.get_masked_id("94709999999")
    assert exc_info.value.status_code == 404


def test_invalid_subscriber_is_validation_error_not_not_found(db):
    masker = IdentityMasker(db)

    with pytest.raises(ValidationError):
        masker.get_masked_id("not-a-number")


def test_overwrite_is_last_write_wins(db):
    masker = IdentityMasker(db)
    masker.save_identity("user-1", "94711234567", "MASK1")
    masker.save_identity("user-1", "94711234567", "MASK2")

    assert masker.get_masked_id("94711234567") == "MASK2"
    assert db.query(SubscriberIdentity).count() == 1


@pytest.mark.parametrize("subscriber_id,masked_id", [(None, "MASK1"), ("94711234567", None), ("", "")])
def test_missing_values_return_false(db, subscriber_id, masked_id):
    masker = IdentityMasker(db)

    assert masker.save_identity("user-1", subscriber_id, masked_id) is False
    assert db.query(SubscriberIdentity).count() == 0


def test_database_failure_returns_false(db):
    masker = IdentityMasker(db)

    with patch.object(db, "execute", side_effect=OperationalError("INSERT", {}, Exception("locked"))):
        assert masker.save_identity("user-1", "94711234567", "MASK1") is False


def test_subscriber_id_by_user_returns_most_recent(db):
    masker = IdentityMasker(db)
    masker.save_identity("user-1", "94711234567", "MASK1")
    masker.save_identity("user-1", "94771234567", "MASK2")
    older = db.get(SubscriberIdentity, "94711234567")
    older.created_at = datetime(2020, 1, 1)
    db.commit()

    assert masker.get_subscriber_id_by_user_id("user-1") == "94771234567"


def test_subscriber_id_by_unknown_user(db):
    masker = IdentityMasker(db)

    with pytest.raises(SubscriberIdNotFound):
        masker.get_subscriber_id_by_user_id("nobody")


@patch("subscription_api.services.identity_masker.dialect_insert", return_value=None)
def test_row_lock_path_creates_then_overwrites(mock_insert, db):
    masker = IdentityMasker(db)

    assert masker.save_identity("user-1", "94711234567", "MASK1") is True
    assert masker.get_masked_id("94711234567") == "MASK1"
    assert masker.save_identity("user-2", "94711234567", "MASK2") is True

    assert mock_insert.called
    assert masker.get_masked_id("94711234567") == "MASK2"
    assert masker.get_subscriber_id_by_user_id("user-2") == "94711234567"
    assert db.query(SubscriberIdentity).count() == 1
