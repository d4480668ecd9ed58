import pytest

from subscription_api.services.provider_router import resolve_provider
from subscription_api.services.telco import Provider


@pytest.mark.parametrize(
    "canonical_id,expected",
    [
        ("94701234567", Provider.MOBITEL),
        ("94711234567", Provider.MOBITEL),
        ("94772234567", Provider.DIALOG),
        ("94761234567", Provider.DIALOG),
        # Unusual prefixes that pass normalization still fall through to Dialog
        ("94001234567", Provider.DIALOG),
    ],
)
def test_resolve_provider(canonical_id, expected):
    assert resolve_provider(canonical_id) is expected
