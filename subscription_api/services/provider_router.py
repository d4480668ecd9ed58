"""
Provider routing by subscriber id prefix
"""
from .telco.providers import Provider

MOBITEL_PREFIXES = ("9470", "9471")


def resolve_provider(canonical_id: str) -> Provider:
    """
    Pick the upstream provider for a canonical subscriber id.

    "9470"/"9471" go to Mobitel; everything else goes to Dialog, including
    unusual prefixes that still pass normalization.
    """
    if canonical_id.startswith(MOBITEL_PREFIXES):
        return Provider.MOBITEL
    return Provider.DIALOG
