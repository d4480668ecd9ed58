"""
Subscriber id normalization and validation utilities
"""
import re
from typing import Callable, List, Optional, Tuple, Union

from ..core.errors import ValidationError

CANONICAL_PREFIX = "94"
CANONICAL_LENGTH = 11

# ASCII only: str.isdigit and \d both accept fullwidth and Arabic-Indic digits
_DIGITS_ONLY = re.compile(r"[0-9]+")
_WHITESPACE = re.compile(r"\s")

# Ordered, first-match prefix rules: (prefix, rewrite)
PREFIX_RULES: List[Tuple[str, Callable[[str], str]]] = [
    ("94", lambda digits: digits),
    ("0", lambda digits: CANONICAL_PREFIX + digits[1:]),
    ("7", lambda digits: CANONICAL_PREFIX + digits),
]


def normalize_subscriber_id(raw: Optional[Union[str, int]]) -> str:
    """
    Canonicalize a user-supplied subscriber id.

    Args:
        raw: Free-form phone number, e.g. "071 123 4567", "94711234567", 711234567

    Returns:
        Canonical id: 11 digits, "94"-prefixed (e.g., 94711234567)

    Raises:
        ValidationError: If the id is missing, contains non-digits, or has the wrong length
    """
    if raw is None or raw == "":
        raise ValidationError("subscriberId is required")

    digits = _WHITESPACE.sub("", str(raw))
    if not _DIGITS_ONLY.fullmatch(digits):
        raise ValidationError("Invalid subscriberId")

    canonical = ""
    for prefix, rewrite in PREFIX_RULES:
        if digits.startswith(prefix):
            canonical = rewrite(digits)
            break

    if len(canonical) != CANONICAL_LENGTH:
        raise ValidationError("Invalid subscriberId")

    return canonical


def get_phone_last4(phone: str) -> str:
    """
    Get last 4 digits of phone number for safe logging.

    Returns:
        Last 4 digits as string, or all digits if fewer than 4
    """
    digits = ''.join(filter(str.isdigit, phone or ""))

    if len(digits) >= 4:
        return digits[-4:]
    return digits


def to_tel_uri(canonical_id: str) -> str:
    """Providers address subscribers as tel: URIs."""
    return f"tel:{canonical_id}"
