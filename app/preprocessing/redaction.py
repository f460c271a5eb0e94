"""Replacement strings for detected PII values."""

from app.preprocessing.models import RedactionMode

MASK_CHAR = "*"
MAX_MASK_LENGTH = 8


def redact(
    mode: RedactionMode,
    original_value: str,
    category: str,
    sequence_number: int,
) -> str:
    """Return the replacement for *original_value* under *mode*.

    The sequence number is allocated by the caller; only ANONYMIZE uses it.
    An unrecognized mode leaves the value untouched.
    """
    if mode == RedactionMode.ANONYMIZE:
        return f"[{category.upper()}_{sequence_number}]"
    if mode == RedactionMode.REMOVE:
        return ""
    if mode == RedactionMode.MASK:
        return MASK_CHAR * min(len(original_value), MAX_MASK_LENGTH)
    return original_value
