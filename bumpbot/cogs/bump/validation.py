"""Minecraft username validation"""

import re

from ...core.errors import ValidationError

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 16

# ASCII only; \w would also accept Unicode letters and digits
_USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]{3,16}")


def validate_username(candidate: str) -> bool:
    """Return True if candidate is a well-formed Minecraft username."""
    return _USERNAME_PATTERN.fullmatch(candidate) is not None


def ensure_valid_username(candidate: str) -> str:
    """Return candidate unchanged, or raise ValidationError."""
    if not validate_username(candidate):
        raise ValidationError(candidate)
    return candidate
