"""
Core Utilities.

Time and string helpers shared by models and services.
"""

import re
from datetime import datetime, timezone

_WHITESPACE = re.compile(r"\s+")


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def strip_whitespace(value: str) -> str:
    """Remove every whitespace run from a string, preserving case."""
    return _WHITESPACE.sub("", value)
