"""Character-level scrubbing applied to user input and wmic output.

Pollers and templates pass values through several layers of quoting, and
the poller reads results as space-separated key:value pairs. The helpers
below implement the exact encodings those consumers expect; do not widen
the character sets.
"""

from typing import Optional

# Stripped from both ends of every user-supplied value.
TRIM_CHARS = "'\"\\"

# Stands in for a space in filter input and in emitted values.
LEGACY_SPACE = "+"


def strip_trim_chars(value: str) -> str:
    """Remove quotes, double quotes and backslashes from both ends."""
    return value.strip(TRIM_CHARS)


def decode_legacy_spaces(value: str) -> str:
    """Turn every `+` into a space (filter input)."""
    return value.replace(LEGACY_SPACE, " ")


def encode_legacy_spaces(value: str) -> str:
    """Turn every space into `+` (emitted cell values)."""
    return value.replace(" ", LEGACY_SPACE)


def quote_condition_value(value: str) -> str:
    """Wrap a filter value in single quotes for the WHERE clause."""
    return f"'{value}'"


def sanitize_condition(value: Optional[str]) -> Optional[str]:
    """
    Scrub a filter key or value.
    
    Args:
        value: Raw filter input, possibly None
        
    Returns:
        The decoded, trimmed value, or None when nothing usable is left
    """
    if value is None:
        return None
    cleaned = strip_trim_chars(decode_legacy_spaces(value))
    return cleaned or None
