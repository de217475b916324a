"""Timestamp helpers for the verbose debug log."""

from datetime import datetime, timezone
from typing import Optional


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def debug_log_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Format a timestamp the way the verbose debug records always have.
    
    Args:
        dt: Datetime to format. Defaults to the current local time.
        
    Returns:
        Human-readable timestamp (e.g., 'Friday 17th of March 2017 01:02:03 PM')
        
    Example:
        >>> debug_log_timestamp(datetime(2017, 3, 17, 13, 2, 3))
        'Friday 17th of March 2017 01:02:03 PM'
    """
    if dt is None:
        dt = datetime.now(timezone.utc).astimezone()
    suffix = _ordinal_suffix(dt.day)
    return f"{dt:%A} {dt.day}{suffix} of {dt:%B %Y %I:%M:%S %p}"
