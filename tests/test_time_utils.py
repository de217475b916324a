"""Tests for time utilities."""

from datetime import datetime

import pytest

from cactiwmi.utils.time import debug_log_timestamp


@pytest.mark.parametrize(
    "dt, expected",
    [
        (datetime(2017, 3, 17, 13, 2, 3), "Friday 17th of March 2017 01:02:03 PM"),
        (datetime(2015, 6, 1, 9, 0, 0), "Monday 1st of June 2015 09:00:00 AM"),
        (datetime(2024, 1, 22, 0, 30, 0), "Monday 22nd of January 2024 12:30:00 AM"),
        (datetime(2024, 1, 23, 12, 0, 0), "Tuesday 23rd of January 2024 12:00:00 PM"),
        (datetime(2024, 1, 11, 12, 0, 0), "Thursday 11th of January 2024 12:00:00 PM"),
        (datetime(2024, 1, 12, 12, 0, 0), "Friday 12th of January 2024 12:00:00 PM"),
        (datetime(2024, 1, 13, 12, 0, 0), "Saturday 13th of January 2024 12:00:00 PM"),
    ],
)
def test_debug_log_timestamp_format(dt, expected):
    assert debug_log_timestamp(dt) == expected


def test_debug_log_timestamp_defaults_to_now():
    result = debug_log_timestamp()
    assert " of " in result
    assert result.endswith(("AM", "PM"))
