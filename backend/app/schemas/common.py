from __future__ import annotations

import re

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
YEAR_PATTERN = r"^\d{4}$"


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None
