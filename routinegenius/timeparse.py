"""
Time model (schedule text -> typed intervals).

- Parses the free-text weekly schedule of a section into TimeInterval objects
- Converts 12-hour "h:mm AM/PM" times into 24-hour "HH:MM" and minutes
- Maps an interval onto the fixed 80-minute teaching slots of a day

Slot rule:
    start < slot_end AND end > slot_start
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from routinegenius.model import TimeInterval


DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

TIME_SLOTS = (
    "08:00-09:20",
    "09:30-10:50",
    "11:00-12:20",
    "12:30-13:50",
    "14:00-15:20",
    "15:30-16:50",
    "17:00-18:20",
)

_SEP = "|||"

_DAY_RE = re.compile(r"^(" + "|".join(DAYS) + r")", re.IGNORECASE)
_TIME_PAIR_RE = re.compile(r"(\d{1,2}:\d{2}\s*[AP]M)\s*-\s*(\d{1,2}:\d{2}\s*[AP]M)", re.IGNORECASE)
_TIME_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(am|pm)")
_ROOM_LEAD_RE = re.compile(r"^[\-\s(),]+")
_ROOM_TRAIL_RE = re.compile(r"[(),\s]+$")


# ---------------------------------------------------------------------------
# Clock conversions
# ---------------------------------------------------------------------------


def convert_to_24_hour(text: str) -> Optional[str]:
    """
    Convert 'h:mm AM/PM' to 'HH:MM'. Returns None if the text does not match.
    """
    if not text or not isinstance(text, str):
        return None
    match = _TIME_12H_RE.match(text.strip().lower())
    if not match:
        return None

    hours = int(match.group(1))
    minutes = match.group(2)
    period = match.group(3)

    if period == "pm" and hours < 12:
        hours += 12
    if period == "am" and hours == 12:
        hours = 0
    return f"{hours:02d}:{minutes}"


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def format_minutes_12h(minutes: int) -> str:
    h, m = divmod(minutes, 60)
    period = "PM" if h >= 12 else "AM"
    return f"{h % 12 or 12:02d}:{m:02d} {period}"


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


def slot_bounds(slot_id: str) -> tuple[int, int]:
    start_s, end_s = slot_id.split("-", 1)
    return time_to_minutes(start_s), time_to_minutes(end_s)


def affected_time_slots(start: Union[int, str], end: Union[int, str]) -> List[str]:
    """
    Return the slot ids an interval touches, in day order.

    Accepts minutes or 'HH:MM' strings. Touching a slot boundary does not count.
    """
    try:
        start_m = time_to_minutes(start) if isinstance(start, str) else int(start)
        end_m = time_to_minutes(end) if isinstance(end, str) else int(end)
    except ValueError:
        return []

    out: List[str] = []
    for slot in TIME_SLOTS:
        slot_start, slot_end = slot_bounds(slot)
        if start_m < slot_end and end_m > slot_start:
            out.append(slot)
    return out


# ---------------------------------------------------------------------------
# Schedule text parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def _split_chunks(raw: str) -> List[str]:
    # Commas and newlines separate chunks; every day name opens a new chunk.
    processed = raw.replace(",", _SEP).replace("\n", _SEP)
    for day in DAYS:
        processed = re.sub(day, _SEP + day, processed, flags=re.IGNORECASE)
    return [c for c in processed.split(_SEP) if c.strip()]


def parse_schedule_chunk(chunk: str) -> Optional[TimeInterval]:
    """
    Parses one day-tagged chunk, e.g. 'SUNDAY(08:00 AM-09:20 AM-09C-18C)'.
    """
    day_match = _DAY_RE.match(chunk)
    if not day_match:
        return None
    day = day_match.group(0).capitalize()

    time_match = _TIME_PAIR_RE.search(chunk)
    if not time_match:
        return None

    start_24 = convert_to_24_hour(time_match.group(1))
    end_24 = convert_to_24_hour(time_match.group(2))
    if not start_24 or not end_24:
        return None

    try:
        start = time_to_minutes(start_24)
        end = time_to_minutes(end_24)
    except ValueError:
        # e.g. '25:00 AM'
        return None
    # end <= start is treated as malformed
    if end <= start:
        return None

    room = chunk[time_match.end():]
    room = _ROOM_TRAIL_RE.sub("", _ROOM_LEAD_RE.sub("", room)).strip()

    return TimeInterval(day=day, start_minute=start, end_minute=end, room=room or "N/A")


def parse_schedule_string(raw: Optional[str]) -> List[TimeInterval]:
    """
    Parses a whole schedule description into intervals.
    Chunks without a day name or a time pair are dropped.
    """
    if not raw:
        return []

    intervals: List[TimeInterval] = []
    for chunk in _split_chunks(raw):
        interval = parse_schedule_chunk(chunk)
        if interval:
            intervals.append(interval)
    return intervals
