"""
Conflict detection.

Given sections, detect overlapping meetings on the same weekday.
Overlap rule:
    max(start_a, start_b) < min(end_a, end_b)

Back-to-back meetings (end == start) do not conflict.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Set

from routinegenius.model import Section, TimeInterval


def intervals_overlap(a: TimeInterval, b: TimeInterval) -> bool:
    if a.day != b.day:
        return False
    return max(a.start_minute, b.start_minute) < min(a.end_minute, b.end_minute)


def sections_conflict(a: Section, b: Section) -> bool:
    """
    True if any meeting of a overlaps any meeting of b.
    """
    for ta in a.times:
        for tb in b.times:
            if intervals_overlap(ta, tb):
                return True
    return False


def conflicts_with_any(candidate: Section, chosen: Iterable[Section]) -> bool:
    return any(sections_conflict(candidate, s) for s in chosen)


def courses_per_day(sections: Iterable[Section]) -> Counter:
    """
    Count, per day, how many sections meet that day.
    A section counts once per day even if it meets several times that day.
    """
    counts: Counter = Counter()
    for s in sections:
        counts.update(s.days)
    return counts


def distinct_days(sections: Iterable[Section]) -> Set[str]:
    out: Set[str] = set()
    for s in sections:
        out |= s.days
    return out
