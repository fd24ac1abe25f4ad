"""
Combination search (routine generator).

Depth-first backtracking over the selected courses, in selection order.
At each course every eligible section is tried; a candidate is pruned if
- one of its meetings overlaps a meeting already in the partial routine, or
- it would push some day above config.max_sections_per_day.

Complete routines are kept only if their number of distinct class days lies
within [config.min_distinct_days, config.max_distinct_days].

The full result list is shuffled before it is returned. The shuffle only
changes the order, never which routines are found.
"""

from __future__ import annotations

import random
from collections import Counter
from typing import List, Optional, Tuple

from routinegenius.conflicts import conflicts_with_any
from routinegenius.model import Catalog, Routine, SearchConfig, Section
from routinegenius.preferences import eligible_sections


def filter_courses(catalog: Catalog, config: SearchConfig) -> List[Tuple[str, List[Section]]]:
    """
    (course_code, eligible sections) for every selected course, in selection order.
    """
    return [(code, eligible_sections(catalog, code, config)) for code in config.selected_courses]


def _breaks_day_limit(day_load: Counter, candidate: Section, limit: int) -> bool:
    return any(day_load[day] + 1 > limit for day in candidate.days)


def _find_routines(per_course: List[Tuple[str, List[Section]]], config: SearchConfig) -> List[Routine]:
    routines: List[Routine] = []
    path: List[Section] = []  # current partial routine
    day_load: Counter = Counter()  # day -> sections meeting that day
    limit = config.max_sections_per_day

    def dfs(i: int) -> None:
        if i == len(per_course):
            days_used = sum(1 for n in day_load.values() if n > 0)
            if config.min_distinct_days <= days_used <= config.max_distinct_days:
                routines.append(tuple(path))
            return

        _, options = per_course[i]
        for sec in options:
            if conflicts_with_any(sec, path):
                continue
            if _breaks_day_limit(day_load, sec, limit):
                continue

            path.append(sec)
            day_load.update(sec.days)
            dfs(i + 1)
            day_load.subtract(sec.days)
            path.pop()

    dfs(0)
    return routines


def generate_routines(
    catalog: Catalog,
    config: SearchConfig,
    rng: Optional[random.Random] = None,
) -> List[Routine]:
    """
    Return every valid routine for config.selected_courses, in random order.

    An empty selection, or a selected course without any eligible section,
    gives an empty list: "no routine" is a normal outcome, not an error.
    """
    per_course = filter_courses(catalog, config)
    if not per_course or any(not sections for _, sections in per_course):
        return []

    routines = _find_routines(per_course, config)

    shuffled = list(routines)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled
