"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects that flow from the
section feed into the routine generator so that:
- all modules share the same field names
- the search never reads ambient UI state, only a SearchConfig value
- sections and routines stay immutable once built
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, FrozenSet, List, Optional, Set, Tuple


TBA = "TBA"


@dataclass(frozen=True)
class TimeInterval:
    """
    One weekly meeting of a section: a day plus start/end in minutes since midnight.
    """

    day: str
    start_minute: int
    end_minute: int
    room: str = "N/A"


@dataclass(frozen=True)
class Section:
    """
    Represents one offered section of a course as read from the feed.
    """

    section_id: int
    course_code: str
    section_name: str
    faculty: Tuple[str, ...]
    times: Tuple[TimeInterval, ...]
    capacity: int
    consumed_seats: int
    exam_mid: Optional[str] = None
    exam_final: Optional[str] = None
    raw_schedule: str = ""

    @property
    def label(self) -> str:
        return f"{self.course_code}-{self.section_name}"

    @property
    def available_seats(self) -> int:
        return self.capacity - self.consumed_seats

    @cached_property
    def days(self) -> FrozenSet[str]:
        return frozenset(t.day for t in self.times)


@dataclass
class CoursePreference:
    """
    Optional faculty / section constraints for one selected course.

    An empty set means "no constraint". Section labels are stored uppercased.
    """

    faculties: Set[str] = field(default_factory=set)
    sections: Set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        return not self.faculties and not self.sections


@dataclass
class SearchConfig:
    """
    Everything one search invocation needs besides the catalog.

    Built fresh for every search; values are normalized on construction
    (codes uppercased, min/max days swapped if reversed, per-day limit >= 1).
    """

    selected_courses: List[str]
    excluded_days: Set[str] = field(default_factory=set)
    excluded_time_blocks: Set[str] = field(default_factory=set)
    min_distinct_days: int = 1
    max_distinct_days: int = 7
    max_sections_per_day: Optional[int] = None
    preferences: Dict[str, CoursePreference] = field(default_factory=dict)

    def __post_init__(self) -> None:
        codes: List[str] = []
        for code in self.selected_courses:
            c = str(code).strip().upper()
            if c and c not in codes:
                codes.append(c)
        self.selected_courses = codes

        # day names as the schedule parser writes them ('Monday')
        self.excluded_days = {str(d).strip().capitalize() for d in self.excluded_days}
        self.excluded_time_blocks = {str(b).strip() for b in self.excluded_time_blocks}
        self.preferences = {str(k).strip().upper(): p for k, p in self.preferences.items()}

        if self.min_distinct_days > self.max_distinct_days:
            self.min_distinct_days, self.max_distinct_days = self.max_distinct_days, self.min_distinct_days

        if self.max_sections_per_day is None:
            self.max_sections_per_day = max(1, len(codes))
        self.max_sections_per_day = max(1, int(self.max_sections_per_day))

    def preference_for(self, course_code: str) -> CoursePreference:
        return self.preferences.get(course_code) or CoursePreference()


# One section per selected course, in selection order.
Routine = Tuple[Section, ...]

# Course code -> sections in feed order.
Catalog = Dict[str, List[Section]]
