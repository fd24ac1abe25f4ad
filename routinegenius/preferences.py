"""
Preference filter.

For one selected course, narrow its sections to the ones that:
- match the preferred faculty (if any were given)
- match the preferred section labels (if any were given)
- do not meet on an excluded day or inside an excluded time block

The second half of this module is the preference *editor*: it keeps the
faculty and section sets of a CoursePreference consistent (cascade rule).
The search never calls it, it only reads the sets it produced.
"""

from __future__ import annotations

from typing import Iterable, List

from routinegenius.catalog import faculties_for_section, find_section, sections_for_faculty
from routinegenius.model import TBA, Catalog, CoursePreference, SearchConfig, Section
from routinegenius.timeparse import affected_time_slots


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def faculty_matches(section: Section, faculties: Iterable[str]) -> bool:
    """
    Faculty names are compared exactly. A preferred 'TBA' only matches
    sections whose sole faculty is 'TBA'.
    """
    wanted = set(faculties)
    if not wanted:
        return True
    if any(f in wanted for f in section.faculty):
        return True
    return TBA in wanted and section.faculty == (TBA,)


def section_matches(section: Section, sections: Iterable[str]) -> bool:
    wanted = {str(s).strip().upper() for s in sections}
    if not wanted:
        return True
    return section.section_name.upper() in wanted


def is_section_valid(section: Section, excluded_days: Iterable[str], excluded_time_blocks: Iterable[str]) -> bool:
    """
    Exclusion rule. Sections without meetings are always valid.
    """
    if not section.times:
        return True

    days = set(excluded_days)
    blocks = set(excluded_time_blocks)
    for t in section.times:
        if t.day in days:
            return False
        if blocks and any(slot in blocks for slot in affected_time_slots(t.start_minute, t.end_minute)):
            return False
    return True


def eligible_sections(catalog: Catalog, course_code: str, config: SearchConfig) -> List[Section]:
    """
    Sections of a course that pass preferences and exclusions, in feed order.
    """
    pref = config.preference_for(course_code)
    return [
        s
        for s in catalog.get(course_code, [])
        if faculty_matches(s, pref.faculties)
        and section_matches(s, pref.sections)
        and is_section_valid(s, config.excluded_days, config.excluded_time_blocks)
    ]


# ---------------------------------------------------------------------------
# Preference editing (cascade rule)
# ---------------------------------------------------------------------------


def add_faculty_preference(
    catalog: Catalog, course_code: str, pref: CoursePreference, faculty: str, cascade: bool = True
) -> bool:
    """
    Prefer a faculty. With cascade, every section they teach is preferred too.
    Returns False if the faculty teaches no section of the course.
    """
    fac = str(faculty or "").strip()
    if not fac:
        return False
    secs = sections_for_faculty(catalog, course_code, fac)
    if not secs:
        return False

    pref.faculties.add(fac)
    if cascade:
        pref.sections.update(secs)
    return True


def add_section_preference(
    catalog: Catalog, course_code: str, pref: CoursePreference, section_name: str, cascade: bool = True
) -> bool:
    """
    Prefer a section. With cascade, its faculty are preferred too.
    Returns False if the course has no such section.
    """
    sec = str(section_name or "").strip().upper()
    if not sec or not find_section(catalog, course_code, sec):
        return False

    pref.sections.add(sec)
    if cascade:
        pref.faculties.update(faculties_for_section(catalog, course_code, sec))
    return True


def cleanup_faculties(catalog: Catalog, course_code: str, pref: CoursePreference) -> None:
    """
    Drop preferred faculty no longer teaching any preferred section.
    """
    represented: set[str] = set()
    for sec in pref.sections:
        represented.update(faculties_for_section(catalog, course_code, sec))
    pref.faculties.intersection_update(represented)


def remove_section_preference(catalog: Catalog, course_code: str, pref: CoursePreference, section_name: str) -> bool:
    sec = str(section_name or "").strip().upper()
    if sec not in pref.sections:
        return False
    pref.sections.discard(sec)
    cleanup_faculties(catalog, course_code, pref)
    return True


def remove_faculty_preference(catalog: Catalog, course_code: str, pref: CoursePreference, faculty: str) -> bool:
    """
    Stop preferring a faculty. Their sections are dropped unless another
    still-preferred faculty also teaches them.
    """
    fac = str(faculty or "").strip()
    if fac not in pref.faculties:
        return False
    pref.faculties.discard(fac)

    for sec in sections_for_faculty(catalog, course_code, fac):
        if not any(f in pref.faculties for f in faculties_for_section(catalog, course_code, sec)):
            pref.sections.discard(sec)
    return True
