"""
Section catalog (feed JSON -> Catalog).

- Reads the section feed (a JSON array of raw section records)
- Normalizes every record into a Section exactly once
- Groups sections by course code, keeping feed order
- Offers the small lookups the preference editor and the CLI need

Important rules:
- A bad record field never fails the whole feed
- The catalog is built once and never mutated by the search
"""

from __future__ import annotations

import json
import re
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from routinegenius.model import TBA, Catalog, Section
from routinegenius.timeparse import parse_schedule_string


PACKAGE_DIR = Path(__file__).resolve().parent


def default_feed_path() -> Path:
    return PACKAGE_DIR / "data" / "connect.json"


# ---------------------------------------------------------------------------
# Feed loading
# ---------------------------------------------------------------------------


def load_feed(path: str | Path | None = None) -> List[Dict[str, Any]]:
    """
    Load the raw section records from a JSON file.

    Never crashes if the feed is missing or broken; returns [] instead.
    """
    feed_path = Path(path) if path is not None else default_feed_path()
    try:
        data = json.loads(feed_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return []
    if not isinstance(data, list):
        return []
    return [r for r in data if isinstance(r, dict)]


# ---------------------------------------------------------------------------
# Record normalization
# ---------------------------------------------------------------------------


def normalize_faculties(value: Any) -> Tuple[str, ...]:
    """
    Faculty may be a list, a single string or absent. Always returns a non-empty tuple.
    """
    if isinstance(value, (list, tuple)):
        names = [str(x).strip() for x in value if x is not None and str(x).strip()]
    elif value:
        names = [str(value).strip()]
    else:
        names = []

    # dedupe, keep feed order
    out: List[str] = []
    for n in names:
        if n not in out:
            out.append(n)
    return tuple(out) if out else (TBA,)


def _short_time(dt: datetime) -> str:
    return f"{dt.hour % 12 or 12}:{dt:%M %p}"


def format_exam_detail(date_str: Any, start_str: Any, end_str: Any) -> Optional[str]:
    """
    Format exam date/start/end as e.g. 'Oct 12, 2025 9:00 AM - 11:00 AM'.

    Falls back to '<date> <HH:MM> - <HH:MM>' when the date cannot be parsed.
    """
    if not date_str or not start_str or not end_str:
        return None
    date_s, start_s, end_s = str(date_str).strip(), str(start_str).strip(), str(end_str).strip()

    try:
        start = datetime.fromisoformat(f"{date_s}T{start_s}")
        end = datetime.fromisoformat(f"{date_s}T{end_s}")
    except ValueError:
        return f"{date_s} {start_s[:5]} - {end_s[:5]}"

    date_fmt = f"{start:%b} {start.day}, {start.year}"
    return f"{date_fmt} {_short_time(start)} - {_short_time(end)}"


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def section_from_record(record: Dict[str, Any], index: int) -> Optional[Section]:
    """
    Normalizes one raw feed record into a Section. Returns None without a course code.
    """
    course_code = str(record.get("courseCode") or "").strip().upper()
    if not course_code:
        return None

    pre_reg = record.get("preRegSchedule") or ""
    lab = record.get("preRegLabSchedule") or ""
    times = parse_schedule_string(f"{pre_reg} {lab}")

    exams = record.get("sectionSchedule") or {}
    if not isinstance(exams, dict):
        exams = {}
    exam_mid = exams.get("midExamDetail") or format_exam_detail(
        exams.get("midExamDate"), exams.get("midExamStartTime"), exams.get("midExamEndTime")
    )
    exam_final = exams.get("finalExamDetail") or format_exam_detail(
        exams.get("finalExamDate"), exams.get("finalExamStartTime"), exams.get("finalExamEndTime")
    )

    return Section(
        section_id=index,
        course_code=course_code,
        section_name=str(record.get("sectionName") or "").strip(),
        faculty=normalize_faculties(record.get("faculties")),
        times=tuple(times),
        capacity=_as_int(record.get("capacity")),
        consumed_seats=_as_int(record.get("consumedSeat")),
        exam_mid=exam_mid or None,
        exam_final=exam_final or None,
        raw_schedule=str(pre_reg).replace("\n", " "),
    )


def build_catalog(records: Iterable[Dict[str, Any]]) -> Catalog:
    """
    Build course_code -> [Section, ...] from raw records, in feed order.
    """
    catalog: Dict[str, List[Section]] = defaultdict(list)
    for index, record in enumerate(records):
        section = section_from_record(record, index)
        if section:
            catalog[section.course_code].append(section)
    return dict(catalog)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def _section_sort_key(name: str) -> tuple:
    digits = re.sub(r"\D", "", name)
    if digits:
        return (0, int(digits), name)
    return (1, 0, name)


def available_faculties(catalog: Catalog, course_code: str) -> List[str]:
    out: List[str] = []
    for s in catalog.get(course_code, []):
        for f in s.faculty:
            if f not in out:
                out.append(f)
    return out


def available_sections(catalog: Catalog, course_code: str) -> List[str]:
    """
    Uppercased section labels of a course, numbers in numeric order.
    """
    names = {s.section_name.upper() for s in catalog.get(course_code, [])}
    return sorted(names, key=_section_sort_key)


def find_section(catalog: Catalog, course_code: str, section_name: str) -> Optional[Section]:
    wanted = str(section_name).strip().upper()
    for s in catalog.get(course_code, []):
        if s.section_name.upper() == wanted:
            return s
    return None


def faculties_for_section(catalog: Catalog, course_code: str, section_name: str) -> List[str]:
    section = find_section(catalog, course_code, section_name)
    if not section:
        return []
    return list(section.faculty)


def sections_for_faculty(catalog: Catalog, course_code: str, faculty: str) -> List[str]:
    out: List[str] = []
    for s in catalog.get(course_code, []):
        if faculty in s.faculty:
            name = s.section_name.upper()
            if name not in out:
                out.append(name)
    return out


def search_course_codes(catalog: Catalog, query: str, exclude: Iterable[str] = ()) -> List[str]:
    """
    Course codes containing the query (case-insensitive, at least 2 characters).
    """
    q = (query or "").strip().upper()
    if len(q) < 2:
        return []
    skip = set(exclude)
    return sorted(code for code in catalog if q in code and code not in skip)
