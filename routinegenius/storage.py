"""
Persistent storage for the user's course selection and preferences.

This module manages the file:

    data/state.json

Layout:
    {
      "selected_courses": ["CSE110", "MAT110"],
      "course_prefs": {"CSE110": {"faculties": ["ABC"], "sections": ["01"]}}
    }

Design rationale:
- the section feed (connect.json) is replaced whenever a new feed is downloaded
- state.json stores only the user's personal choices, as plain key-value data
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from routinegenius.model import CoursePreference


def _default_state_path() -> Path:
    """
    Return the default path of state.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "state.json"


def _resolve(path: str | Path | None) -> Path:
    return Path(path) if path is not None else _default_state_path()


def _norm_code(x: Any) -> str:
    return str(x).strip().upper()


def _read_state(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Read the raw state object. Missing or broken file -> {}.
    """
    state_path = _resolve(path)
    if not state_path.exists():
        return {}
    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _write_state(state: Dict[str, Any], path: str | Path | None = None) -> None:
    state_path = _resolve(path)
    state_path.parent.mkdir(parents=True, exist_ok=True)
    state_path.write_text(json.dumps(state, indent=2, ensure_ascii=False), encoding="utf-8")


def load_selected_courses(path: str | Path | None = None) -> List[str]:
    """
    Load selected course codes, in the order they were added.

    Codes are normalized (strip + uppercase); duplicates and non-strings are ignored.
    """
    ids = _read_state(path).get("selected_courses", [])
    if not isinstance(ids, list):
        return []
    out: List[str] = []
    for x in ids:
        if isinstance(x, str):
            code = _norm_code(x)
            if code and code not in out:
                out.append(code)
    return out


def save_selected_courses(codes: Iterable[str], path: str | Path | None = None) -> None:
    norm: List[str] = []
    for x in codes:
        code = _norm_code(x)
        if code and code not in norm:
            norm.append(code)

    state = _read_state(path)
    state["selected_courses"] = norm
    _write_state(state, path)


def load_course_prefs(path: str | Path | None = None) -> Dict[str, CoursePreference]:
    raw = _read_state(path).get("course_prefs", {})
    if not isinstance(raw, dict):
        return {}

    prefs: Dict[str, CoursePreference] = {}
    for code, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        facs = entry.get("faculties", [])
        secs = entry.get("sections", [])
        prefs[_norm_code(code)] = CoursePreference(
            faculties={str(f).strip() for f in facs if str(f).strip()} if isinstance(facs, list) else set(),
            sections={_norm_code(s) for s in secs if _norm_code(s)} if isinstance(secs, list) else set(),
        )
    return prefs


def save_course_prefs(prefs: Dict[str, CoursePreference], path: str | Path | None = None) -> None:
    """
    Save per-course preferences. Empty preferences are not written.
    """
    payload = {
        _norm_code(code): {"faculties": sorted(p.faculties), "sections": sorted(p.sections)}
        for code, p in prefs.items()
        if not p.is_empty()
    }
    state = _read_state(path)
    state["course_prefs"] = payload
    _write_state(state, path)
