"""
CLI (Command Line Interface).

Terminal commands to pick courses, set preferences and generate routines, e.g.:

    routinegenius search CSE
    routinegenius add CSE110
    routinegenius prefer CSE110 --faculty ABC
    routinegenius generate --ignore-day Saturday --max-days 4

Note:
- Selection and preferences persist in state.json (see storage.py)
- Status lines are plain text; routines are rendered as rich tables
"""

from __future__ import annotations

import argparse
import random
from pathlib import Path
from typing import Dict

from rich.console import Console

from routinegenius.catalog import (
    available_faculties,
    available_sections,
    build_catalog,
    load_feed,
    search_course_codes,
)
from routinegenius.display import PAGE_SIZE, paginate, render_routine
from routinegenius.model import Catalog, CoursePreference, SearchConfig
from routinegenius.preferences import (
    add_faculty_preference,
    add_section_preference,
    remove_faculty_preference,
    remove_section_preference,
)
from routinegenius.search import generate_routines
from routinegenius.storage import (
    load_course_prefs,
    load_selected_courses,
    save_course_prefs,
    save_selected_courses,
)
from routinegenius.timeparse import DAYS, TIME_SLOTS


console = Console()


def _norm_code(text: str | None) -> str:
    return (text or "").strip().upper()


def _cmd_search(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    List course codes containing the search text, skipping already selected ones.
    """
    query = _norm_code(args.text)
    if len(query) < 2:
        print("Please provide at least 2 characters of search text.")
        return 1

    matches = search_course_codes(catalog, query, exclude=load_selected_courses(args.state))
    if not matches:
        print("No results.")
        return 0

    # show max 20
    for code in matches[:20]:
        print(f"{code} | {len(catalog[code])} sections")
    if len(matches) > 20:
        print(f"... and {len(matches) - 20} more results")
    return 0


def _cmd_add(args: argparse.Namespace, catalog: Catalog) -> int:
    code = _norm_code(args.course_code)
    if not code:
        print("Please provide a course code.")
        return 1
    if code not in catalog:
        print(f"Course not found: {code}")
        return 1

    selected = load_selected_courses(args.state)
    if code in selected:
        print(f"Already selected: {code}")
        return 0

    selected.append(code)
    save_selected_courses(selected, args.state)
    print(f"Added: {code} (selected: {len(selected)})")
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    """
    Remove a course from the selection and forget its preferences.
    """
    code = _norm_code(args.course_code)
    selected = load_selected_courses(args.state)
    if code not in selected:
        print(f"Not selected: {code}")
        return 0

    selected.remove(code)
    save_selected_courses(selected, args.state)

    prefs = load_course_prefs(args.state)
    if prefs.pop(code, None) is not None:
        save_course_prefs(prefs, args.state)

    print(f"Removed: {code} (selected: {len(selected)})")
    return 0


def _cmd_list(args: argparse.Namespace, catalog: Catalog) -> int:
    selected = load_selected_courses(args.state)
    if not selected:
        print("No courses selected.")
        return 0

    prefs = load_course_prefs(args.state)
    for code in selected:
        bits = [code, f"{len(catalog.get(code, []))} sections"]
        pref = prefs.get(code)
        if pref and pref.faculties:
            bits.append("faculty: " + ", ".join(sorted(pref.faculties)))
        if pref and pref.sections:
            bits.append("sections: " + ", ".join(sorted(pref.sections)))
        print(" | ".join(bits))
    return 0


def _cmd_prefs(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Show the faculties/sections a course offers and the current preference.
    """
    code = _norm_code(args.course_code)
    if code not in catalog:
        print(f"Course not found: {code}")
        return 1

    pref = load_course_prefs(args.state).get(code, CoursePreference())
    print(f"{code}")
    print("Faculties: " + ", ".join(available_faculties(catalog, code)))
    print("Sections : " + ", ".join(available_sections(catalog, code)))
    print("Preferred faculties: " + (", ".join(sorted(pref.faculties)) or "(any)"))
    print("Preferred sections : " + (", ".join(sorted(pref.sections)) or "(any)"))
    return 0


def _edit_pref(args: argparse.Namespace, catalog: Catalog, adding: bool) -> int:
    code = _norm_code(args.course_code)
    if code not in load_selected_courses(args.state):
        print(f"Not selected: {code} (add it first)")
        return 1

    prefs: Dict[str, CoursePreference] = load_course_prefs(args.state)
    pref = prefs.setdefault(code, CoursePreference())

    if args.faculty:
        fac = (args.faculty or "").strip()
        if adding:
            ok = add_faculty_preference(catalog, code, pref, fac)
        else:
            ok = remove_faculty_preference(catalog, code, pref, fac)
        what = f"faculty {fac}"
    else:
        sec = _norm_code(args.section)
        if adding:
            ok = add_section_preference(catalog, code, pref, sec)
        else:
            ok = remove_section_preference(catalog, code, pref, sec)
        what = f"section {sec}"

    if not ok:
        print(f"No change: {what} is not {'offered for' if adding else 'preferred in'} {code}")
        return 1

    save_course_prefs(prefs, args.state)
    print(f"{'Preferred' if adding else 'Dropped'} {what} for {code}")
    return 0


def _cmd_generate(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Run the routine search on the stored selection and print one page of results.
    """
    selected = load_selected_courses(args.state)
    if not selected:
        print("Please add at least one course.")
        return 1

    config = SearchConfig(
        selected_courses=selected,
        excluded_days=set(args.ignore_day),
        excluded_time_blocks=set(args.ignore_block),
        min_distinct_days=args.min_days,
        max_distinct_days=args.max_days,
        max_sections_per_day=args.max_per_day,
        preferences=load_course_prefs(args.state),
    )
    rng = random.Random(args.seed) if args.seed is not None else None
    routines = generate_routines(catalog, config, rng=rng)

    n = len(routines)
    print(f"Found {n} combination{'' if n == 1 else 's'}.")
    if not routines:
        return 0

    page_items, page, total_pages = paginate(routines, args.page)
    for i, routine in enumerate(page_items, start=(page - 1) * PAGE_SIZE + 1):
        render_routine(console, routine, title=f"Routine {i}")
    print(f"Page {page}/{total_pages}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="routinegenius", description="Routine Genius CLI")
    parser.add_argument("--feed", type=Path, default=None, help="Section feed JSON (default: package data)")
    parser.add_argument("--state", type=Path, default=None, help="State file (default: package data)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search course codes")
    p_search.add_argument("text", type=str, help="Search text")

    p_add = sub.add_parser("add", help="Add course by code")
    p_add.add_argument("course_code", type=str, help="Course code (e.g. CSE110)")

    p_remove = sub.add_parser("remove", help="Remove course by code")
    p_remove.add_argument("course_code", type=str, help="Course code (e.g. CSE110)")

    sub.add_parser("list", help="Show selected courses and preferences")

    p_prefs = sub.add_parser("prefs", help="Show faculties/sections of a course")
    p_prefs.add_argument("course_code", type=str)

    for name, help_text in (("prefer", "Add a faculty/section preference"), ("unprefer", "Drop a preference")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("course_code", type=str)
        group = p.add_mutually_exclusive_group(required=True)
        group.add_argument("--faculty", type=str)
        group.add_argument("--section", type=str)

    p_gen = sub.add_parser("generate", help="Generate conflict-free routines")
    p_gen.add_argument(
        "--ignore-day", action="append", default=[], choices=DAYS, type=str.capitalize, help="Day without classes"
    )
    p_gen.add_argument(
        "--ignore-block", action="append", default=[], choices=TIME_SLOTS, help="Time block to keep free"
    )
    p_gen.add_argument("--min-days", type=int, default=1)
    p_gen.add_argument("--max-days", type=int, default=len(DAYS))
    p_gen.add_argument("--max-per-day", type=int, default=None, help="Max classes per day (default: all)")
    p_gen.add_argument("--page", type=int, default=1)
    p_gen.add_argument("--seed", type=int, default=None, help="Seed for the result order")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    catalog = build_catalog(load_feed(args.feed))
    if not catalog and args.command not in ("remove", "list"):
        print("No course data loaded. Check the --feed file.")
        raise SystemExit(1)

    if args.command == "search":
        raise SystemExit(_cmd_search(args, catalog))
    if args.command == "add":
        raise SystemExit(_cmd_add(args, catalog))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args))
    if args.command == "list":
        raise SystemExit(_cmd_list(args, catalog))
    if args.command == "prefs":
        raise SystemExit(_cmd_prefs(args, catalog))
    if args.command == "prefer":
        raise SystemExit(_edit_pref(args, catalog, adding=True))
    if args.command == "unprefer":
        raise SystemExit(_edit_pref(args, catalog, adding=False))
    if args.command == "generate":
        raise SystemExit(_cmd_generate(args, catalog))

    raise SystemExit(2)
