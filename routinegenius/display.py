"""
Routine presentation.

Turns a routine into:
- a weekly grid (time slot rows x weekday columns), and
- a status table (faculty, free seats, exam times)

and prints both with rich. The grid/row builders are plain functions so
they can be tested without a terminal.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from routinegenius.model import Routine
from routinegenius.timeparse import DAYS, TIME_SLOTS, affected_time_slots, format_minutes_12h, slot_bounds


PAGE_SIZE = 12

Grid = Dict[Tuple[str, str], List[str]]


def slot_label(slot_id: str) -> str:
    """
    '08:00-09:20' -> '08:00 AM-09:20 AM'
    """
    start, end = slot_bounds(slot_id)
    return f"{format_minutes_12h(start)}-{format_minutes_12h(end)}"


def routine_grid(routine: Routine) -> Grid:
    """
    Map every meeting to the (slot_id, day) cells it touches.

    A cell holding more than one entry means two classes share a slot,
    even though their exact times do not overlap.
    """
    grid: Grid = defaultdict(list)
    for section in routine:
        fac = ", ".join(section.faculty)
        for t in section.times:
            for slot in affected_time_slots(t.start_minute, t.end_minute):
                grid[(slot, t.day)].append(f"{section.course_code} {section.section_name}/{fac} {t.room}")
    return dict(grid)


def seat_status(available: int, capacity: int) -> str:
    return f"{available}/{capacity}" if available > 0 else "Full"


def status_rows(routine: Routine) -> List[Tuple[str, str, str, str]]:
    """
    One row per section: (course-sec, faculty, seats, exams).
    """
    rows: List[Tuple[str, str, str, str]] = []
    for s in routine:
        exams = f"MID: {s.exam_mid or 'N/A'}\nFinal: {s.exam_final or 'N/A'}"
        rows.append((s.label, ", ".join(s.faculty), seat_status(s.available_seats, s.capacity), exams))
    return rows


def paginate(
    routines: Sequence[Routine], page: int, page_size: int = PAGE_SIZE
) -> Tuple[List[Routine], int, int]:
    """
    Return (routines on this page, clamped page number, total pages). Pages start at 1.
    """
    total_pages = max(1, -(-len(routines) // page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return list(routines[start : start + page_size]), page, total_pages


def _grid_table(routine: Routine, title: str) -> Table:
    grid = routine_grid(routine)
    used_days = [d for d in DAYS if any((slot, d) in grid for slot in TIME_SLOTS)]

    table = Table(title=title, box=box.SIMPLE, show_lines=True)
    table.add_column("Time/Day", style="bold")
    for day in used_days:
        table.add_column(day)

    for slot in TIME_SLOTS:
        row = [slot_label(slot)]
        for day in used_days:
            entries = grid.get((slot, day), [])
            if len(entries) > 1:
                row.append("\n".join(f"[red]{escape(e)}[/]" for e in entries))
            else:
                row.append("\n".join(escape(e) for e in entries))
        table.add_row(*row)
    return table


def _status_table(routine: Routine) -> Table:
    table = Table(box=box.SIMPLE)
    table.add_column("Course-Sec", style="bold cyan")
    table.add_column("Faculty", style="magenta")
    table.add_column("Seats", justify="right")
    table.add_column("Exam Time")
    for label, fac, seats, exams in status_rows(routine):
        table.add_row(label, escape(fac), "[bold red]Full[/]" if seats == "Full" else seats, escape(exams))
    return table


def render_routine(console: Console, routine: Routine, title: str) -> None:
    console.print(_grid_table(routine, title))
    console.print(_status_table(routine))
