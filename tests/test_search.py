"""
Unit tests for the routine generator.

Every returned routine must:
- contain one section per selected course, pairwise conflict-free
- use between min_distinct_days and max_distinct_days distinct days
- have at most max_sections_per_day courses on any single day
"""

import random
import unittest
from itertools import combinations

from routinegenius.catalog import build_catalog
from routinegenius.conflicts import courses_per_day, distinct_days, intervals_overlap
from routinegenius.model import CoursePreference, SearchConfig
from routinegenius.search import filter_courses, generate_routines


def _record(code: str, section: str, schedule: str, faculties=("ABC",)) -> dict:
    return {
        "courseCode": code,
        "sectionName": section,
        "faculties": list(faculties),
        "preRegSchedule": schedule,
        "capacity": 30,
        "consumedSeat": 0,
    }


def _labels(routines) -> set:
    return {tuple(s.label for s in r) for r in routines}


TWO_COURSES = build_catalog(
    [
        _record("A", "1", "Monday 08:00 AM-09:20 AM"),
        _record("A", "2", "Monday 09:30 AM-10:50 AM"),
        _record("B", "1", "Monday 08:00 AM-09:20 AM"),
        _record("B", "2", "Tuesday 08:00 AM-09:20 AM"),
    ]
)


def _big_catalog() -> dict:
    days = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Saturday"]
    slots = ["08:00 AM-09:20 AM", "09:30 AM-10:50 AM", "11:00 AM-12:20 PM", "02:00 PM-03:20 PM"]
    rnd = random.Random(42)
    records = []
    for code in ("CSE110", "MAT110", "PHY111", "ENG101"):
        for n in range(1, 7):
            d1, d2 = rnd.sample(days, 2)
            slot = rnd.choice(slots)
            records.append(_record(code, f"{n:02d}", f"{d1.upper()}({slot}-UB) {d2.upper()}({slot}-UB)"))
    records.append(_record("CSE110", "07", "Sunday 09:00 AM-10:00 AM, Sunday 02:00 PM-03:00 PM"))
    return build_catalog(records)


class TestWorkedExample(unittest.TestCase):
    def test_direct_overlap_is_excluded(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], min_distinct_days=0)
        routines = generate_routines(TWO_COURSES, config)
        self.assertEqual(_labels(routines), {("A-1", "B-2"), ("A-2", "B-1"), ("A-2", "B-2")})

    def test_back_to_back_classes_do_not_conflict(self) -> None:
        catalog = build_catalog(
            [
                _record("A", "1", "Monday 08:00 AM-09:30 AM"),
                _record("B", "1", "Monday 09:30 AM-10:50 AM"),
            ]
        )
        routines = generate_routines(catalog, SearchConfig(selected_courses=["A", "B"]))
        self.assertEqual(_labels(routines), {("A-1", "B-1")})


class TestConstraints(unittest.TestCase):
    def test_max_sections_per_day(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], max_sections_per_day=1)
        routines = generate_routines(TWO_COURSES, config)
        self.assertEqual(_labels(routines), {("A-1", "B-2"), ("A-2", "B-2")})

    def test_distinct_day_window(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], min_distinct_days=2, max_distinct_days=2)
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-1", "B-2"), ("A-2", "B-2")})

        config = SearchConfig(selected_courses=["A", "B"], min_distinct_days=1, max_distinct_days=1)
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-2", "B-1")})

    def test_min_greater_than_max_is_swapped(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], min_distinct_days=2, max_distinct_days=1)
        self.assertEqual((config.min_distinct_days, config.max_distinct_days), (1, 2))
        self.assertEqual(len(generate_routines(TWO_COURSES, config)), 3)

    def test_excluding_a_day_removes_its_sections(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], excluded_days={"Tuesday"})
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-2", "B-1")})

    def test_excluded_block(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], excluded_time_blocks={"09:30-10:50"})
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-1", "B-2")})

    def test_section_preference(self) -> None:
        config = SearchConfig(
            selected_courses=["A", "B"],
            preferences={"B": CoursePreference(sections={"1"})},
        )
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-2", "B-1")})

    def test_lower_case_day_names_are_excluded(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], excluded_days={" tuesday "})
        self.assertEqual(config.excluded_days, {"Tuesday"})
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-2", "B-1")})

    def test_preference_keys_are_normalized(self) -> None:
        config = SearchConfig(
            selected_courses=["a", "b"],
            preferences={"b ": CoursePreference(sections={"1"})},
        )
        self.assertEqual(set(config.preferences), {"B"})
        self.assertEqual(_labels(generate_routines(TWO_COURSES, config)), {("A-2", "B-1")})

    def test_asynchronous_sections_always_fit(self) -> None:
        catalog = build_catalog([_record("A", "1", "Monday 08:00 AM-09:20 AM"), _record("ONLINE", "1", "")])
        config = SearchConfig(selected_courses=["A", "ONLINE"], excluded_time_blocks={"11:00-12:20"})
        self.assertEqual(_labels(generate_routines(catalog, config)), {("A-1", "ONLINE-1")})


class TestEmptyResults(unittest.TestCase):
    def test_course_without_eligible_sections(self) -> None:
        config = SearchConfig(selected_courses=["A", "B"], excluded_days={"Monday"})
        self.assertEqual(filter_courses(TWO_COURSES, config)[0], ("A", []))
        self.assertEqual(generate_routines(TWO_COURSES, config), [])

    def test_unknown_course(self) -> None:
        self.assertEqual(generate_routines(TWO_COURSES, SearchConfig(selected_courses=["A", "ZZZ"])), [])

    def test_empty_selection(self) -> None:
        self.assertEqual(generate_routines(TWO_COURSES, SearchConfig(selected_courses=[])), [])

    def test_all_combinations_conflict(self) -> None:
        catalog = build_catalog(
            [_record("A", "1", "Monday 08:00 AM-09:20 AM"), _record("B", "1", "Monday 09:00 AM-10:00 AM")]
        )
        self.assertEqual(generate_routines(catalog, SearchConfig(selected_courses=["A", "B"])), [])


class TestInvariants(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = _big_catalog()
        self.config = SearchConfig(
            selected_courses=["CSE110", "MAT110", "PHY111", "ENG101"],
            min_distinct_days=3,
            max_distinct_days=5,
            max_sections_per_day=2,
        )

    def test_every_routine_respects_all_rules(self) -> None:
        routines = generate_routines(self.catalog, self.config)
        self.assertTrue(routines)
        for routine in routines:
            self.assertEqual([s.course_code for s in routine], self.config.selected_courses)
            for a, b in combinations(routine, 2):
                for ta in a.times:
                    for tb in b.times:
                        self.assertFalse(intervals_overlap(ta, tb))
            self.assertTrue(3 <= len(distinct_days(routine)) <= 5)
            self.assertTrue(all(n <= 2 for n in courses_per_day(routine).values()))

    def test_search_is_complete(self) -> None:
        # brute force over the full cross product must find the same set
        per_course = filter_courses(self.catalog, self.config)
        expected = set()

        def walk(i, chosen):
            if i == len(per_course):
                times = [t for s in chosen for t in s.times]
                clash = any(
                    intervals_overlap(ta, tb) for a, b in combinations(chosen, 2) for ta in a.times for tb in b.times
                )
                per_day = courses_per_day(chosen)
                if not clash and max(per_day.values(), default=0) <= 2 and times:
                    if 3 <= len(distinct_days(chosen)) <= 5:
                        expected.add(tuple(s.label for s in chosen))
                return
            for s in per_course[i][1]:
                walk(i + 1, chosen + [s])

        walk(0, [])
        self.assertEqual(_labels(generate_routines(self.catalog, self.config)), expected)

    def test_same_set_on_every_call(self) -> None:
        first = generate_routines(self.catalog, self.config, rng=random.Random(1))
        second = generate_routines(self.catalog, self.config, rng=random.Random(2))
        self.assertEqual(set(first), set(second))
        self.assertEqual(len(first), len(set(first)))


if __name__ == "__main__":
    unittest.main()
