"""
Unit tests for the preference filter, the exclusion rule and the
cascade rule of the preference editor.
"""

import unittest

from routinegenius.catalog import build_catalog
from routinegenius.model import CoursePreference, SearchConfig
from routinegenius.preferences import (
    add_faculty_preference,
    add_section_preference,
    eligible_sections,
    faculty_matches,
    is_section_valid,
    remove_faculty_preference,
    remove_section_preference,
    section_matches,
)


def _record(section: str, faculties, schedule: str) -> dict:
    return {
        "courseCode": "CSE110",
        "sectionName": section,
        "faculties": faculties,
        "preRegSchedule": schedule,
        "capacity": 30,
        "consumedSeat": 10,
    }


CATALOG = build_catalog(
    [
        _record("01", ["ABC"], "SUNDAY(08:00 AM-09:20 AM-09C-18C)\nTUESDAY(08:00 AM-09:20 AM-09C-18C)"),
        _record("02", ["ABC", "XYZ"], "MONDAY(11:00 AM-12:20 PM-09C-18C)\nWEDNESDAY(11:00 AM-12:20 PM-09C-18C)"),
        _record("03", None, "SATURDAY(05:00 PM-06:20 PM-10A-01C)"),
        _record("a4", ["XYZ"], ""),
    ]
)
S01, S02, S03, S04 = CATALOG["CSE110"]


class TestFilters(unittest.TestCase):
    def test_faculty_any_match(self) -> None:
        self.assertTrue(faculty_matches(S02, {"XYZ"}))
        self.assertFalse(faculty_matches(S01, {"XYZ"}))

    def test_faculty_is_case_sensitive(self) -> None:
        self.assertFalse(faculty_matches(S01, {"abc"}))

    def test_tba_preference_matches_only_tba_sections(self) -> None:
        self.assertTrue(faculty_matches(S03, {"TBA"}))
        self.assertFalse(faculty_matches(S01, {"TBA"}))

    def test_empty_preference_passes(self) -> None:
        self.assertTrue(faculty_matches(S01, set()))
        self.assertTrue(section_matches(S01, set()))

    def test_section_is_case_insensitive(self) -> None:
        self.assertTrue(section_matches(S04, {"A4"}))
        self.assertTrue(section_matches(S04, {"a4"}))
        self.assertFalse(section_matches(S01, {"02"}))


class TestExclusionRule(unittest.TestCase):
    def test_excluded_day(self) -> None:
        self.assertFalse(is_section_valid(S01, {"Tuesday"}, set()))
        self.assertTrue(is_section_valid(S02, {"Tuesday"}, set()))

    def test_excluded_block(self) -> None:
        self.assertFalse(is_section_valid(S03, set(), {"17:00-18:20"}))
        self.assertTrue(is_section_valid(S03, set(), {"08:00-09:20"}))

    def test_section_without_times_always_valid(self) -> None:
        self.assertTrue(is_section_valid(S04, {"Sunday", "Monday"}, {"08:00-09:20"}))

    def test_eligible_sections_combines_everything(self) -> None:
        config = SearchConfig(
            selected_courses=["CSE110"],
            excluded_days={"Saturday"},
            preferences={"CSE110": CoursePreference(faculties={"ABC", "TBA"})},
        )
        self.assertEqual(eligible_sections(CATALOG, "CSE110", config), [S01, S02])

    def test_unknown_course_has_no_sections(self) -> None:
        config = SearchConfig(selected_courses=["PHY111"])
        self.assertEqual(eligible_sections(CATALOG, "PHY111", config), [])


class TestCascade(unittest.TestCase):
    def test_adding_faculty_adds_their_sections(self) -> None:
        pref = CoursePreference()
        self.assertTrue(add_faculty_preference(CATALOG, "CSE110", pref, "ABC"))
        self.assertEqual(pref.faculties, {"ABC"})
        self.assertEqual(pref.sections, {"01", "02"})

    def test_adding_section_adds_its_faculty(self) -> None:
        pref = CoursePreference()
        self.assertTrue(add_section_preference(CATALOG, "CSE110", pref, "a4"))
        self.assertEqual(pref.sections, {"A4"})
        self.assertEqual(pref.faculties, {"XYZ"})

    def test_unknown_values_are_refused(self) -> None:
        pref = CoursePreference()
        self.assertFalse(add_faculty_preference(CATALOG, "CSE110", pref, "NOPE"))
        self.assertFalse(add_section_preference(CATALOG, "CSE110", pref, "99"))
        self.assertTrue(pref.is_empty())

    def test_removing_section_cleans_up_unlinked_faculty(self) -> None:
        pref = CoursePreference()
        add_section_preference(CATALOG, "CSE110", pref, "02")
        add_section_preference(CATALOG, "CSE110", pref, "A4")
        self.assertEqual(pref.faculties, {"ABC", "XYZ"})

        self.assertTrue(remove_section_preference(CATALOG, "CSE110", pref, "02"))
        # XYZ still teaches A4, ABC teaches nothing preferred any more
        self.assertEqual(pref.sections, {"A4"})
        self.assertEqual(pref.faculties, {"XYZ"})

    def test_removing_faculty_keeps_sections_still_linked(self) -> None:
        pref = CoursePreference()
        add_faculty_preference(CATALOG, "CSE110", pref, "ABC")
        add_faculty_preference(CATALOG, "CSE110", pref, "XYZ")
        self.assertEqual(pref.sections, {"01", "02", "A4"})

        self.assertTrue(remove_faculty_preference(CATALOG, "CSE110", pref, "ABC"))
        # 02 is co-taught by XYZ, 01 is not
        self.assertEqual(pref.faculties, {"XYZ"})
        self.assertEqual(pref.sections, {"02", "A4"})

    def test_removing_unpreferred_value_is_a_no_op(self) -> None:
        pref = CoursePreference()
        self.assertFalse(remove_faculty_preference(CATALOG, "CSE110", pref, "ABC"))
        self.assertFalse(remove_section_preference(CATALOG, "CSE110", pref, "01"))


if __name__ == "__main__":
    unittest.main()
