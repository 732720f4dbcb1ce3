"""
Tests for dropdown option loaders
"""
import pytest

from portal.api.errors import ApiError
from portal.services.filter_options import (
    course_options,
    load_enrollment_filters,
    load_timetable_filters,
    student_options,
    teacher_options,
)

from tests.fakes import FakeClient

COURSES = [
    {"id": "c1", "code": "CS101", "name": "Intro", "semester": "Fall 2024"},
    {"id": "c2", "code": "MA201", "name": "Calculus", "semester": "Spring 2025"},
]
TEACHERS = [
    {"id": "u1", "fullName": "Grace Hopper", "teacher": {"id": "t1"}},
    {"id": "u2", "email": "x@uni.edu"},
]


class TestOptionShapes:
    def test_teacher_value_is_profile_id(self):
        assert teacher_options(TEACHERS) == [("t1", "Grace Hopper"), ("u2", "x@uni.edu")]

    def test_student_label_includes_roll_number(self):
        students = [{"id": "u3", "fullName": "Bo Li", "student": {"id": "s1", "rollNumber": "R-7"}}]
        assert student_options(students) == [("s1", "Bo Li (R-7)")]

    def test_course_label(self):
        assert course_options(COURSES)[0] == ("c1", "CS101 - Intro")


@pytest.mark.asyncio
async def test_timetable_filters_fail_soft():
    """One failing branch leaves only its options empty"""
    client = FakeClient(
        {
            ("GET", "/courses"): {"data": COURSES},
            ("GET", "/users"): ApiError(status=500),
        }
    )
    options = await load_timetable_filters(client)
    assert len(options.courses) == 2
    assert options.teachers == []


@pytest.mark.asyncio
async def test_enrollment_filters_extract_semesters_and_sections(notifier):
    client = FakeClient(
        {
            ("GET", "/courses"): COURSES,
            ("GET", "/enrollments"): [{"section": "B"}, {"section": "A"}, {"section": "B"}],
        }
    )
    options = await load_enrollment_filters(client, notifier)
    assert options.semesters == [("Fall 2024", "Fall 2024"), ("Spring 2025", "Spring 2025")]
    assert options.sections == [("A", "Section A"), ("B", "Section B")]
    assert notifier.errors == []


@pytest.mark.asyncio
async def test_enrollment_filters_failure_notifies(notifier):
    client = FakeClient(
        {
            ("GET", "/courses"): COURSES,
            ("GET", "/enrollments"): ApiError(status=500),
        }
    )
    options = await load_enrollment_filters(client, notifier)
    assert len(options.courses) == 2
    assert options.sections == []
    assert notifier.errors == ["Failed to load filter options"]
