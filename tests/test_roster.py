"""
Tests for teacher rosters and grade entry
"""
import pytest

from portal.api.errors import ApiError
from portal.services.roster import (
    RosterCourse,
    build_roster,
    filter_roster,
    load_teacher_courses,
    semester_options,
    submit_grade,
)

from tests.fakes import FakeClient


def enrollment(eid, sid, name, roll, active=True, section="A"):
    return {
        "id": eid,
        "isActive": active,
        "section": section,
        "student": {"id": sid, "rollNumber": roll, "user": {"fullName": name, "email": f"{sid}@uni.edu"}},
    }


CS101 = {"id": "c1", "code": "CS101", "name": "Intro", "semester": "Fall 2024"}
MA201 = {"id": "c2", "code": "MA201", "name": "Calculus", "semester": "Spring 2025"}


@pytest.fixture
def courses():
    return [
        build_roster(
            CS101,
            [enrollment("e1", "s1", "Alice Khan", "CS-01"), enrollment("e2", "s2", "Bob Roy", "CS-02")],
            [],
        ),
        build_roster(MA201, [enrollment("e3", "s3", "Carla Diaz", "MA-09")], []),
    ]


class TestBuildRoster:
    def test_inactive_and_studentless_enrollments_are_skipped(self):
        roster = build_roster(
            CS101,
            [
                enrollment("e1", "s1", "Alice", "R1"),
                enrollment("e2", "s2", "Bob", "R2", active=False),
                {"id": "e3", "isActive": True, "student": None},
            ],
            [],
        )
        assert [s.id for s in roster.students] == ["s1"]

    def test_grade_matched_by_student_id(self):
        roster = build_roster(
            CS101,
            [enrollment("e1", "s1", "Alice", "R1"), enrollment("e2", "s2", "Bob", "R2")],
            [{"studentId": "s2", "marksObtained": 80, "totalMarks": 100, "letterGrade": "A-"}],
        )
        alice, bob = roster.students
        assert alice.grade is None
        assert bob.grade == {"marksObtained": 80, "totalMarks": 100, "letterGrade": "A-"}
        assert roster.title == "CS101 - Intro"


class TestFilterRoster:
    def test_search_is_case_insensitive_on_name_or_roll(self, courses):
        result = filter_roster(courses, search="alice")
        assert [(c.id, [s.name for s in students]) for c, students in result] == [
            ("c1", ["Alice Khan"]),
            ("c2", []),
        ]
        result = filter_roster(courses, search="ma-09")
        assert [s.name for s in result[1][1]] == ["Carla Diaz"]

    def test_course_filter_hides_course_without_matches(self, courses):
        assert filter_roster(courses, course_id="c2", search="alice") == []
        result = filter_roster(courses, course_id="c1", search="bob")
        assert [s.name for s in result[0][1]] == ["Bob Roy"]

    def test_semester_filter(self, courses):
        result = filter_roster(courses, semester="Spring 2025")
        assert [c.id for c, _ in result] == ["c2"]

    def test_semester_options(self, courses):
        assert semester_options(courses) == ["Fall 2024", "Spring 2025"]


@pytest.mark.asyncio
async def test_load_teacher_courses_tolerates_branch_failures():
    """A failing course or grade fetch degrades that course only"""
    client = FakeClient(
        {
            ("GET", "/courses/teacher/my-courses"): [CS101, MA201],
            ("GET", "/courses/c1"): {"enrollments": [enrollment("e1", "s1", "Alice", "R1")]},
            ("GET", "/results/course/c1"): ApiError(status=500),
            ("GET", "/courses/c2"): ApiError(status=404),
        }
    )
    courses = await load_teacher_courses(client)
    assert [c.id for c in courses] == ["c1", "c2"]
    assert [s.name for s in courses[0].students] == ["Alice"]
    assert courses[0].students[0].grade is None
    assert courses[1].students == []


@pytest.mark.asyncio
async def test_load_teacher_courses_raises_when_list_fails():
    client = FakeClient({("GET", "/courses/teacher/my-courses"): ApiError(status=500)})
    with pytest.raises(ApiError):
        await load_teacher_courses(client)


@pytest.mark.asyncio
async def test_submit_grade_payload(courses):
    client = FakeClient({("POST", "/results"): {}})
    course = courses[0]
    student = course.students[0]
    await submit_grade(
        client, course, student, {"semester": "Fall 2024", "totalMarks": 100, "marksObtained": 91}
    )
    assert client.calls[0].payload == {
        "studentId": "s1",
        "courseId": "c1",
        "semester": "Fall 2024",
        "totalMarks": 100,
        "marksObtained": 91,
    }
    assert isinstance(course, RosterCourse)
