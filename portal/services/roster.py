"""
roster.py - Teacher course rosters and grade entry
Single responsibility: assemble per-course student lists with their grades.

Coarse data comes from the server (the teacher's own courses); semester,
course and name/roll search are applied locally over the fetched roster.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from portal.api.errors import ApiError
from portal.domain.filters import ALL
from portal.services.normalize import normalize_list, unique_values

logger = logging.getLogger(__name__)


@dataclass
class RosterStudent:
    id: str
    name: str
    roll_number: str
    email: str
    enrollment_id: Optional[str] = None
    section: str = "N/A"
    grade: Optional[dict] = None

    def __getitem__(self, key):
        return getattr(self, key)


@dataclass
class RosterCourse:
    course: dict
    students: list[RosterStudent] = field(default_factory=list)

    @property
    def id(self):
        return self.course.get("id")

    @property
    def semester(self):
        return self.course.get("semester")

    @property
    def title(self) -> str:
        return f"{self.course.get('code', '')} - {self.course.get('name', '')}"


def _grade_view(record: dict) -> dict:
    return {
        "marksObtained": record.get("marksObtained"),
        "totalMarks": record.get("totalMarks"),
        "letterGrade": record.get("letterGrade"),
    }


def build_roster(course: dict, enrollments: list[dict], grades: list[dict]) -> RosterCourse:
    """Active enrollments with student data, each matched to its grade by student id."""
    students = []
    for enrollment in enrollments:
        student = enrollment.get("student")
        if enrollment.get("isActive") is False or not student:
            continue
        student_id = student.get("id") or enrollment.get("studentId")
        user = student.get("user") or {}
        grade = next((g for g in grades if g.get("studentId") == student_id), None)
        students.append(
            RosterStudent(
                id=student_id,
                name=user.get("fullName") or "Unknown",
                roll_number=student.get("rollNumber") or "N/A",
                email=user.get("email") or "N/A",
                enrollment_id=enrollment.get("id"),
                section=enrollment.get("section") or "N/A",
                grade=_grade_view(grade) if grade else None,
            )
        )
    return RosterCourse(course=course, students=students)


async def _load_course(client, course: dict) -> RosterCourse:
    course_id = course.get("id")
    try:
        details = await client.get(f"/courses/{course_id}")
    except ApiError as exc:
        logger.error("Error fetching students for course %s: %s", course_id, exc)
        return RosterCourse(course=course)
    enrollments = (details.get("enrollments") or []) if isinstance(details, dict) else []

    try:
        grades = normalize_list(await client.get(f"/results/course/{course_id}"))
    except ApiError as exc:
        # Continue without grades
        logger.error("Error fetching grades for course %s: %s", course_id, exc)
        grades = []
    return build_roster(course, enrollments, grades)


async def load_teacher_courses(client) -> list[RosterCourse]:
    """The signed-in teacher's courses, each roster loaded in parallel.

    Raises ApiError when the course list itself cannot be fetched.
    """
    courses = normalize_list(await client.get("/courses/teacher/my-courses"))
    return list(await asyncio.gather(*(_load_course(client, c) for c in courses)))


def semester_options(courses: list[RosterCourse]) -> list[str]:
    return unique_values([c.course for c in courses], "semester")


def student_matches(student: RosterStudent, query: str) -> bool:
    if not query:
        return True
    q = query.lower()
    return q in (student.name or "").lower() or q in (student.roll_number or "").lower()


def filter_roster(
    courses: list[RosterCourse],
    semester: str = ALL,
    course_id: str = ALL,
    search: str = "",
) -> list[tuple[RosterCourse, list[RosterStudent]]]:
    """
    Apply semester/course filters, then narrow each roster by name or roll
    number. A course left with no matching students is hidden unless the
    course filter is "all".
    """
    result = []
    for course in courses:
        if semester != ALL and course.semester != semester:
            continue
        if course_id != ALL and str(course.id) != str(course_id):
            continue
        matching = [s for s in course.students if student_matches(s, search)]
        if matching or course_id == ALL:
            result.append((course, matching))
    return result


async def submit_grade(
    client, course: RosterCourse, student: RosterStudent, grade: dict
) -> None:
    """POST a grade record; ``grade`` is a GradeForm payload."""
    payload = {"studentId": student.id, "courseId": course.id, **grade}
    await client.post("/results", payload)
