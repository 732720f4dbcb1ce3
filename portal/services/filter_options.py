"""
filter_options.py - Dropdown option loaders
Single responsibility: fan out option fetches and shape them for filters/forms.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from portal.api.errors import ApiError
from portal.services.normalize import normalize_list, unique_values

logger = logging.getLogger(__name__)

Option = tuple[str, str]


@dataclass
class FilterOptions:
    courses: list[Option] = field(default_factory=list)
    teachers: list[Option] = field(default_factory=list)
    students: list[Option] = field(default_factory=list)
    semesters: list[Option] = field(default_factory=list)
    sections: list[Option] = field(default_factory=list)


async def fetch_list(client, path: str, params: dict | None = None) -> list:
    """GET a collection; failures degrade to an empty list."""
    try:
        return normalize_list(await client.get(path, params=params))
    except ApiError as exc:
        logger.error("Error fetching %s: %s", path, exc)
        return []


def teacher_options(teachers: list[dict]) -> list[Option]:
    options = []
    for t in teachers:
        profile = t.get("teacher") or {}
        value = profile.get("id") or t.get("id")
        label = t.get("fullName") or t.get("email") or str(value)
        options.append((str(value), label))
    return options


def student_options(students: list[dict]) -> list[Option]:
    options = []
    for s in students:
        profile = s.get("student") or {}
        value = profile.get("id") or s.get("id")
        roll = profile.get("rollNumber") or s.get("rollNumber")
        name = s.get("fullName") or s.get("email") or str(value)
        options.append((str(value), f"{name} ({roll})" if roll else name))
    return options


def course_options(courses: list[dict]) -> list[Option]:
    return [(str(c.get("id")), f"{c.get('code')} - {c.get('name')}") for c in courses]


async def load_course_filters(client) -> FilterOptions:
    teachers = await fetch_list(client, "/users", {"role": "teacher"})
    return FilterOptions(teachers=teacher_options(teachers))


async def load_timetable_filters(client) -> FilterOptions:
    courses, teachers = await asyncio.gather(
        fetch_list(client, "/courses"),
        fetch_list(client, "/users", {"role": "teacher"}),
    )
    return FilterOptions(
        courses=course_options(courses), teachers=teacher_options(teachers)
    )


async def load_enrollment_form_options(client) -> FilterOptions:
    students, courses = await asyncio.gather(
        fetch_list(client, "/users", {"role": "student"}),
        fetch_list(client, "/courses"),
    )
    return FilterOptions(
        students=student_options(students), courses=course_options(courses)
    )


async def load_enrollment_filters(client, notifier=None) -> FilterOptions:
    """
    Courses, semesters (taken from courses) and sections (taken from all
    enrollments). Any failed branch leaves its options empty and raises one
    "Failed to load filter options" notification.
    """
    results = await asyncio.gather(
        client.get("/courses"),
        client.get("/enrollments"),
        return_exceptions=True,
    )
    failed = [r for r in results if isinstance(r, ApiError)]
    for r in results:
        if isinstance(r, BaseException) and not isinstance(r, ApiError):
            raise r
    if failed:
        logger.error("Error fetching filter options: %s", failed[0])
        if notifier:
            notifier.error("Failed to load filter options")

    courses_body, enrollments_body = (
        None if isinstance(r, ApiError) else r for r in results
    )
    courses = normalize_list(courses_body)
    enrollments = normalize_list(enrollments_body)
    return FilterOptions(
        courses=course_options(courses),
        semesters=[(s, s) for s in unique_values(courses, "semester")],
        sections=[(s, f"Section {s}") for s in unique_values(enrollments, "section")],
    )
