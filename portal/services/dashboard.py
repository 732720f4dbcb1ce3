"""
dashboard.py - Admin dashboard statistics
Single responsibility: count users and courses for the overview cards.
"""

import asyncio
from dataclasses import dataclass

from portal.services.filter_options import fetch_list


@dataclass
class AdminStats:
    total_students: int = 0
    total_teachers: int = 0
    total_courses: int = 0
    active_users: int = 0


def compute_stats(students: list[dict], teachers: list[dict], courses: list[dict]) -> AdminStats:
    active = [u for u in students + teachers if u.get("isActive") is not False]
    return AdminStats(
        total_students=len(students),
        total_teachers=len(teachers),
        total_courses=len(courses),
        active_users=len(active),
    )


async def load_admin_stats(client) -> AdminStats:
    """Three parallel fetches; a failed branch counts as empty."""
    students, teachers, courses = await asyncio.gather(
        fetch_list(client, "/users", {"role": "student"}),
        fetch_list(client, "/users", {"role": "teacher"}),
        fetch_list(client, "/courses"),
    )
    return compute_stats(students, teachers, courses)
