"""
profile.py - Own-profile helpers
Single responsibility: read and update the signed-in user's profile.
"""

import logging

from portal.api.errors import ApiError

logger = logging.getLogger(__name__)

PROFILE_PATH = "/users/profile"

PERSONAL_FIELDS = ("fullName", "email", "phone", "address", "dateOfBirth")
TEACHER_FIELDS = ("employeeId", "department", "designation", "joiningDate")
STUDENT_FIELDS = ("rollNumber", "currentSemester", "program", "enrollmentDate")


def to_profile(user: dict, is_teacher: bool) -> dict:
    """Flatten ``/users/profile`` into personal fields plus the role's read-only fields."""
    profile = {"id": user.get("id")}
    profile.update({name: user.get(name) or "" for name in PERSONAL_FIELDS})
    # Dates arrive as full ISO timestamps; the form edits the date part
    profile["dateOfBirth"] = str(profile["dateOfBirth"]).split("T")[0]
    teacher = user.get("teacher") if isinstance(user.get("teacher"), dict) else None
    student = user.get("student") if isinstance(user.get("student"), dict) else None
    if is_teacher and teacher:
        profile.update({name: teacher.get(name) or "" for name in TEACHER_FIELDS})
    elif student:
        profile.update({name: student.get(name) or "" for name in STUDENT_FIELDS})
    return profile


async def load_profile(client, is_teacher: bool) -> dict:
    """Raises ApiError when the profile cannot be fetched."""
    body = await client.get(PROFILE_PATH)
    return to_profile(body if isinstance(body, dict) else {}, is_teacher)


async def update_profile(client, payload: dict):
    # Cleared optional fields are sent explicitly so the backend empties them
    data = {"phone": "", "address": "", "dateOfBirth": None}
    data.update({k: v for k, v in payload.items() if k in PERSONAL_FIELDS})
    return await client.patch(PROFILE_PATH, data)


async def change_password(client, payload: dict):
    return await client.patch(PROFILE_PATH, {"password": payload["newPassword"]})


async def load_teacher_id(client) -> str | None:
    """Teacher profile id of the signed-in user; None when unavailable."""
    try:
        body = await client.get(PROFILE_PATH)
    except ApiError as exc:
        logger.error("Error fetching user profile: %s", exc)
        return None
    if not isinstance(body, dict):
        return None
    teacher = body.get("teacher")
    return teacher.get("id") if isinstance(teacher, dict) else None
