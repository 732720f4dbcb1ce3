"""
feedback.py - Student feedback for teachers
Single responsibility: pick the feedback relevant to the signed-in teacher
and summarize it.
"""

from portal.domain.filters import ALL
from portal.services.normalize import normalize_list
from portal.services.profile import load_teacher_id

TARGET_TYPES = ("Teacher", "Course", "System")


def is_relevant(feedback: dict, teacher_id: str | None) -> bool:
    target = feedback.get("targetType")
    if target == "Teacher":
        return bool(teacher_id) and feedback.get("targetId") == teacher_id
    if target == "Course":
        # Course ownership is not resolved; all course feedback is shown
        return bool(teacher_id)
    return target == "System"


def to_feedback_row(feedback: dict) -> dict:
    student = feedback.get("student") if isinstance(feedback.get("student"), dict) else {}
    user = student.get("user") if isinstance(student.get("user"), dict) else {}
    target = feedback.get("targetType")
    return {
        "id": feedback.get("id"),
        "targetType": target,
        "targetName": "You" if target == "Teacher" else (feedback.get("targetName") or "Unknown"),
        "studentName": user.get("fullName") or "Unknown",
        "studentRollNumber": student.get("rollNumber") or "N/A",
        "rating": feedback.get("rating") or 0,
        "comment": feedback.get("comment") or "",
        "createdAt": feedback.get("createdAt"),
    }


async def load_teacher_feedback(client) -> list[dict]:
    """
    GET /feedback, keep what concerns the signed-in teacher. A failed
    profile lookup only drops teacher and course feedback; a failed
    feedback fetch raises ApiError.
    """
    records = normalize_list(await client.get("/feedback"))
    teacher_id = await load_teacher_id(client)
    return [
        to_feedback_row(r)
        for r in records
        if isinstance(r, dict) and is_relevant(r, teacher_id)
    ]


def filter_feedback(rows: list[dict], target: str) -> list[dict]:
    if target == ALL:
        return rows
    return [r for r in rows if (r.get("targetType") or "").lower() == target]


def average_rating(rows: list[dict]) -> float:
    """Mean rating of teacher feedback, one decimal; 0 when there is none."""
    ratings = [r["rating"] for r in rows if r.get("targetType") == "Teacher"]
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings), 1)
