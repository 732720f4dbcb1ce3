"""
requests_review.py - Teacher-side student request review
Single responsibility: load, filter and answer student requests.
"""

import logging

from portal.domain.filters import ALL
from portal.services.normalize import normalize_list

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("studentName", "studentRollNumber", "subject", "type")


def to_review_row(request: dict) -> dict:
    student = request.get("student") or {}
    user = student.get("user") or {}
    return {
        "id": request.get("id"),
        "type": request.get("type") or "Other",
        "subject": request.get("subject"),
        "description": request.get("description"),
        "status": request.get("status") or "pending",
        "submittedDate": request.get("createdAt") or request.get("submittedDate"),
        "studentName": user.get("fullName") or "Unknown",
        "studentRollNumber": student.get("rollNumber") or "N/A",
        "response": request.get("response") or None,
    }


async def load_requests(client) -> list[dict]:
    """Raises ApiError when the list cannot be fetched."""
    return [to_review_row(r) for r in normalize_list(await client.get("/requests"))]


def filter_requests(rows: list[dict], status: str = ALL, search: str = "") -> list[dict]:
    """Status filter plus case-insensitive match on name, roll number, subject or type."""
    query = (search or "").lower()
    result = []
    for row in rows:
        if status != ALL and row.get("status") != status:
            continue
        if query and not any(
            query in str(row.get(name) or "").lower() for name in SEARCH_FIELDS
        ):
            continue
        result.append(row)
    return result


def backend_status(status: str) -> str:
    return "in_progress" if status == "in-progress" else status


async def respond(client, request_id, response: str, status: str) -> None:
    await client.patch(
        f"/requests/{request_id}/respond",
        {"response": response, "status": backend_status(status)},
    )
