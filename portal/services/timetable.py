"""
timetable.py - Weekly schedule helpers
Single responsibility: load a viewer's timetable and group it by weekday.
"""

from portal.domain.catalog import DAYS
from portal.services.normalize import normalize_list
from portal.services.profile import load_teacher_id


def group_by_day(entries: list[dict]) -> dict[str, list[dict]]:
    """
    Group entries by ``dayOfWeek`` in Monday..Sunday order, each day sorted
    by ``startTime`` ("HH:MM" sorts lexically). Unknown day names follow
    the week in first-seen order.
    """
    grouped: dict[str, list[dict]] = {}
    for entry in entries:
        grouped.setdefault(entry.get("dayOfWeek") or "", []).append(entry)
    for day_entries in grouped.values():
        day_entries.sort(key=lambda e: e.get("startTime") or "")

    ordered = {day: grouped[day] for day in DAYS if day in grouped}
    for day, day_entries in grouped.items():
        if day not in ordered:
            ordered[day] = day_entries
    return ordered


async def load_schedule(client, is_teacher: bool) -> list[dict]:
    """
    Teachers see their own classes (``teacherId`` from the profile);
    students see every entry the backend returns for them. Raises ApiError
    when the timetable itself cannot be fetched.
    """
    params = None
    if is_teacher:
        teacher_id = await load_teacher_id(client)
        if teacher_id:
            params = {"teacherId": teacher_id}
    return normalize_list(await client.get("/timetable", params=params))
