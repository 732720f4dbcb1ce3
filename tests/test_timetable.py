"""
Tests for weekly schedule helpers
"""
import pytest

from portal.api.errors import ApiError
from portal.services.timetable import group_by_day, load_schedule

from tests.fakes import FakeClient


def test_group_by_day_orders_days_and_times():
    """Monday..Sunday order, entries sorted by start time"""
    entries = [
        {"id": 1, "dayOfWeek": "Wednesday", "startTime": "14:00"},
        {"id": 2, "dayOfWeek": "Monday", "startTime": "11:00"},
        {"id": 3, "dayOfWeek": "Monday", "startTime": "09:00"},
        {"id": 4, "dayOfWeek": "Sunday", "startTime": "08:00"},
    ]
    grouped = group_by_day(entries)
    assert list(grouped) == ["Monday", "Wednesday", "Sunday"]
    assert [e["id"] for e in grouped["Monday"]] == [3, 2]


def test_unknown_day_follows_week():
    grouped = group_by_day([{"dayOfWeek": "Funday"}, {"dayOfWeek": "Friday"}])
    assert list(grouped) == ["Friday", "Funday"]


def test_empty():
    assert group_by_day([]) == {}


class TestLoadSchedule:
    @pytest.mark.asyncio
    async def test_teacher_filters_by_profile_id(self):
        client = FakeClient(
            {
                ("GET", "/users/profile"): {"id": "u1", "teacher": {"id": "t9"}},
                ("GET", "/timetable"): {"data": [{"id": 1}]},
            }
        )
        entries = await load_schedule(client, is_teacher=True)
        assert entries == [{"id": 1}]
        assert client.calls_to("GET", "/timetable")[0].params == {"teacherId": "t9"}

    @pytest.mark.asyncio
    async def test_profile_failure_falls_back_to_unfiltered(self):
        client = FakeClient(
            {
                ("GET", "/users/profile"): ApiError(status=500),
                ("GET", "/timetable"): [],
            }
        )
        assert await load_schedule(client, is_teacher=True) == []
        assert client.calls_to("GET", "/timetable")[0].params is None

    @pytest.mark.asyncio
    async def test_student_skips_profile(self):
        client = FakeClient({("GET", "/timetable"): []})
        await load_schedule(client, is_teacher=False)
        assert [c.path for c in client.calls] == ["/timetable"]
