"""
Tests for teacher feedback helpers
"""
import pytest

from portal.api.errors import ApiError
from portal.services.feedback import (
    average_rating,
    filter_feedback,
    is_relevant,
    load_teacher_feedback,
    to_feedback_row,
)

from tests.fakes import FakeClient

FEEDBACK = [
    {
        "id": "f1",
        "targetType": "Teacher",
        "targetId": "t1",
        "rating": 4,
        "comment": "Clear lectures",
        "student": {"rollNumber": "R1", "user": {"fullName": "Bo Li"}},
    },
    {"id": "f2", "targetType": "Teacher", "targetId": "t2", "rating": 1},
    {"id": "f3", "targetType": "Course", "targetName": "CS101", "rating": 5},
    {"id": "f4", "targetType": "System", "rating": 3},
    {"id": "f5", "targetType": "Teacher", "targetId": "t1", "rating": 5},
    None,
]


class TestRelevance:
    def test_teacher_feedback_must_target_me(self):
        assert is_relevant(FEEDBACK[0], "t1")
        assert not is_relevant(FEEDBACK[1], "t1")

    def test_without_teacher_id_only_system_is_kept(self):
        assert [f["id"] for f in FEEDBACK[:5] if is_relevant(f, None)] == ["f4"]


def test_rows_fill_in_unknowns():
    row = to_feedback_row(FEEDBACK[2])
    assert row["targetName"] == "CS101"
    assert row["studentName"] == "Unknown"
    assert row["studentRollNumber"] == "N/A"
    assert to_feedback_row(FEEDBACK[0])["targetName"] == "You"


def test_filter_and_average():
    rows = [to_feedback_row(f) for f in FEEDBACK[:5]]
    assert len(filter_feedback(rows, "all")) == 5
    assert [r["id"] for r in filter_feedback(rows, "course")] == ["f3"]
    # Teacher feedback only: (4 + 1 + 5) / 3
    assert average_rating(rows) == 3.3
    assert average_rating([]) == 0


@pytest.mark.asyncio
async def test_load_keeps_relevant_feedback():
    client = FakeClient(
        {
            ("GET", "/feedback"): {"data": FEEDBACK},
            ("GET", "/users/profile"): {"teacher": {"id": "t1"}},
        }
    )
    rows = await load_teacher_feedback(client)
    assert [r["id"] for r in rows] == ["f1", "f3", "f4", "f5"]
    assert rows[0]["studentName"] == "Bo Li"


@pytest.mark.asyncio
async def test_profile_failure_keeps_system_feedback():
    client = FakeClient(
        {
            ("GET", "/feedback"): FEEDBACK,
            ("GET", "/users/profile"): ApiError(status=500),
        }
    )
    rows = await load_teacher_feedback(client)
    assert [r["id"] for r in rows] == ["f4"]


@pytest.mark.asyncio
async def test_feedback_failure_raises():
    client = FakeClient({("GET", "/feedback"): ApiError(status=500)})
    with pytest.raises(ApiError):
        await load_teacher_feedback(client)
