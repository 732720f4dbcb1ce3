"""
Tests for teacher-side request review
"""
import pytest

from portal.services.requests_review import (
    backend_status,
    filter_requests,
    load_requests,
    respond,
    to_review_row,
)

from tests.fakes import FakeClient

RAW = [
    {
        "id": "r1",
        "type": "Certificate",
        "subject": "Transcript needed",
        "status": "pending",
        "createdAt": "2024-10-01T10:00:00Z",
        "student": {"rollNumber": "CS-01", "user": {"fullName": "Alice Khan"}},
    },
    {
        "id": "r2",
        "subject": "Leave for surgery",
        "status": "resolved",
        "student": {"rollNumber": "MA-09", "user": {"fullName": "Carla Diaz"}},
    },
    {"id": "r3", "subject": "Orphan request"},
]


def rows():
    return [to_review_row(r) for r in RAW]


def test_defaults_and_flattening():
    alice, carla, orphan = rows()
    assert alice["studentName"] == "Alice Khan"
    assert alice["submittedDate"] == "2024-10-01T10:00:00Z"
    assert carla["type"] == "Other"
    assert orphan["status"] == "pending"
    assert orphan["studentName"] == "Unknown"
    assert orphan["studentRollNumber"] == "N/A"


class TestFilterRequests:
    def test_status_filter(self):
        assert [r["id"] for r in filter_requests(rows(), status="resolved")] == ["r2"]

    def test_search_over_name_roll_subject_and_type(self):
        assert [r["id"] for r in filter_requests(rows(), search="alice")] == ["r1"]
        assert [r["id"] for r in filter_requests(rows(), search="ma-09")] == ["r2"]
        assert [r["id"] for r in filter_requests(rows(), search="SURGERY")] == ["r2"]
        assert [r["id"] for r in filter_requests(rows(), search="other")] == ["r2", "r3"]

    def test_all(self):
        assert len(filter_requests(rows())) == 3


@pytest.mark.asyncio
async def test_load_requests_normalizes_envelope():
    client = FakeClient({("GET", "/requests"): {"data": RAW}})
    loaded = await load_requests(client)
    assert [r["id"] for r in loaded] == ["r1", "r2", "r3"]


@pytest.mark.asyncio
async def test_respond_maps_in_progress():
    client = FakeClient({("PATCH", "/requests/r1/respond"): {}})
    await respond(client, "r1", "We are looking into it.", "in-progress")
    assert client.calls[0].payload == {"response": "We are looking into it.", "status": "in_progress"}
    assert backend_status("resolved") == "resolved"
