"""
Tests for admin dashboard statistics
"""
import pytest

from portal.api.errors import ApiError
from portal.services.dashboard import compute_stats, load_admin_stats

from tests.fakes import FakeClient


def test_active_users_exclude_inactive():
    stats = compute_stats(
        students=[{"isActive": True}, {"isActive": False}, {}],
        teachers=[{"isActive": True}],
        courses=[{}, {}],
    )
    assert stats.total_students == 3
    assert stats.total_teachers == 1
    assert stats.total_courses == 2
    assert stats.active_users == 3


@pytest.mark.asyncio
async def test_failed_branch_counts_as_empty():
    def users(params=None, **_):
        if params == {"role": "student"}:
            return [{"id": "s1"}, {"id": "s2"}]
        return ApiError(status=500)

    client = FakeClient({("GET", "/users"): users, ("GET", "/courses"): {"data": [{"id": "c1"}]}})
    stats = await load_admin_stats(client)
    assert (stats.total_students, stats.total_teachers, stats.total_courses) == (2, 0, 1)
