"""
Tests for own-profile helpers
"""
import pytest

from portal.api.errors import ApiError
from portal.services.profile import (
    change_password,
    load_profile,
    load_teacher_id,
    to_profile,
    update_profile,
)

from tests.fakes import FakeClient

TEACHER_USER = {
    "id": "u1",
    "fullName": "Grace Hopper",
    "email": "grace@uni.edu",
    "phone": None,
    "dateOfBirth": "1990-12-10T00:00:00.000Z",
    "teacher": {"id": "t1", "employeeId": "E7", "department": "Computer Science"},
}


def test_teacher_profile_fields():
    profile = to_profile(TEACHER_USER, is_teacher=True)
    assert profile["fullName"] == "Grace Hopper"
    assert profile["phone"] == ""
    assert profile["dateOfBirth"] == "1990-12-10"
    assert profile["employeeId"] == "E7"
    assert profile["designation"] == ""
    assert "rollNumber" not in profile


def test_student_profile_fields():
    user = {"id": "u2", "fullName": "Bo Li", "student": {"rollNumber": "R1", "currentSemester": 3}}
    profile = to_profile(user, is_teacher=False)
    assert profile["rollNumber"] == "R1"
    assert profile["currentSemester"] == 3
    assert "employeeId" not in profile


@pytest.mark.asyncio
async def test_load_profile_tolerates_odd_body():
    client = FakeClient({("GET", "/users/profile"): ["unexpected"]})
    profile = await load_profile(client, is_teacher=False)
    assert profile["id"] is None
    assert profile["email"] == ""


@pytest.mark.asyncio
async def test_update_sends_cleared_optional_fields():
    client = FakeClient({("PATCH", "/users/profile"): {}})
    await update_profile(client, {"fullName": "Bo Li", "email": "bo@uni.edu", "rollNumber": "R1"})
    assert client.calls[0].payload == {
        "fullName": "Bo Li",
        "email": "bo@uni.edu",
        "phone": "",
        "address": "",
        "dateOfBirth": None,
    }


@pytest.mark.asyncio
async def test_change_password_sends_new_password_only():
    client = FakeClient({("PATCH", "/users/profile"): {}})
    await change_password(
        client,
        {"currentPassword": "old", "newPassword": "Secret123", "confirmPassword": "Secret123"},
    )
    assert client.calls[0].payload == {"password": "Secret123"}


@pytest.mark.asyncio
async def test_teacher_id():
    client = FakeClient({("GET", "/users/profile"): TEACHER_USER})
    assert await load_teacher_id(client) == "t1"


@pytest.mark.asyncio
async def test_teacher_id_unavailable(caplog):
    client = FakeClient({("GET", "/users/profile"): ApiError(status=500)})
    assert await load_teacher_id(client) is None
    assert "Error fetching user profile" in caplog.text
    client.routes[("GET", "/users/profile")] = {"id": "u2", "student": {}}
    assert await load_teacher_id(client) is None
