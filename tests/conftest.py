"""
Campus Portal - Test Configuration and Fixtures
"""
import pytest

from portal.auth.session import Session
from tests.fakes import FakeClient, FakeNotifier


@pytest.fixture
def session(tmp_path) -> Session:
    """Signed-in session stored under a temporary directory"""
    s = Session(path=str(tmp_path / "session.json"))
    s.sign_in("test-token", {"id": "u1", "email": "admin@uni.edu", "role": "admin"})
    return s


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def fake_client(session) -> FakeClient:
    return FakeClient(session=session)
