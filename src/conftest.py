import pytest

from test_utils.mock_session import AsyncSessionMock


@pytest.fixture
def mock_session() -> AsyncSessionMock:
    return AsyncSessionMock()
