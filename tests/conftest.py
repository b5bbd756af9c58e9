"""Shared pytest fixtures for photoport tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from photoport.models import TokensAndUrlAuthData


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def mock_db_path(temp_dir: Path) -> Path:
    """Create a temporary SQLite database path."""
    return temp_dir / "test_state.sqlite3"


@pytest.fixture
def auth_data() -> TokensAndUrlAuthData:
    """Credentials with a fixed access token."""
    return TokensAndUrlAuthData(access_token="test_token")


def _response(status_code: int = 200, body=None, reason: str = "OK", content=None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if content is None:
        content = b"" if body is None else b"{}"
    response.content = content
    response.json.return_value = body
    return response


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    return _response


@pytest.fixture
def mock_session() -> Mock:
    """Mock requests.Session that answers album creation with a new id."""
    session = Mock(spec=requests.Session)
    session.post.return_value = _response(201, {"data": {"id": "abc123"}}, reason="Created")
    return session


@pytest.fixture
def sample_resource_dict() -> dict:
    """Sample exported photos bundle."""
    return {
        "albums": [
            {"id": "album-1", "name": "Holidays", "description": "Summer 2021"},
            {"id": "album-2", "name": "Pets"},
        ]
    }


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration between tests."""
    import logging

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    yield

    root_logger.handlers = original_handlers
    root_logger.level = original_level
