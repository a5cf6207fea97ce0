"""Pytest configuration for tests.

Sets up Python path and shared fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.fixtures.git_fixtures import FakeGitData  # noqa: E402


@pytest.fixture
def fake_git_data():
    """In-memory git data service with a single "main" branch."""
    return FakeGitData()
