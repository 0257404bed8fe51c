"""Root conftest for test suite - adds src to Python path."""

import sys
from pathlib import Path

import pytest

# Add repository root to Python path for src imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.price_index.engine.adapter import QueryAdapter  # noqa: E402
from src.price_index.engine.mock_service import MockGroundingService  # noqa: E402


@pytest.fixture
def mock_service() -> MockGroundingService:
    """Canned grounding service that records its calls."""
    return MockGroundingService()


@pytest.fixture
def adapter(mock_service: MockGroundingService) -> QueryAdapter:
    """Query adapter wired to the canned service."""
    return QueryAdapter(mock_service)
