from pathlib import Path

import pytest


def pytest_collection_modifyitems(items):
    """Mark every test under this directory as a unit test."""
    current_dir = Path(__file__).parent
    for item in items:
        if current_dir in Path(item.fspath).parents:
            item.add_marker(pytest.mark.unit)
