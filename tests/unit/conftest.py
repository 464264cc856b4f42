"""Conftest for unit tests - automatically mark all tests as unit tests."""

import pytest

from owl_fts.codec.byte_cursor import ByteCursor


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to everything collected under tests/unit."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def make_cursor():
    """Build a ByteCursor from a list of ints or a bytes literal."""

    def _make(data) -> ByteCursor:
        return ByteCursor(bytes(data))

    return _make
