"""Shared test fixtures for the flaggroups test suite."""

import io

import pytest

from flaggroups.core import Program, Section
from flaggroups.lib.log_lib import manager as _manager_mod


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: runs the demo CLI in a subprocess"
    )


# ---------------------------------------------------------------------------
# Output system
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_manager():
    """Start every test with no OutputManager singleton, restore afterwards."""
    old = _manager_mod._manager
    _manager_mod._manager = None
    yield
    _manager_mod._manager = old


@pytest.fixture
def buf():
    """A StringIO buffer for capturing output."""
    return io.StringIO()


# ---------------------------------------------------------------------------
# Sections and programs
# ---------------------------------------------------------------------------
@pytest.fixture
def general():
    """The 'General' section with default layout (indentation 2, padding 4)."""
    return Section("General", indentation=2, padding=4)


@pytest.fixture
def program(buf):
    """An empty Program writing its help to `buf`."""
    return Program(name="myapp", output=buf)
