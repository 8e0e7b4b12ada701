"""Unit tests configuration file."""

import pytest

from typecodec.tests.samples import BASIC_STRING, VECTOR_STRUCT


def pytest_configure(config):
    """Hide file paths in test output."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def vector_struct():
    """A C++ std::vector<long long> as encoded by the runtime."""
    return VECTOR_STRUCT


@pytest.fixture
def basic_string():
    """A libc++ std::string, with commas in its template arguments."""
    return BASIC_STRING
