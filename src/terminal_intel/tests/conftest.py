"""
Shared pytest configuration for terminal-intel tests.

This file provides shared fixtures and configuration for all test modules.
"""

import pytest

from terminal_intel.config.models import (
    AppConfig, HistoryConfig, SuggestionsConfig, TerminalIntelConfig
)
from terminal_intel.core.history import CommandHistoryTracker, InMemoryStore
from terminal_intel.tests.fixtures.fakes import FakeProvider, ManualClock, RecordingWriter


@pytest.fixture
def test_config(tmp_path):
    """Configuration with a short debounce and a throwaway data directory."""
    return TerminalIntelConfig(
        app=AppConfig(data_dir=str(tmp_path / "data"), log_file=None),
        suggestions=SuggestionsConfig(debounce_seconds=0.05),
        history=HistoryConfig(max_entries=100),
    )


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def local_provider():
    """Local provider that is down."""
    return FakeProvider("ollama", healthy=False)


@pytest.fixture
def cloud_provider():
    """Cloud provider that is not configured."""
    return FakeProvider("cloud", healthy=False)


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def tracker(memory_store):
    """Tracker with persistence in memory and a fixed git branch."""
    return CommandHistoryTracker(
        store=memory_store,
        max_entries=100,
        working_directory="/work/repo",
        branch_lookup=lambda path: "main",
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
