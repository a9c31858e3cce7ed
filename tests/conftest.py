"""
Shared pytest fixtures.
Puts src/ on the path and provides a fixed clock, a task factory and an
isolated config + store per test.
"""
import pytest
import sys
import os
from datetime import datetime

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from mood_engine.models import Emotion, Priority, Task


@pytest.fixture
def now():
    """Wednesday 2024-05-15 10:00"""
    return datetime(2024, 5, 15, 10, 0)


@pytest.fixture
def make_task(now):
    """Factory for tasks created at the fixed clock unless told otherwise"""
    def _make(title="Task", priority=Priority.MEDIUM, emotion=Emotion.ROUTINE, **kwargs):
        kwargs.setdefault('created_at', now)
        return Task(title=title, priority=priority, emotion=emotion, **kwargs)
    return _make


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "store.json"


@pytest.fixture
def config_file(tmp_path, store_path):
    """Config pointing the store at a temp file"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "store:\n"
        f"  path: {store_path}\n"
        "mood:\n"
        "  default: calm\n"
        "  time_of_day_adjustment: false\n"
        "scheduler:\n"
        "  escalation_window_days: 3\n"
        "  due_soon_hours: 0\n"
        "logging:\n"
        "  level: WARNING\n"
    )
    return config_path
