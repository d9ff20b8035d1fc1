"""
Pytest configuration file for the lazy sequence tests.

This file ensures that the project root is in the Python path
so that test files can import lazy, utils, models and app.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest


@pytest.fixture
def pull_log():
    """List that records every element pulled through an inspect() stage."""
    return []


@pytest.fixture(autouse=True)
def reset_performance_metrics():
    """Start each test with empty pipeline timing metrics"""
    from utils import clear_performance_metrics
    clear_performance_metrics()
    yield
