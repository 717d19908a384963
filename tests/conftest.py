"""
Root conftest.py - Session-scoped fixtures shared across all tests.

Puts the ``src`` directory on the path so the suite runs from a checkout
without an editable install.
"""

from pathlib import Path
import sys

import pytest

PROJECT_DIR = Path(__file__).parent.parent.resolve()
SRC_DIR = PROJECT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))
TESTS_DIR = Path(__file__).parent.resolve()


@pytest.fixture(scope="session")
def tests_dir():
    """Path to tests directory."""
    return TESTS_DIR
