"""Pytest configuration for the signal generator tests.

Puts the project root on ``sys.path`` so ``signal_gen`` and
``mock_instruments`` import without installing the package, and provides a
generator driver wired to the mock device.
"""

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path():
    """Insert the repository root at the front of ``sys.path`` if needed."""
    root = str(Path(__file__).resolve().parents[1])
    if root not in sys.path:
        sys.path.insert(0, root)


_ensure_project_root_on_path()

from mock_instruments import MockCJDS66  # noqa: E402
from signal_gen import CJDS66_Generator  # noqa: E402


@pytest.fixture
def device():
    return MockCJDS66()


@pytest.fixture
def gen(device):
    gen = CJDS66_Generator("MOCK::CJDS66", command_delay=0)
    gen.attach(device)
    return gen
