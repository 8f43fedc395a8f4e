"""
Pytest configuration for the lazykv tests.

Puts the project root on the Python path so the tests run from a plain
checkout, and resets engine settings between tests.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

import pytest

from lazykv import config


@pytest.fixture(autouse=True)
def reset_engine_settings(monkeypatch):
    """Every test starts from default settings, unaffected by the environment"""
    for name in ("LAZYKV_LOG_LEVEL", "LAZYKV_SHUFFLE_SEED", "LAZYKV_STRICT_CYCLE"):
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def one_shot():
    """Factory for one-shot (generator backed) sources"""
    def make(items):
        return (item for item in items)
    return make
