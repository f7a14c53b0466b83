"""
Pytest configuration and shared fixtures for receipt codec tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Resets the process-wide runtime configuration between tests
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_vectors = importlib.import_module("fixtures.vectors")
_common = importlib.import_module("fixtures.common")

from poker_receipts.config import RuntimeConfig, set_default_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def reset_default_config():
    """Drop any process-wide config a test installed."""
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove POKER_RECEIPTS_* variables so config tests start from defaults."""
    for name in (
        "POKER_RECEIPTS_FIXED_TIMESTAMP",
        "POKER_RECEIPTS_MAX_MESSAGE_BYTES",
        "POKER_RECEIPTS_MAX_DATA_BYTES",
        "POKER_RECEIPTS_LOG_LEVEL",
        "POKER_RECEIPTS_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def fixed_clock(clean_env):
    """Install a config with a deterministic creation timestamp."""
    config = RuntimeConfig.from_dict({"codec": {"fixed_timestamp": 1492754385}})
    set_default_config(config)
    return config


@pytest.fixture
def private_key():
    return _vectors.PRIV


@pytest.fixture
def signer_address():
    return _vectors.ADDR


@pytest.fixture
def table_builder():
    return _common.make_builder()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "vectors: tests against known-good signed tokens"
    )
