# ============================================================================
# TEST CONFIGURATION
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Tests - Shared fixtures
# PURPOSE: Isolate tests from environment-driven defaults
# CREATED: 18 OCT 2026
# ============================================================================

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import reset_defaults

_ENV_PREFIXES = ("BOUNCE_", "ADMIN_", "LOCK_KEY_PREFIX")


@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch):
    """Every test starts from built-in defaults."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    reset_defaults()
    yield
    reset_defaults()
