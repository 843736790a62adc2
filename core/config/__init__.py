# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the bounce coordinator.
"""

from core.config.defaults import (
    BounceDefaults,
    LockDefaults,
    TimeoutDefaults,
    AdminClientDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "BounceDefaults",
    "LockDefaults",
    "TimeoutDefaults",
    "AdminClientDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
