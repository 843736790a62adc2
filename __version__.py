# ============================================================================
# VERSION - PROCESS BOUNCE COORDINATOR
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# ============================================================================
"""
Version information for the process bounce coordinator.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
# Criteria for 0.3 - lock-mediated upgrades verified end to end
__version__ = "0.3.1"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-18"

EPOCH = 1
CODENAME = "Bounce Coordinator"
