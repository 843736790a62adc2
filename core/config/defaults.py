# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for bounce policy, locking, timeouts
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the bounce pipeline. Cluster specs can override the
bounce policy per cluster; everything else comes from environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class BounceDefaults:
    """
    Defaults for bounce policy.

    Cluster specs override minimum uptime and the missing-process grace
    window; the rest is process-wide.
    """
    # Cluster must have been up this long before processes are bounced
    minimum_uptime_seconds: int = 600

    # Process groups missing for longer than this are ignored
    ignore_missing_processes_seconds: int = 30

    # Smallest delay ever returned by the stability gate
    minimum_delay_seconds: float = 0.001

    # Cap on process ids listed in a requeue message
    max_listed_processes: int = 10

    # Use seconds_since_last_recovered instead of per-process uptime
    use_recovery_state: bool = False

    @classmethod
    def from_env(cls) -> "BounceDefaults":
        """Create from environment variables."""
        return cls(
            minimum_uptime_seconds=int(os.getenv("BOUNCE_MINIMUM_UPTIME_SECONDS", 600)),
            ignore_missing_processes_seconds=int(
                os.getenv("BOUNCE_IGNORE_MISSING_PROCESSES_SECONDS", 30)
            ),
            minimum_delay_seconds=float(os.getenv("BOUNCE_MINIMUM_DELAY_SECONDS", 0.001)),
            max_listed_processes=int(os.getenv("BOUNCE_MAX_LISTED_PROCESSES", 10)),
            use_recovery_state=_env_bool("BOUNCE_USE_RECOVERY_STATE", False),
        )


@dataclass(frozen=True)
class LockDefaults:
    """Defaults for the cluster lock."""
    # Namespace prefix hashed into the advisory lock key
    key_prefix: str = "bounce:cluster:"

    @classmethod
    def from_env(cls) -> "LockDefaults":
        """Create from environment variables."""
        return cls(key_prefix=os.getenv("LOCK_KEY_PREFIX", "bounce:cluster:"))


@dataclass(frozen=True)
class TimeoutDefaults:
    """
    Defaults for blocking operations.

    One timeout bounds the whole tick: status fetch, lock acquisition,
    pending upgrade bookkeeping and the kill request.
    """
    tick_timeout_seconds: float = 120.0

    @classmethod
    def from_env(cls) -> "TimeoutDefaults":
        """Create from environment variables."""
        return cls(
            tick_timeout_seconds=float(os.getenv("BOUNCE_TICK_TIMEOUT_SECONDS", 120.0)),
        )


@dataclass(frozen=True)
class AdminClientDefaults:
    """Defaults for the management-plane HTTP client."""
    base_url: str = "http://localhost:8080"
    connect_timeout: float = 10.0
    read_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "AdminClientDefaults":
        """Create from environment variables."""
        return cls(
            base_url=os.getenv("ADMIN_API_URL", "http://localhost:8080"),
            connect_timeout=float(os.getenv("ADMIN_CONNECT_TIMEOUT", 10.0)),
            read_timeout=float(os.getenv("ADMIN_READ_TIMEOUT", 30.0)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    bounce: BounceDefaults = field(default_factory=BounceDefaults)
    locks: LockDefaults = field(default_factory=LockDefaults)
    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)
    admin: AdminClientDefaults = field(default_factory=AdminClientDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            bounce=BounceDefaults.from_env(),
            locks=LockDefaults.from_env(),
            timeouts=TimeoutDefaults.from_env(),
            admin=AdminClientDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "BounceDefaults",
    "LockDefaults",
    "TimeoutDefaults",
    "AdminClientDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
