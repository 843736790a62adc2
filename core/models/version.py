# ============================================================================
# DATABASE VERSION MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Running/desired database version
# PURPOSE: Parse, compare and render major.minor.patch versions
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: FdbVersion
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Database Version

Pending upgrades are keyed by the target version string, so str() must
round-trip the parsed form exactly.
"""

import re
from dataclasses import dataclass

from core.errors import VersionParseError

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-.*)?$")


@dataclass(frozen=True, order=True)
class FdbVersion:
    """A database version (major.minor.patch)."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: str) -> "FdbVersion":
        """
        Parse a version string.

        Raises:
            VersionParseError: If the string is not major.minor.patch
        """
        match = _VERSION_RE.match((value or "").strip())
        if match is None:
            raise VersionParseError(f"could not parse database version from {value!r}")
        return cls(*(int(part) for part in match.groups()))

    def supports_recovery_state(self) -> bool:
        """Status reports seconds_since_last_recovered from 7.1.22 on."""
        return self >= FdbVersion(7, 1, 22)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


__all__ = ["FdbVersion"]
