# ============================================================================
# DECISION SIGNAL MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Outcome of a reconciliation tick
# PURPOSE: Tagged result consumed by the outer control loop
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: DecisionSignal
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Decision Signal

Every stage returns Optional[DecisionSignal]: None means "no objection,
continue", anything else stops the pipeline. The outer loop maps kinds to
scheduling:

    NOOP           -> done, wait for the next external change
    SOFT_RETRY     -> run again promptly / on the next trigger
    DELAYED_RETRY  -> run again after delay_seconds
    ERROR          -> report, retry on the normal cadence
"""

from dataclasses import dataclass
from typing import Optional

from core.contracts import DecisionKind


@dataclass(frozen=True)
class DecisionSignal:
    """Result of a reconciliation stage."""

    kind: DecisionKind
    message: str = ""
    error: Optional[BaseException] = None
    delay_seconds: Optional[float] = None

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def noop(cls) -> "DecisionSignal":
        return cls(kind=DecisionKind.NOOP)

    @classmethod
    def failed(cls, error: BaseException, message: Optional[str] = None) -> "DecisionSignal":
        """Create an ERROR signal carrying its cause."""
        return cls(
            kind=DecisionKind.ERROR,
            message=message or str(error),
            error=error,
        )

    @classmethod
    def delayed(cls, delay_seconds: float, message: str) -> "DecisionSignal":
        """Create a DELAYED_RETRY signal."""
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be positive")
        return cls(
            kind=DecisionKind.DELAYED_RETRY,
            message=message,
            delay_seconds=delay_seconds,
        )

    @classmethod
    def soft(cls, message: str) -> "DecisionSignal":
        """Create a SOFT_RETRY signal."""
        return cls(kind=DecisionKind.SOFT_RETRY, message=message)

    # =========================================================================
    # PRECEDENCE
    # =========================================================================

    @staticmethod
    def most_severe(*signals: Optional["DecisionSignal"]) -> "DecisionSignal":
        """
        Pick the highest-severity signal.

        None entries are ignored; ties keep the earliest signal.
        With nothing to choose from the result is NOOP.
        """
        chosen: Optional[DecisionSignal] = None
        for signal in signals:
            if signal is None:
                continue
            if chosen is None or signal.kind.severity > chosen.kind.severity:
                chosen = signal
        return chosen or DecisionSignal.noop()

    @property
    def is_error(self) -> bool:
        return self.kind is DecisionKind.ERROR

    def __str__(self) -> str:
        if self.kind is DecisionKind.DELAYED_RETRY:
            return f"{self.kind.value} after {self.delay_seconds}s: {self.message}"
        if self.message:
            return f"{self.kind.value}: {self.message}"
        return self.kind.value


__all__ = ["DecisionSignal"]
