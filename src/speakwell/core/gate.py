"""Minimum-duration admission check for captured audio."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

MIN_DURATION_SECONDS = 30


class GateDecision(Enum):
    PROCEED = auto()
    REJECT = auto()


@dataclass(frozen=True)
class RecordingGate:
    """Decides whether a recording is long enough to be processed.

    A rejected recording is only excluded from processing; its file is left
    where it is.
    """

    min_duration_seconds: int = MIN_DURATION_SECONDS

    def decide(self, duration_seconds: int) -> GateDecision:
        if duration_seconds >= self.min_duration_seconds:
            return GateDecision.PROCEED
        return GateDecision.REJECT

    def admits(self, duration_seconds: int) -> bool:
        return self.decide(duration_seconds) is GateDecision.PROCEED
