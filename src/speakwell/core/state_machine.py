"""State machine for the recorder session lifecycle."""

from __future__ import annotations

from enum import Enum, auto
import logging


class RecorderState(Enum):
    IDLE = auto()
    REQUESTING = auto()
    ACTIVE = auto()
    STOPPING = auto()
    STOPPED = auto()


class RecorderEvent(Enum):
    START = auto()
    ACQUIRED = auto()
    DENIED = auto()
    FAIL = auto()
    STOP = auto()
    STOP_DONE = auto()
    ABORT = auto()
    RESET = auto()


class StopOutcome(Enum):
    SUCCESS = auto()
    RECOVERED = auto()
    INCOMPLETE = auto()
    FAILED = auto()
    ABORTED = auto()


_TRANSITIONS = {
    RecorderState.IDLE: {
        RecorderEvent.START: RecorderState.REQUESTING,
    },
    RecorderState.REQUESTING: {
        RecorderEvent.ACQUIRED: RecorderState.ACTIVE,
        RecorderEvent.DENIED: RecorderState.IDLE,
        RecorderEvent.FAIL: RecorderState.IDLE,
        RecorderEvent.ABORT: RecorderState.IDLE,
    },
    RecorderState.ACTIVE: {
        RecorderEvent.STOP: RecorderState.STOPPING,
        RecorderEvent.ABORT: RecorderState.IDLE,
    },
    RecorderState.STOPPING: {
        RecorderEvent.STOP_DONE: RecorderState.STOPPED,
        RecorderEvent.ABORT: RecorderState.IDLE,
    },
    RecorderState.STOPPED: {
        RecorderEvent.START: RecorderState.REQUESTING,
        RecorderEvent.RESET: RecorderState.IDLE,
    },
}


class RecorderStateMachine:
    def __init__(self):
        self.state = RecorderState.IDLE

    def can(self, event: RecorderEvent) -> bool:
        return event in _TRANSITIONS.get(self.state, {})

    def transition(self, event: RecorderEvent) -> RecorderState:
        next_state = _TRANSITIONS.get(self.state, {}).get(event, self.state)
        if next_state == self.state and event not in _TRANSITIONS.get(self.state, {}):
            logging.getLogger(__name__).warning(
                "Invalid state transition: %s --%s--> %s", self.state, event, next_state
            )
        self.state = next_state
        return self.state
