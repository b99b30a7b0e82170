"""Phase state machine for a single pipeline run."""

from __future__ import annotations

from enum import Enum, auto
from typing import List

from .logging_utils import log_warn


class PipelineState(Enum):
    CONFIGURING = auto()
    RECONCILING = auto()
    PATCHING = auto()
    GENERATING = auto()
    VALIDATING = auto()
    DONE = auto()
    ABORTED = auto()


class PipelineEvent(Enum):
    CONFIGURED = auto()
    RECONCILED = auto()
    PATCHED = auto()
    GENERATED = auto()
    ABORT = auto()
    VALIDATED = auto()


_TRANSITIONS = {
    PipelineState.CONFIGURING: {
        PipelineEvent.CONFIGURED: PipelineState.RECONCILING,
    },
    PipelineState.RECONCILING: {
        PipelineEvent.RECONCILED: PipelineState.PATCHING,
    },
    PipelineState.PATCHING: {
        PipelineEvent.PATCHED: PipelineState.GENERATING,
    },
    PipelineState.GENERATING: {
        PipelineEvent.GENERATED: PipelineState.VALIDATING,
        PipelineEvent.ABORT: PipelineState.ABORTED,
    },
    PipelineState.VALIDATING: {
        PipelineEvent.VALIDATED: PipelineState.DONE,
    },
    PipelineState.DONE: {},
    PipelineState.ABORTED: {},
}

TERMINAL_STATES = frozenset({PipelineState.DONE, PipelineState.ABORTED})


class PipelineStateMachine:
    def __init__(self):
        self.state = PipelineState.CONFIGURING
        self.history: List[PipelineState] = [self.state]

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def transition(self, event: PipelineEvent) -> PipelineState:
        allowed = _TRANSITIONS.get(self.state, {})
        if event not in allowed:
            log_warn(f"Invalid state transition: {self.state.name} --{event.name}-->")
            return self.state
        self.state = allowed[event]
        self.history.append(self.state)
        return self.state
