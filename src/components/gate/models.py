"""
Gate component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.domain.state import GateState


class Trigger(str, Enum):
    """What caused a fetch cycle."""

    START = "start"
    FOREGROUND = "foreground"
    ATTRIBUTION = "attribution"
    RESTART = "restart"
    COALESCED = "coalesced"  # follow-up cycle for triggers received in flight


class FailureKind(str, Enum):
    """Last failure observed by the controller."""

    CONNECTIVITY = "connectivity"
    NOT_CONFIGURED = "not_configured"
    DECODE = "decode"
    ENCODING = "encoding"
    TRANSPORT = "transport"
    SOFT = "soft"  # reachable server said ok=false or sent a bad URL
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class GateConfig:
    """Controller timing."""

    min_loading_seconds: float = 2.0
    debounce_seconds: float = 0.5


@dataclass(frozen=True)
class GateStatus:
    """Controller status for the UI collaborator."""

    state: GateState
    retry_available: bool
    in_flight: bool
    last_failure: FailureKind | None
    cycles_completed: int


class GateActionError(Exception):
    """User action not valid in the current route state."""

    def __init__(self, action: str, state: GateState) -> None:
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while route is {state.kind}")
