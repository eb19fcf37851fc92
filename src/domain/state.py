"""
Gate route states.

The gate is always in exactly one of four states. Loading is initial.
Web is sticky for the rest of the launch; Native and NotificationPrompt
may be re-entered by later fetch cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class Loading:
    """Waiting for the first routing decision."""

    kind: str = "loading"


@dataclass(frozen=True)
class NotificationPrompt:
    """One-time permission screen; resolves to Web(destination)."""

    destination: str
    kind: str = "notification_prompt"


@dataclass(frozen=True)
class Web:
    """Web destination (sticky terminal)."""

    destination: str
    kind: str = "web"


@dataclass(frozen=True)
class Native:
    """Native fallback experience."""

    kind: str = "native"


GateState: TypeAlias = Loading | NotificationPrompt | Web | Native

LOADING = Loading()
NATIVE = Native()


def is_sticky(state: GateState) -> bool:
    """Ordinary triggers never move the route away from a sticky state."""
    return isinstance(state, Web)


def destination_of(state: GateState) -> str | None:
    if isinstance(state, (NotificationPrompt, Web)):
        return state.destination
    return None


def describe(state: GateState) -> str:
    destination = destination_of(state)
    if destination is None:
        return state.kind
    return f"{state.kind}({destination})"
