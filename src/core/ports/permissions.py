"""
Notification permission port.

Wraps the OS permission service as an awaitable call returning an
explicit status instead of a completion callback.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class PermissionStatus(str, Enum):
    """OS-level notification permission status."""

    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    AUTHORIZED = "authorized"
    PROVISIONAL = "provisional"
    EPHEMERAL = "ephemeral"

    @property
    def allows_delivery(self) -> bool:
        """Authorized, provisional and ephemeral all deliver notifications."""
        return self in _DELIVERING


_DELIVERING = frozenset(
    {
        PermissionStatus.AUTHORIZED,
        PermissionStatus.PROVISIONAL,
        PermissionStatus.EPHEMERAL,
    }
)


class PermissionPort(Protocol):
    """Permission-request service provided by the host platform."""

    async def current_status(self) -> PermissionStatus:
        """Current permission status without prompting the user."""
        ...

    async def request_permission(self) -> PermissionStatus:
        """Show the OS permission dialog and return the resulting status."""
        ...
