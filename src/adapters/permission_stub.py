"""
Static permission adapter.

Stand-in PermissionPort for hosts that answer the OS permission dialog
out of band (the API bridge) and for development. The host reports the
current status; a request resolves to the configured outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.core.ports.permissions import PermissionStatus

logger = logging.getLogger(__name__)


@dataclass
class StaticPermissionAdapter:
    """
    PermissionPort backed by host-reported values.

    Attributes:
        status: Current status as last reported by the host
        request_outcome: Status a permission request resolves to
    """

    status: PermissionStatus = PermissionStatus.NOT_DETERMINED
    request_outcome: PermissionStatus = PermissionStatus.AUTHORIZED
    request_count: int = 0

    async def current_status(self) -> PermissionStatus:
        return self.status

    async def request_permission(self) -> PermissionStatus:
        """
        Resolve a permission request.

        The OS only shows its dialog while the status is undetermined;
        afterwards the existing status is returned unchanged.
        """
        self.request_count += 1
        if self.status == PermissionStatus.NOT_DETERMINED:
            self.status = self.request_outcome
        logger.debug(
            "StaticPermissionAdapter.request_permission: status=%s", self.status.value
        )
        return self.status

    # --- Host Helpers ---

    def report_status(self, status: PermissionStatus) -> None:
        """Record a status change observed by the host."""
        self.status = status
