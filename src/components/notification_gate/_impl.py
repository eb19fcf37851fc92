"""
NotificationGatePolicy - one-time permission prompt eligibility.

Key behaviors:
- No prompt when the OS already delivers notifications
  (authorized, provisional, ephemeral)
- No prompt while a persisted cooldown is in the future
- Declines and unsuccessful accepts set cooldown = now + interval
- Accepts that end authorized clear the cooldown
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from src.core.ports.kv import KeyValueStorePort
from src.core.ports.permissions import PermissionPort, PermissionStatus
from src.core.ports.time import ClockPort

logger = logging.getLogger(__name__)

COOLDOWN_STORAGE_KEY = "notifications.prompt_cooldown_until"


@dataclass(frozen=True)
class NotificationGateConfig:
    cooldown: timedelta = timedelta(days=3)


class NotificationGatePolicy:
    """Owns the persisted prompt cooldown."""

    def __init__(
        self,
        permissions: PermissionPort,
        store: KeyValueStorePort,
        clock: ClockPort,
        config: NotificationGateConfig | None = None,
    ) -> None:
        self.permissions = permissions
        self.store = store
        self.clock = clock
        self.config = config or NotificationGateConfig()

    # --- Cooldown ---

    def cooldown_until(self) -> datetime | None:
        raw = self.store.get(COOLDOWN_STORAGE_KEY)
        if not raw:
            return None
        try:
            until = datetime.fromisoformat(raw)
        except ValueError:
            logger.warning("Discarding unreadable prompt cooldown %r", raw)
            self.store.delete(COOLDOWN_STORAGE_KEY)
            return None
        if until.tzinfo is None:
            until = until.replace(tzinfo=UTC)
        return until

    def _set_cooldown(self) -> datetime:
        until = self.clock.now_utc() + self.config.cooldown
        self.store.set(COOLDOWN_STORAGE_KEY, until.isoformat())
        logger.info("Notification prompt cooldown until %s", until.isoformat())
        return until

    def clear_cooldown(self) -> None:
        self.store.delete(COOLDOWN_STORAGE_KEY)

    # --- Policy ---

    async def _current_status(self) -> PermissionStatus:
        try:
            return await self.permissions.current_status()
        except Exception:
            logger.exception("Permission status lookup failed")
            return PermissionStatus.NOT_DETERMINED

    async def should_prompt(self) -> bool:
        status = await self._current_status()
        if status.allows_delivery:
            return False

        until = self.cooldown_until()
        if until is not None and until > self.clock.now_utc():
            return False
        return True

    def _apply_status(self, status: PermissionStatus) -> None:
        if status.allows_delivery:
            self.clear_cooldown()
        else:
            self._set_cooldown()

    async def record_prompt_outcome(self, accepted: bool) -> None:
        """Record the user's answer; acceptance is checked against the OS status."""
        if not accepted:
            self._set_cooldown()
            return
        self._apply_status(await self._current_status())

    async def accept(self) -> PermissionStatus:
        """Request OS permission and record the result."""
        try:
            status = await self.permissions.request_permission()
        except Exception:
            logger.exception("Notification permission request failed")
            status = PermissionStatus.DENIED

        if not status.allows_delivery:
            logger.info("Notification permission not granted (%s)", status.value)
        self._apply_status(status)
        return status

    async def decline(self) -> None:
        await self.record_prompt_outcome(accepted=False)
