"""
Tests for NotificationGatePolicy.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.memory_kv import InMemoryKeyValueStore
from src.adapters.permission_stub import StaticPermissionAdapter
from src.components.notification_gate import (
    COOLDOWN_STORAGE_KEY,
    NotificationGateConfig,
    NotificationGatePolicy,
)
from src.core.ports.permissions import PermissionStatus
from tests.conftest import FakeClock

# --- Fixtures ---


@pytest.fixture
def policy(
    permissions: StaticPermissionAdapter, kv: InMemoryKeyValueStore, clock: FakeClock
) -> NotificationGatePolicy:
    return NotificationGatePolicy(permissions, kv, clock)


class FailingPermissions:
    async def current_status(self) -> PermissionStatus:
        raise RuntimeError("permission service down")

    async def request_permission(self) -> PermissionStatus:
        raise RuntimeError("permission service down")


# --- should_prompt ---


class TestShouldPrompt:
    """Prompt eligibility."""

    @pytest.mark.asyncio
    async def test_undetermined_without_cooldown(self, policy: NotificationGatePolicy) -> None:
        """Fresh installs are prompted."""
        assert await policy.should_prompt() is True

    @pytest.mark.asyncio
    async def test_denied_without_cooldown(
        self, policy: NotificationGatePolicy, permissions: StaticPermissionAdapter
    ) -> None:
        """Denied users are asked again once the cooldown has passed."""
        permissions.report_status(PermissionStatus.DENIED)
        assert await policy.should_prompt() is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [PermissionStatus.AUTHORIZED, PermissionStatus.PROVISIONAL, PermissionStatus.EPHEMERAL],
    )
    async def test_delivering_status_never_prompts(
        self,
        status: PermissionStatus,
        policy: NotificationGatePolicy,
        permissions: StaticPermissionAdapter,
    ) -> None:
        """Nothing to ask when notifications already arrive."""
        permissions.report_status(status)
        assert await policy.should_prompt() is False

    @pytest.mark.asyncio
    async def test_future_cooldown_blocks(
        self, policy: NotificationGatePolicy, kv: InMemoryKeyValueStore, clock: FakeClock
    ) -> None:
        """An active cooldown suppresses the prompt."""
        kv.set(COOLDOWN_STORAGE_KEY, (clock.now_utc() + timedelta(hours=1)).isoformat())
        assert await policy.should_prompt() is False

    @pytest.mark.asyncio
    async def test_expired_cooldown_allows(
        self, policy: NotificationGatePolicy, kv: InMemoryKeyValueStore, clock: FakeClock
    ) -> None:
        """A cooldown in the past no longer applies."""
        kv.set(COOLDOWN_STORAGE_KEY, (clock.now_utc() - timedelta(seconds=1)).isoformat())
        assert await policy.should_prompt() is True

    @pytest.mark.asyncio
    async def test_unreadable_cooldown_discarded(
        self, policy: NotificationGatePolicy, kv: InMemoryKeyValueStore
    ) -> None:
        """Corrupt stored values are removed."""
        kv.set(COOLDOWN_STORAGE_KEY, "not-a-date")
        assert await policy.should_prompt() is True
        assert kv.get(COOLDOWN_STORAGE_KEY) is None

    @pytest.mark.asyncio
    async def test_naive_cooldown_read_as_utc(
        self, policy: NotificationGatePolicy, kv: InMemoryKeyValueStore
    ) -> None:
        """A stored value without an offset is treated as UTC."""
        kv.set(COOLDOWN_STORAGE_KEY, "2026-01-05T00:00:00")
        assert policy.cooldown_until() == datetime(2026, 1, 5, tzinfo=UTC)
        assert await policy.should_prompt() is False

    @pytest.mark.asyncio
    async def test_status_lookup_failure(self, kv: InMemoryKeyValueStore, clock: FakeClock) -> None:
        """A failing permission service counts as undetermined."""
        policy = NotificationGatePolicy(FailingPermissions(), kv, clock)
        assert await policy.should_prompt() is True


# --- Outcomes ---


class TestPromptOutcome:
    """Cooldown bookkeeping after the user answers."""

    @pytest.mark.asyncio
    async def test_decline_sets_cooldown(
        self, policy: NotificationGatePolicy, clock: FakeClock
    ) -> None:
        """Declining starts a three day cooldown."""
        await policy.decline()
        assert policy.cooldown_until() == clock.now_utc() + timedelta(days=3)
        assert await policy.should_prompt() is False

    @pytest.mark.asyncio
    async def test_cooldown_expires(self, policy: NotificationGatePolicy, clock: FakeClock) -> None:
        """After the interval the prompt is eligible again."""
        await policy.decline()
        clock.advance(timedelta(days=3, seconds=1).total_seconds())
        assert await policy.should_prompt() is True

    @pytest.mark.asyncio
    async def test_custom_interval(
        self, permissions: StaticPermissionAdapter, kv: InMemoryKeyValueStore, clock: FakeClock
    ) -> None:
        """The interval is configurable."""
        policy = NotificationGatePolicy(
            permissions, kv, clock, NotificationGateConfig(cooldown=timedelta(hours=6))
        )
        await policy.decline()
        assert policy.cooldown_until() == clock.now_utc() + timedelta(hours=6)

    @pytest.mark.asyncio
    async def test_accept_granted_clears_cooldown(
        self,
        policy: NotificationGatePolicy,
        permissions: StaticPermissionAdapter,
        kv: InMemoryKeyValueStore,
        clock: FakeClock,
    ) -> None:
        """A granted request removes any cooldown."""
        kv.set(COOLDOWN_STORAGE_KEY, (clock.now_utc() - timedelta(days=1)).isoformat())
        status = await policy.accept()
        assert status == PermissionStatus.AUTHORIZED
        assert permissions.request_count == 1
        assert kv.get(COOLDOWN_STORAGE_KEY) is None

    @pytest.mark.asyncio
    async def test_accept_denied_sets_cooldown(
        self,
        permissions: StaticPermissionAdapter,
        kv: InMemoryKeyValueStore,
        clock: FakeClock,
    ) -> None:
        """Denying the OS dialog counts like a decline."""
        permissions.request_outcome = PermissionStatus.DENIED
        policy = NotificationGatePolicy(permissions, kv, clock)
        assert await policy.accept() == PermissionStatus.DENIED
        assert policy.cooldown_until() == clock.now_utc() + timedelta(days=3)

    @pytest.mark.asyncio
    async def test_accept_request_failure(self, kv: InMemoryKeyValueStore, clock: FakeClock) -> None:
        """A failing request counts as denied."""
        policy = NotificationGatePolicy(FailingPermissions(), kv, clock)
        assert await policy.accept() == PermissionStatus.DENIED
        assert policy.cooldown_until() is not None

    @pytest.mark.asyncio
    async def test_record_accepted_checks_status(
        self, policy: NotificationGatePolicy, permissions: StaticPermissionAdapter
    ) -> None:
        """An acceptance that did not end authorized still sets the cooldown."""
        permissions.report_status(PermissionStatus.DENIED)
        await policy.record_prompt_outcome(accepted=True)
        assert policy.cooldown_until() is not None

        permissions.report_status(PermissionStatus.AUTHORIZED)
        await policy.record_prompt_outcome(accepted=True)
        assert policy.cooldown_until() is None

    def test_clear_cooldown(self, policy: NotificationGatePolicy, kv: InMemoryKeyValueStore) -> None:
        """clear_cooldown removes the stored value."""
        kv.set(COOLDOWN_STORAGE_KEY, "2030-01-01T00:00:00+00:00")
        policy.clear_cooldown()
        assert policy.cooldown_until() is None
