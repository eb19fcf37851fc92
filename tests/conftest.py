from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.memory_kv import InMemoryKeyValueStore
from src.adapters.permission_stub import StaticPermissionAdapter
from src.components.config_client import DeviceContext
from src.rules.models import Rules

CONFIG_ENDPOINT = "https://config.example/config.php"


class FakeClock:
    """ClockPort with virtual time; sleep advances both clocks instantly."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self.mono = 100.0
        self.sleeps: list[float] = []

    def now_utc(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self.mono

    def advance(self, seconds: float) -> None:
        self.mono += seconds
        self.current += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if seconds > 0:
            self.advance(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def permissions() -> StaticPermissionAdapter:
    return StaticPermissionAdapter()


@pytest.fixture
def device_context() -> DeviceContext:
    return DeviceContext(
        bundle_id="com.example.gate",
        os="iOS",
        locale="en_GB",
        store_id="id123",
    )


@pytest.fixture
def rules() -> Rules:
    return Rules.model_validate(
        {
            "gate": {"config_endpoint": CONFIG_ENDPOINT},
            "device": {
                "bundle_id": "com.example.gate",
                "locale": "en_GB",
                "store_id": "id123",
                "push_token_fallback": "fallback-token",
                "firebase_project_id_fallback": "fallback-project",
            },
        }
    )
