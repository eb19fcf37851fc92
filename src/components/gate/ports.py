"""
Gate component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from src.components.config_client import DeviceContext, RemoteConfigResponse
from src.core.ports.permissions import PermissionStatus
from src.core.ports.time import ClockPort
from src.domain.state import GateState


class RoutingClientPort(Protocol):
    async def fetch_routing(self, context: DeviceContext) -> RemoteConfigResponse:
        ...


class PromptPolicyPort(Protocol):
    async def should_prompt(self) -> bool:
        ...

    async def accept(self) -> PermissionStatus:
        ...

    async def decline(self) -> None:
        ...


DeviceContextProvider = Callable[[], DeviceContext]
DestinationBuilder = Callable[[str], str]
StateListener = Callable[[GateState], None]

__all__ = [
    "ClockPort",
    "DestinationBuilder",
    "DeviceContextProvider",
    "PromptPolicyPort",
    "RoutingClientPort",
    "StateListener",
]
