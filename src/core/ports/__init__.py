# launch-gate: Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.kv import KeyValueStorePort
from src.core.ports.navigation import NavigationPort
from src.core.ports.permissions import PermissionPort, PermissionStatus
from src.core.ports.time import ClockPort

__all__ = [
    "ClockPort",
    "KeyValueStorePort",
    "NavigationPort",
    "PermissionPort",
    "PermissionStatus",
]
