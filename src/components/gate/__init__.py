"""
Gate component - launch routing state machine.
"""

from ._impl import GateController, classify_failure
from .component import state_to_dict, status_to_dict
from .models import (
    FailureKind,
    GateActionError,
    GateConfig,
    GateStatus,
    Trigger,
)
from .ports import (
    DestinationBuilder,
    DeviceContextProvider,
    PromptPolicyPort,
    RoutingClientPort,
    StateListener,
)

__all__ = [
    # Controller
    "GateController",
    "classify_failure",
    # Shell
    "state_to_dict",
    "status_to_dict",
    # Models
    "FailureKind",
    "GateActionError",
    "GateConfig",
    "GateStatus",
    "Trigger",
    # Ports
    "DestinationBuilder",
    "DeviceContextProvider",
    "PromptPolicyPort",
    "RoutingClientPort",
    "StateListener",
]
