"""
Gate component - Shell layer.

Serializes controller status for the host bridge and the CLI.
"""

from __future__ import annotations

from typing import Any

from src.domain.state import GateState, destination_of

from .models import GateStatus


def state_to_dict(state: GateState) -> dict[str, Any]:
    return {"route": state.kind, "destination": destination_of(state)}


def status_to_dict(status: GateStatus) -> dict[str, Any]:
    data = state_to_dict(status.state)
    data.update(
        {
            "retry_available": status.retry_available,
            "in_flight": status.in_flight,
            "last_failure": status.last_failure.value if status.last_failure else None,
            "cycles_completed": status.cycles_completed,
        }
    )
    return data
