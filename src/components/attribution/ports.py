"""
Attribution component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Callable

from src.core.ports.kv import KeyValueStorePort

from .models import AttributionChange

ChangeListener = Callable[[AttributionChange], None]

__all__ = ["ChangeListener", "KeyValueStorePort"]
