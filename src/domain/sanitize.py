"""
Attribution value model and transport sanitization.

Attribution fragments arrive from SDK callbacks, deep links and install
referrers with arbitrary nesting. Before they are merged or sent over the
wire they are reduced to the JSON-representable value model:

    string | number | bool | null | list[value] | dict[str, value]

Key behaviors:
- Pure and deterministic (same input -> same output)
- Idempotent: sanitize(sanitize(x)) == sanitize(x)
- Unclassifiable values are dropped per field, never rejected wholesale
- Boxed(None) is "absent" and dropped, plain None is JSON null
- Dates become ISO-8601 UTC strings without fractional seconds
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, TypeAlias

AttributionValue: TypeAlias = (
    str | int | float | bool | None | list["AttributionValue"] | dict[str, "AttributionValue"]
)
AttributionRecord: TypeAlias = dict[str, AttributionValue]

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class _Absent:
    """Marker for values removed during sanitization."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()


@dataclass(frozen=True)
class Boxed:
    """
    Optional wrapper as delivered by some attribution SDK bridges.

    Boxed(None) means "no value" and is dropped; Boxed(x) unwraps to x.
    Boxes may be nested.
    """

    value: Any = None


def format_timestamp(value: datetime | date) -> str:
    """Render a date-like value as ISO-8601 UTC (naive treated as UTC)."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(ISO_FORMAT)


def _unbox(value: Any) -> Any:
    while isinstance(value, Boxed):
        if value.value is None:
            return ABSENT
        value = value.value
    return value


def _sanitize_number(value: int | float | Decimal) -> Any:
    if isinstance(value, Decimal):
        if not value.is_finite():
            return ABSENT
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, float) and not math.isfinite(value):
        return ABSENT
    return value


def sanitize(value: Any) -> Any:
    """
    Reduce a raw attribution value to the transport-safe value model.

    Returns ABSENT when the value cannot be represented; callers drop it.
    """
    value = _unbox(value)
    if value is ABSENT:
        return ABSENT

    if value is None:
        return None
    if isinstance(value, Enum):
        return sanitize(value.value)
    if isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float, Decimal)):
        return _sanitize_number(value)
    if isinstance(value, str):
        return str(value)
    # datetime is a date subclass, both covered here
    if isinstance(value, date):
        return format_timestamp(value)
    if isinstance(value, Mapping):
        return sanitize_mapping(value)
    if isinstance(value, (list, tuple)):
        cleaned = [sanitize(item) for item in value]
        return [item for item in cleaned if item is not ABSENT]

    return ABSENT


def sanitize_mapping(payload: Mapping[Any, Any]) -> AttributionRecord:
    """Sanitize every field of a mapping, dropping non-string keys and absent values."""
    cleaned: AttributionRecord = {}
    for key, raw in payload.items():
        if not isinstance(key, str):
            continue
        value = sanitize(raw)
        if value is ABSENT:
            continue
        cleaned[key] = value
    return cleaned


def dropped_keys(payload: Mapping[Any, Any], cleaned: Mapping[str, Any]) -> list[str]:
    """Keys of payload that did not survive sanitization (for debug logging)."""
    return sorted(str(key) for key in payload if key not in cleaned)
