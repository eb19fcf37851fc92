"""
Destination URL augmentation.

Appends attribution and device parameters to the web destination. The
enrichment is additive: a parameter already present in the URL is never
overwritten, and empty values are never added, so applying it twice
yields the same URL.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.components.config_client import DeviceContext

EXTRA_PARAM_FIELDS = ("af_id", "campaign", "media_source")


@dataclass(frozen=True)
class DestinationConfig:
    augment: bool = True
    sub_id_count: int = 5


def _as_param(value: Any) -> str | None:
    """Scalar attribution values only; containers and nulls are skipped."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text or None


def compose_extra_param(snapshot: dict[str, Any], install_id: str) -> str | None:
    """Bundle install id and campaign fields as "key:value|key:value"."""
    values = {"af_id": install_id, **{k: snapshot.get(k) for k in EXTRA_PARAM_FIELDS[1:]}}
    parts = []
    for key in EXTRA_PARAM_FIELDS:
        value = _as_param(values.get(key))
        if value is not None:
            parts.append(f"{key}:{value}")
    return "|".join(parts) or None


def destination_params(
    snapshot: dict[str, Any],
    install_id: str,
    context: DeviceContext,
    config: DestinationConfig,
) -> list[tuple[str, str]]:
    """Candidate parameters in the order they are appended."""
    candidates: list[tuple[str, Any]] = []
    for slot in range(1, config.sub_id_count + 1):
        candidates.append((f"sub{slot}", snapshot.get(f"af_sub{slot}")))
    candidates.append(("deep_link_value", snapshot.get("deep_link_value")))
    candidates.append(("extra_param", compose_extra_param(snapshot, install_id)))
    candidates.append(("bundle_id", context.bundle_id))
    candidates.append(("os", context.os))
    candidates.append(("locale", context.locale))
    candidates.append(("store_id", context.store_id))

    params = []
    for name, raw in candidates:
        value = _as_param(raw)
        if value is not None:
            params.append((name, value))
    return params


def augment_url(url: str, params: list[tuple[str, str]]) -> str:
    """Append params whose names are not already in the query string."""
    parts = urlsplit(url)
    existing = parse_qsl(parts.query, keep_blank_values=True)
    present = {name for name, _ in existing}
    additions = [(name, value) for name, value in params if name not in present]
    if not additions:
        return url

    query = parts.query
    suffix = urlencode(additions)
    query = f"{query}&{suffix}" if query else suffix
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def augment_destination(
    url: str,
    snapshot: dict[str, Any],
    install_id: str,
    context: DeviceContext,
    config: DestinationConfig | None = None,
) -> str:
    config = config or DestinationConfig()
    if not config.augment:
        return url
    return augment_url(url, destination_params(snapshot, install_id, context, config))
