"""
Attribution component - Shell layer.

Entry points used by attribution sources and the host bridge.
"""

from __future__ import annotations

from ._impl import AttributionAggregator
from .models import (
    AttributionSnapshotOutput,
    AttributionSource,
    MergeResult,
    UpdateAttributionInput,
)


def run_update(
    input_data: UpdateAttributionInput,
    aggregator: AttributionAggregator,
) -> MergeResult:
    """Merge one fragment from a source."""
    return aggregator.update(input_data.payload, source=input_data.source)


def run_snapshot(aggregator: AttributionAggregator) -> AttributionSnapshotOutput:
    """Snapshot the record together with the install id and per-source payloads."""
    sources = {}
    for source in AttributionSource:
        payload = aggregator.latest(source)
        if payload:
            sources[source.value] = payload
    return AttributionSnapshotOutput(
        record=aggregator.snapshot(),
        install_id=aggregator.ensure_install_id(),
        sources=sources,
    )
