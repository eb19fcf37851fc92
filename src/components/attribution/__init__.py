"""
Attribution component - first-write-wins attribution aggregation.
"""

from ._impl import (
    INSTALL_ID_FIELD,
    INSTALL_ID_PREFIX,
    INSTALL_ID_STORAGE_KEY,
    AttributionAggregator,
    create_attribution_aggregator,
    merge_first_write_wins,
)
from .component import run_snapshot, run_update
from .models import (
    AttributionChange,
    AttributionSnapshotOutput,
    AttributionSource,
    MergeResult,
    UpdateAttributionInput,
)
from .ports import ChangeListener, KeyValueStorePort

__all__ = [
    # Entry points
    "run_snapshot",
    "run_update",
    # Service
    "AttributionAggregator",
    "create_attribution_aggregator",
    "merge_first_write_wins",
    # Models
    "AttributionChange",
    "AttributionSnapshotOutput",
    "AttributionSource",
    "MergeResult",
    "UpdateAttributionInput",
    # Ports
    "ChangeListener",
    "KeyValueStorePort",
    # Constants
    "INSTALL_ID_FIELD",
    "INSTALL_ID_PREFIX",
    "INSTALL_ID_STORAGE_KEY",
]
