"""
Destination component - additive query enrichment of the web destination.
"""

from ._impl import (
    EXTRA_PARAM_FIELDS,
    DestinationConfig,
    augment_destination,
    augment_url,
    compose_extra_param,
    destination_params,
)

__all__ = [
    "EXTRA_PARAM_FIELDS",
    "DestinationConfig",
    "augment_destination",
    "augment_url",
    "compose_extra_param",
    "destination_params",
]
