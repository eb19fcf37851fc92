"""
Config client component - remote routing request and response classification.
"""

from ._impl import (
    ConfigClient,
    ConfigClientConfig,
    build_request_body,
    create_config_client,
    decode_response,
    encode_body,
    validate_endpoint,
)
from .models import (
    ConfigClientError,
    ConnectivityError,
    DecodeError,
    DeviceContext,
    EncodingFailure,
    NotConfiguredError,
    RemoteConfigResponse,
    TransportError,
    parse_absolute_url,
)
from .ports import AttributionReaderPort

__all__ = [
    # Service
    "ConfigClient",
    "ConfigClientConfig",
    "create_config_client",
    # Functions
    "build_request_body",
    "decode_response",
    "encode_body",
    "parse_absolute_url",
    "validate_endpoint",
    # Models
    "DeviceContext",
    "RemoteConfigResponse",
    # Errors
    "ConfigClientError",
    "ConnectivityError",
    "DecodeError",
    "EncodingFailure",
    "NotConfiguredError",
    "TransportError",
    # Ports
    "AttributionReaderPort",
]
