"""
ConfigClient - remote routing request.

Builds the routing request from the attribution snapshot, the install id
and the device context, sends one POST, and classifies the outcome.

Key behaviors:
- Device fields always win over attribution keys with the same name
- Body serialization failure raises EncodingFailure before any I/O
- Timeouts and network errors raise ConnectivityError
- Non-2xx responses are returned with ok=False, never raised
- 2xx responses that do not decode raise DecodeError
- Placeholder endpoints raise NotConfiguredError
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from src.components.attribution import INSTALL_ID_FIELD
from src.rules.models import PLACEHOLDER_MARKER

from .models import (
    ConnectivityError,
    DecodeError,
    DeviceContext,
    EncodingFailure,
    NotConfiguredError,
    RemoteConfigResponse,
    TransportError,
)
from .ports import AttributionReaderPort

logger = logging.getLogger(__name__)


# --- Configuration ---


@dataclass(frozen=True)
class ConfigClientConfig:
    """Endpoint and request settings."""

    endpoint: str
    timeout_seconds: float = 10.0
    push_token_fallback: str = ""
    firebase_project_id_fallback: str = ""


# --- Request Construction ---


def build_request_body(
    snapshot: dict[str, Any],
    install_id: str,
    context: DeviceContext,
    config: ConfigClientConfig,
) -> dict[str, Any]:
    """Merge attribution, install id and device fields (device wins)."""
    payload: dict[str, Any] = dict(snapshot)
    payload[INSTALL_ID_FIELD] = install_id

    payload["bundle_id"] = context.bundle_id
    payload["os"] = context.os
    payload["locale"] = context.locale
    if context.store_id:
        payload["store_id"] = context.store_id
    payload["push_token"] = context.push_token or config.push_token_fallback
    payload["firebase_project_id"] = (
        context.firebase_project_id or config.firebase_project_id_fallback
    )
    return payload


def encode_body(payload: dict[str, Any]) -> bytes:
    """Serialize payload as strict JSON (no NaN/Infinity)."""
    try:
        return json.dumps(payload, allow_nan=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingFailure(f"Request body is not valid JSON: {e}", cause=e) from e


def validate_endpoint(endpoint: str) -> str:
    """Return the endpoint or raise NotConfiguredError."""
    endpoint = endpoint.strip()
    if not endpoint or PLACEHOLDER_MARKER in endpoint:
        raise NotConfiguredError("Config endpoint is not configured")
    parsed = urlparse(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise NotConfiguredError(f"Config endpoint is not an http(s) URL: {endpoint}")
    return endpoint


# --- Response Classification ---


def decode_response(status_code: int, body: bytes) -> RemoteConfigResponse:
    """
    Decode a response body according to its status.

    Non-2xx: best-effort decode, ok forced to False.
    2xx: must decode, otherwise DecodeError.
    """
    is_success = 200 <= status_code < 300

    try:
        data = json.loads(body)
        decoded = RemoteConfigResponse.model_validate(data)
    except (ValueError, ValidationError) as e:
        if not is_success:
            return RemoteConfigResponse(ok=False)
        raise DecodeError(f"Undecodable config response: {e}", cause=e) from e

    if not is_success:
        return decoded.model_copy(update={"ok": False})
    return decoded


class ConfigClient:
    """Sends routing requests to the configuration endpoint."""

    def __init__(
        self,
        attribution: AttributionReaderPort,
        config: ConfigClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.attribution = attribution
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout_seconds),
            transport=self._transport,
            follow_redirects=False,
        )

    async def fetch_routing(self, context: DeviceContext) -> RemoteConfigResponse:
        """POST the routing request and classify the response."""
        endpoint = validate_endpoint(self.config.endpoint)

        payload = build_request_body(
            self.attribution.snapshot(),
            self.attribution.ensure_install_id(),
            context,
            self.config,
        )
        body = encode_body(payload)

        try:
            async with self._client() as client:
                response = await client.post(
                    endpoint,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            logger.warning("Config request connectivity failure: %s", type(e).__name__)
            raise ConnectivityError(f"Config endpoint unreachable: {e}", cause=e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Config request failed: {e}", cause=e) from e

        logger.debug("Config response status=%s", response.status_code)
        return decode_response(response.status_code, response.content)


def create_config_client(
    attribution: AttributionReaderPort,
    config: ConfigClientConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ConfigClient:
    """Factory for ConfigClient."""
    return ConfigClient(attribution, config, transport=transport)
