"""
Config client component - Data models and error taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict

# --- Request Context ---


@dataclass(frozen=True)
class DeviceContext:
    """
    Device fields sent with every routing request.

    push_token and firebase_project_id may be None; the client then
    substitutes fixed fallback literals so the backend contract is stable.
    """

    bundle_id: str
    os: str
    locale: str
    store_id: str | None = None
    push_token: str | None = None
    firebase_project_id: str | None = None


# --- Response ---


def parse_absolute_url(value: str | None) -> str | None:
    """Return value if it is an absolute http(s) URL, else None."""
    if not value or not value.strip():
        return None
    candidate = value.strip()
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return None
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return None
    return candidate


class RemoteConfigResponse(BaseModel):
    """Routing decision returned by the configuration endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    ok: bool
    message: str | None = None
    url: str | None = None
    expires: float | None = None

    def destination(self) -> str | None:
        """Destination URL when the response is usable for the Web route."""
        if not self.ok:
            return None
        return parse_absolute_url(self.url)

    def expires_at(self) -> datetime | None:
        """expires as an aware timestamp, or None when absent or out of range."""
        if self.expires is None:
            return None
        try:
            return datetime.fromtimestamp(self.expires, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None


# --- Errors ---


class ConfigClientError(Exception):
    """Base exception for routing fetch failures."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ConnectivityError(ConfigClientError):
    """Timeout, DNS failure, no network or unreachable host. User-retryable."""


class NotConfiguredError(ConfigClientError):
    """Endpoint intentionally unset (template placeholder) or unusable."""


class DecodeError(ConfigClientError):
    """2xx response whose body is not a routing response."""


class EncodingFailure(ConfigClientError):
    """Request body could not be serialized; nothing was sent."""


class TransportError(ConfigClientError):
    """Any other transport-level failure (protocol errors, proxies)."""
