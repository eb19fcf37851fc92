from typing import Any, Literal

from pydantic import BaseModel, Field

from src.components.attribution import AttributionSource
from src.core.ports.permissions import PermissionStatus

Route = Literal["loading", "notification_prompt", "web", "native"]


# --- Gate ---
class GateStatusResponse(BaseModel):
    route: Route
    destination: str | None = None
    retry_available: bool
    in_flight: bool
    last_failure: str | None = None
    cycles_completed: int


# --- Attribution ---
class MergeResultResponse(BaseModel):
    source: AttributionSource
    accepted: list[str]
    ignored: list[str]
    dropped: list[str]


class AttributionSnapshotResponse(BaseModel):
    install_id: str
    record: dict[str, Any]
    sources: dict[str, dict[str, Any]]


class InstallIdRequest(BaseModel):
    install_id: str = Field(min_length=1)


class PushTokenRequest(BaseModel):
    token: str | None = None


class PermissionStatusRequest(BaseModel):
    status: PermissionStatus


# --- Web ---
class RedirectRecoveryRequest(BaseModel):
    error_code: str
    last_main_frame_url: str | None = None
    current_url: str | None = None


class RedirectRecoveryResponse(BaseModel):
    reload_url: str | None = None
    bypass_cache: bool = True


class PendingLinkRequest(BaseModel):
    payload: dict[str, Any]


class PendingLinkResponse(BaseModel):
    url: str | None = None
