"""
Attribution API.

Attribution sources, the push token provider and the permission service
publish into the gate through these endpoints.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from src.adapters.permission_stub import StaticPermissionAdapter
from src.api.deps import get_gate_context, get_permissions
from src.api.schemas import (
    AttributionSnapshotResponse,
    InstallIdRequest,
    MergeResultResponse,
    PermissionStatusRequest,
    PushTokenRequest,
)
from src.app_shell.context import GateContext
from src.components.attribution import (
    AttributionSource,
    UpdateAttributionInput,
    run_snapshot,
    run_update,
)

router = APIRouter()


@router.get("/attribution", response_model=AttributionSnapshotResponse)
async def get_attribution(
    ctx: GateContext = Depends(get_gate_context),
) -> AttributionSnapshotResponse:
    snapshot = run_snapshot(ctx.attribution)
    return AttributionSnapshotResponse(
        install_id=snapshot.install_id,
        record=snapshot.record,
        sources=snapshot.sources,
    )


@router.put("/attribution/install-id", status_code=status.HTTP_204_NO_CONTENT)
async def put_install_id(
    body: InstallIdRequest,
    ctx: GateContext = Depends(get_gate_context),
) -> None:
    ctx.attribution.set_install_id(body.install_id)


@router.post("/attribution/{source}", response_model=MergeResultResponse)
async def post_attribution(
    source: AttributionSource,
    payload: dict[str, Any] = Body(...),
    ctx: GateContext = Depends(get_gate_context),
) -> MergeResultResponse:
    result = run_update(UpdateAttributionInput(payload=payload, source=source), ctx.attribution)
    return MergeResultResponse(
        source=result.source,
        accepted=list(result.accepted),
        ignored=list(result.ignored),
        dropped=list(result.dropped),
    )


@router.put("/push-token", status_code=status.HTTP_204_NO_CONTENT)
async def put_push_token(
    body: PushTokenRequest,
    ctx: GateContext = Depends(get_gate_context),
) -> None:
    ctx.push_tokens.update(body.token)


@router.put("/permissions/status", status_code=status.HTTP_204_NO_CONTENT)
async def put_permission_status(
    body: PermissionStatusRequest,
    permissions: StaticPermissionAdapter = Depends(get_permissions),
) -> None:
    permissions.report_status(body.status)
