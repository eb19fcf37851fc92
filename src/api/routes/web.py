"""
Web collaborator API.

Redirect-limit recovery and one-shot notification links for the
embedded browser showing the Web route.
"""

from fastapi import APIRouter, Depends

from src.api.deps import get_gate_context, get_redirect_recovery
from src.api.schemas import (
    PendingLinkRequest,
    PendingLinkResponse,
    RedirectRecoveryRequest,
    RedirectRecoveryResponse,
)
from src.app_shell.context import GateContext
from src.components.redirects import RedirectRecovery
from src.domain.state import destination_of

router = APIRouter()


@router.post("/redirect-recovery", response_model=RedirectRecoveryResponse)
async def redirect_recovery(
    body: RedirectRecoveryRequest,
    ctx: GateContext = Depends(get_gate_context),
    recovery: RedirectRecovery = Depends(get_redirect_recovery),
) -> RedirectRecoveryResponse:
    recovery.root_url = destination_of(ctx.controller.state) or body.current_url or ""
    if body.last_main_frame_url:
        recovery.note_main_frame_navigation(body.last_main_frame_url)
    reload_url = await recovery.handle_navigation_failure(
        body.error_code, current_url=body.current_url
    )
    return RedirectRecoveryResponse(reload_url=reload_url or None)


@router.post("/pending-link", response_model=PendingLinkResponse)
async def store_pending_link(
    body: PendingLinkRequest,
    ctx: GateContext = Depends(get_gate_context),
) -> PendingLinkResponse:
    return PendingLinkResponse(url=ctx.pending_links.store_from_payload(body.payload))


@router.get("/pending-link", response_model=PendingLinkResponse)
async def consume_pending_link(
    ctx: GateContext = Depends(get_gate_context),
) -> PendingLinkResponse:
    return PendingLinkResponse(url=ctx.pending_links.consume())
