"""
Gate API.

Host bridge for the launch gate: the embedding shell forwards lifecycle
triggers and prompt answers, and polls the route to render.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.deps import get_gate_context
from src.api.schemas import GateStatusResponse
from src.app_shell.context import GateContext
from src.components.gate import GateActionError, status_to_dict

router = APIRouter()


def _status(ctx: GateContext) -> GateStatusResponse:
    return GateStatusResponse(**status_to_dict(ctx.controller.status()))


@router.get("/state", response_model=GateStatusResponse)
async def get_state(
    wait: bool = False,
    ctx: GateContext = Depends(get_gate_context),
) -> GateStatusResponse:
    """Current route; with wait=true, block until pending cycles settle."""
    if wait:
        await ctx.controller.wait_idle()
    return _status(ctx)


@router.post("/start", response_model=GateStatusResponse)
async def start(ctx: GateContext = Depends(get_gate_context)) -> GateStatusResponse:
    ctx.controller.start()
    return _status(ctx)


@router.post("/foreground", response_model=GateStatusResponse)
async def foreground(ctx: GateContext = Depends(get_gate_context)) -> GateStatusResponse:
    ctx.controller.on_foreground()
    return _status(ctx)


@router.post("/restart", response_model=GateStatusResponse)
async def restart(ctx: GateContext = Depends(get_gate_context)) -> GateStatusResponse:
    ctx.controller.restart()
    return _status(ctx)


@router.post("/prompt/accept", response_model=GateStatusResponse)
async def accept_prompt(ctx: GateContext = Depends(get_gate_context)) -> GateStatusResponse:
    try:
        await ctx.controller.accept_prompt()
    except GateActionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return _status(ctx)


@router.post("/prompt/decline", response_model=GateStatusResponse)
async def decline_prompt(ctx: GateContext = Depends(get_gate_context)) -> GateStatusResponse:
    try:
        await ctx.controller.decline_prompt()
    except GateActionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return _status(ctx)
