import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.adapters.permission_stub import StaticPermissionAdapter
from src.app_shell.config import Settings, configure_logging, validate_gate_rules
from src.app_shell.context import GateContext
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the gate services on startup unless a context was injected."""
    if getattr(app.state, "gate_context", None) is None:
        settings = Settings()
        try:
            rules = load_rules(settings.rules_path)
        except (FileNotFoundError, ValueError) as e:
            print(f"CRITICAL: Rules load failed: {e}", file=sys.stderr)
            sys.exit(1)

        configure_logging(settings.log_level or rules.logging.level)
        validate_gate_rules(rules, settings)
        app.state.gate_context = GateContext.create_sqlite(
            rules, settings.db_path(rules), StaticPermissionAdapter()
        )
        logger.info("Gate context ready (rules from %s)", settings.rules_path)

    yield

    ctx: GateContext = app.state.gate_context
    await ctx.controller.wait_idle()


def create_app(gate_context: GateContext | None = None) -> FastAPI:
    app = FastAPI(
        title="Launch Gate Bridge",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.gate_context = gate_context

    from src.api.routes import attribution, gate, web

    app.include_router(gate.router, prefix="/api/gate", tags=["Gate"])
    app.include_router(attribution.router, prefix="/api", tags=["Attribution"])
    app.include_router(web.router, prefix="/api/web", tags=["Web"])

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "gate-bridge"}

    return app


app = create_app()
