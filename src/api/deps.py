from fastapi import Request

from src.adapters.permission_stub import StaticPermissionAdapter
from src.app_shell.context import GateContext
from src.components.redirects import RedirectRecovery
from src.core.ports.navigation import NavigationPort


class BridgeNavigation:
    """NavigationPort for the host bridge: the host performs the reload itself."""

    def __init__(self) -> None:
        self.last_reload: str | None = None

    async def reload(self, url: str, *, bypass_cache: bool = True) -> None:
        self.last_reload = url


# --- Context ---
def get_gate_context(request: Request) -> GateContext:
    return request.app.state.gate_context


def get_permissions(request: Request) -> StaticPermissionAdapter:
    return request.app.state.gate_context.permissions


def get_redirect_recovery(request: Request) -> RedirectRecovery:
    recovery = getattr(request.app.state, "redirect_recovery", None)
    if recovery is None:
        ctx: GateContext = request.app.state.gate_context
        navigation: NavigationPort = BridgeNavigation()
        recovery = RedirectRecovery(ctx.redirect_resolver, navigation, root_url="")
        request.app.state.redirect_recovery = recovery
    return recovery
