import argparse
import asyncio
import json
import logging
import sys

from src.adapters.permission_stub import StaticPermissionAdapter
from src.app_shell.config import Settings, configure_logging, validate_gate_rules
from src.app_shell.context import GateContext
from src.components.gate import status_to_dict
from src.core.ports.permissions import PermissionStatus
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")


def load_configured_rules(settings: Settings) -> Rules:
    try:
        return load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)


def get_context(settings: Settings, rules: Rules, permission: str) -> GateContext:
    permissions = StaticPermissionAdapter(status=PermissionStatus(permission))
    return GateContext.create_sqlite(rules, settings.db_path(rules), permissions)


async def handle_fetch(ctx: GateContext, args: argparse.Namespace) -> None:
    ctx.controller.start()
    await ctx.controller.wait_idle()
    status = status_to_dict(ctx.controller.status())
    status["install_id"] = ctx.attribution.ensure_install_id()
    print(json.dumps(status, indent=2))


async def handle_resolve(ctx: GateContext, args: argparse.Namespace) -> None:
    chain = await ctx.redirect_resolver.resolve_chain(args.url, max_hops=args.max_hops)
    for index, url in enumerate(chain.visited):
        print(f"{index:>3}  {url}")
    print(f"Stopped: {chain.stop_reason.value} after {chain.requests} requests")


def handle_show_config(rules: Rules) -> None:
    print(json.dumps(rules.model_dump(), indent=2))


def handle_reset_cooldown(ctx: GateContext) -> None:
    until = ctx.policy.cooldown_until()
    ctx.policy.clear_cooldown()
    print(f"Cleared prompt cooldown (was {until.isoformat() if until else 'unset'}).")


def handle_serve(args: argparse.Namespace) -> None:
    import uvicorn

    print(f"Starting gate bridge on {args.host}:{args.port}")
    uvicorn.run("src.api.main:app", host=args.host, port=args.port)


def main() -> None:
    parser = argparse.ArgumentParser(description="Launch gate CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # fetch
    fetch_parser = subparsers.add_parser("fetch", help="Run one gate cycle and print the route")
    fetch_parser.add_argument(
        "--permission",
        default=PermissionStatus.NOT_DETERMINED.value,
        choices=[status.value for status in PermissionStatus],
        help="Notification permission status to assume",
    )

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Walk a redirect chain manually")
    resolve_parser.add_argument("url", help="Start URL")
    resolve_parser.add_argument("--max-hops", type=int, default=None, help="Hop limit")

    # show-config
    subparsers.add_parser("show-config", help="Print the effective configuration")

    # reset-cooldown
    subparsers.add_parser("reset-cooldown", help="Clear the notification prompt cooldown")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the host bridge API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind")
    serve_parser.add_argument("--port", type=int, default=8765, help="Port to bind")

    args = parser.parse_args()

    settings = Settings()
    rules = load_configured_rules(settings)
    configure_logging(settings.log_level or rules.logging.level)

    if args.command == "show-config":
        handle_show_config(rules)
        return

    if args.command == "serve":
        handle_serve(args)
        return

    validate_gate_rules(rules, settings)
    permission = getattr(args, "permission", PermissionStatus.NOT_DETERMINED.value)
    ctx = get_context(settings, rules, permission)

    if args.command == "fetch":
        asyncio.run(handle_fetch(ctx, args))
    elif args.command == "resolve":
        asyncio.run(handle_resolve(ctx, args))
    elif args.command == "reset-cooldown":
        handle_reset_cooldown(ctx)


if __name__ == "__main__":
    main()
