from __future__ import annotations

import locale
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import httpx

from src.adapters.clock import SystemClock
from src.adapters.sqlite.kv_store import SQLiteKeyValueStore
from src.components.attribution import AttributionAggregator, create_attribution_aggregator
from src.components.config_client import (
    ConfigClient,
    ConfigClientConfig,
    DeviceContext,
    create_config_client,
)
from src.components.destination import DestinationConfig, augment_destination
from src.components.gate import GateConfig, GateController
from src.components.notification_gate import NotificationGateConfig, NotificationGatePolicy
from src.components.notification_link import PendingLinkStore
from src.components.push_token import PushTokenStore
from src.components.redirects import RedirectConfig, RedirectResolver, create_redirect_resolver
from src.core.ports.kv import KeyValueStorePort
from src.core.ports.permissions import PermissionPort
from src.core.ports.time import ClockPort
from src.rules.models import DeviceSection, Rules

DEFAULT_LOCALE = "en_US"


def system_locale() -> str:
    language, _ = locale.getlocale()
    return language or DEFAULT_LOCALE


class DeviceContextFactory:
    """Builds a fresh DeviceContext for every fetch (push token may change)."""

    def __init__(self, device: DeviceSection, push_tokens: PushTokenStore) -> None:
        self.device = device
        self.push_tokens = push_tokens

    def __call__(self) -> DeviceContext:
        return DeviceContext(
            bundle_id=self.device.bundle_id,
            os=self.device.os,
            locale=self.device.locale or system_locale(),
            store_id=self.device.store_id,
            push_token=self.push_tokens.token,
            firebase_project_id=self.device.firebase_project_id,
        )


@dataclass
class GateContext:
    """Explicitly constructed services for one launch."""

    rules: Rules
    store: KeyValueStorePort
    clock: ClockPort
    permissions: PermissionPort
    attribution: AttributionAggregator
    push_tokens: PushTokenStore
    pending_links: PendingLinkStore
    config_client: ConfigClient
    policy: NotificationGatePolicy
    redirect_resolver: RedirectResolver
    device_context: DeviceContextFactory
    controller: GateController

    @classmethod
    def create(
        cls,
        rules: Rules,
        store: KeyValueStorePort,
        permissions: PermissionPort,
        clock: ClockPort | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GateContext:
        clock = clock or SystemClock()

        attribution = create_attribution_aggregator(store)
        push_tokens = PushTokenStore(store)
        device_context = DeviceContextFactory(rules.device, push_tokens)

        config_client = create_config_client(
            attribution,
            ConfigClientConfig(
                endpoint=rules.gate.config_endpoint,
                timeout_seconds=rules.gate.request_timeout_seconds,
                push_token_fallback=rules.device.push_token_fallback,
                firebase_project_id_fallback=rules.device.firebase_project_id_fallback,
            ),
            transport=transport,
        )
        policy = NotificationGatePolicy(
            permissions,
            store,
            clock,
            NotificationGateConfig(cooldown=timedelta(days=rules.notifications.cooldown_days)),
        )
        redirect_resolver = create_redirect_resolver(
            RedirectConfig(
                max_hops=rules.redirects.max_hops,
                hop_timeout_seconds=rules.redirects.hop_timeout_seconds,
            ),
            transport=transport,
        )

        destination_config = DestinationConfig(
            augment=rules.destination.augment,
            sub_id_count=rules.destination.sub_id_count,
        )

        def build_destination(url: str) -> str:
            return augment_destination(
                url,
                attribution.snapshot(),
                attribution.ensure_install_id(),
                device_context(),
                destination_config,
            )

        controller = GateController(
            config_client,
            policy,
            device_context,
            clock,
            GateConfig(
                min_loading_seconds=rules.gate.min_loading_seconds,
                debounce_seconds=rules.gate.attribution_debounce_seconds,
            ),
            destination_builder=build_destination,
        )
        attribution.subscribe(controller.attribution_listener)

        return cls(
            rules=rules,
            store=store,
            clock=clock,
            permissions=permissions,
            attribution=attribution,
            push_tokens=push_tokens,
            pending_links=PendingLinkStore(),
            config_client=config_client,
            policy=policy,
            redirect_resolver=redirect_resolver,
            device_context=device_context,
            controller=controller,
        )

    @classmethod
    def create_sqlite(
        cls,
        rules: Rules,
        db_path: str,
        permissions: PermissionPort,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GateContext:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return cls.create(rules, SQLiteKeyValueStore(db_path), permissions, transport=transport)
