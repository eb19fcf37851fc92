"""
GateController - launch routing state machine.

Decides whether the user sees the web destination, the one-time
notification permission screen, or the native fallback.

Triggers:
- start()                    first trigger of the launch, idempotent
- on_attribution_changed()   debounced, bursts collapse into one fetch
- on_foreground()            app returned to foreground
- restart()                  user retry: clears the error flag, back to Loading

Key behaviors:
- One fetch cycle in flight at a time; triggers received meanwhile
  collapse into exactly one follow-up cycle
- Every cycle keeps Loading visible for at least min_loading_seconds
- Web is sticky: ordinary triggers and late results never leave it
- ConnectivityError leaves the route untouched and raises the retry flag
- Every other failure routes to Native
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from src.components.config_client import (
    ConfigClientError,
    ConnectivityError,
    DecodeError,
    EncodingFailure,
    NotConfiguredError,
)
from src.domain.state import (
    LOADING,
    NATIVE,
    GateState,
    NotificationPrompt,
    Web,
    describe,
    is_sticky,
)

from .models import (
    FailureKind,
    GateActionError,
    GateConfig,
    GateStatus,
    Trigger,
)
from .ports import (
    ClockPort,
    DestinationBuilder,
    DeviceContextProvider,
    PromptPolicyPort,
    RoutingClientPort,
    StateListener,
)

logger = logging.getLogger(__name__)

_FAILURE_KINDS: tuple[tuple[type[ConfigClientError], FailureKind], ...] = (
    (NotConfiguredError, FailureKind.NOT_CONFIGURED),
    (DecodeError, FailureKind.DECODE),
    (EncodingFailure, FailureKind.ENCODING),
)


def classify_failure(error: BaseException) -> FailureKind:
    """Map a fetch error to the failure taxonomy."""
    if isinstance(error, ConnectivityError):
        return FailureKind.CONNECTIVITY
    for error_type, kind in _FAILURE_KINDS:
        if isinstance(error, error_type):
            return kind
    if isinstance(error, ConfigClientError):
        return FailureKind.TRANSPORT
    return FailureKind.UNEXPECTED


class GateController:
    """Single owner of the route state."""

    def __init__(
        self,
        client: RoutingClientPort,
        policy: PromptPolicyPort,
        context_provider: DeviceContextProvider,
        clock: ClockPort,
        config: GateConfig | None = None,
        destination_builder: DestinationBuilder | None = None,
    ) -> None:
        self._client = client
        self._policy = policy
        self._context_provider = context_provider
        self._clock = clock
        self._config = config or GateConfig()
        self._destination_builder = destination_builder

        self._state: GateState = LOADING
        self._retry_available = False
        self._last_failure: FailureKind | None = None
        self._cycles_completed = 0
        self._started = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._cycle_task: asyncio.Task[None] | None = None
        self._debounce_task: asyncio.Task[None] | None = None
        self._rerun_requested = False
        self._listeners: list[StateListener] = []

    # --- Read Side ---

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def retry_available(self) -> bool:
        return self._retry_available

    def status(self) -> GateStatus:
        return GateStatus(
            state=self._state,
            retry_available=self._retry_available,
            in_flight=self._cycle_task is not None and not self._cycle_task.done(),
            last_failure=self._last_failure,
            cycles_completed=self._cycles_completed,
        )

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    # --- Triggers ---

    def start(self) -> None:
        """Begin routing for this launch. Later calls are no-ops."""
        if self._started:
            return
        self._started = True
        self._loop = asyncio.get_running_loop()
        self._request_cycle(Trigger.START)

    def on_foreground(self) -> None:
        if not self._started:
            return
        self._request_cycle(Trigger.FOREGROUND)

    def on_attribution_changed(self, change: Any = None) -> None:
        """Debounce attribution updates into a single fetch."""
        if not self._started or is_sticky(self._state):
            return
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounced())

    def attribution_listener(self, change: Any) -> None:
        """Thread-safe entry for attribution sources publishing off the loop."""
        loop = self._loop
        if loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self.on_attribution_changed(change)
        else:
            loop.call_soon_threadsafe(self.on_attribution_changed, change)

    def restart(self) -> None:
        """User-initiated retry; allowed from any state."""
        self._started = True
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._retry_available = False
        self._set_state(LOADING, reason=Trigger.RESTART.value)
        self._request_cycle(Trigger.RESTART)

    async def wait_idle(self) -> None:
        """Wait until no debounce timer or fetch cycle is pending."""
        while True:
            pending = [
                task
                for task in (self._debounce_task, self._cycle_task)
                if task is not None and not task.done()
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # --- Prompt Resolution ---

    async def accept_prompt(self) -> GateState:
        """Show the web destination and request notification permission."""
        prompt = self._require_prompt("accept prompt")
        self._set_state(Web(prompt.destination), reason="prompt_accepted")
        await self._policy.accept()
        return self._state

    async def decline_prompt(self) -> GateState:
        """Show the web destination without requesting permission."""
        prompt = self._require_prompt("decline prompt")
        self._set_state(Web(prompt.destination), reason="prompt_declined")
        await self._policy.decline()
        return self._state

    def _require_prompt(self, action: str) -> NotificationPrompt:
        if not isinstance(self._state, NotificationPrompt):
            raise GateActionError(action, self._state)
        return self._state

    # --- Cycle Scheduling ---

    async def _debounced(self) -> None:
        await self._clock.sleep(self._config.debounce_seconds)
        self._request_cycle(Trigger.ATTRIBUTION)

    def _request_cycle(self, trigger: Trigger) -> None:
        if is_sticky(self._state):
            logger.debug("Ignoring %s trigger: route is web", trigger.value)
            return
        if self._cycle_task is not None and not self._cycle_task.done():
            self._rerun_requested = True
            logger.debug("Coalescing %s trigger into follow-up cycle", trigger.value)
            return
        self._cycle_task = asyncio.get_running_loop().create_task(self._run_cycles(trigger))

    async def _run_cycles(self, trigger: Trigger) -> None:
        while True:
            self._rerun_requested = False
            await self._run_cycle(trigger)
            if not self._rerun_requested or is_sticky(self._state):
                self._rerun_requested = False
                return
            trigger = Trigger.COALESCED

    # --- Cycle ---

    async def _run_cycle(self, trigger: Trigger) -> None:
        if is_sticky(self._state):
            logger.debug("Skipping %s cycle: route is web", trigger.value)
            return

        self._retry_available = False
        started = self._clock.monotonic()
        logger.debug("Fetch cycle started (%s)", trigger.value)

        destination: str | None = None
        failure: FailureKind | None = None
        try:
            response = await self._client.fetch_routing(self._context_provider())
        except ConfigClientError as e:
            failure = classify_failure(e)
            logger.warning("Routing fetch failed (%s): %s", failure.value, e)
        except Exception:
            failure = FailureKind.UNEXPECTED
            logger.exception("Routing fetch raised unexpectedly")
        else:
            destination = response.destination()
            if destination is None:
                failure = FailureKind.SOFT
                logger.warning(
                    "Routing response unusable (ok=%s, message=%r)",
                    response.ok,
                    response.message,
                )

        await self._ensure_min_loading(started)
        self._cycles_completed += 1
        self._last_failure = failure

        if is_sticky(self._state):
            # Route resolved to web while this cycle was in flight
            logger.debug("Discarding %s cycle result: route is web", trigger.value)
            return

        if failure is FailureKind.CONNECTIVITY:
            self._retry_available = True
            return

        if failure is not None or destination is None:
            self._set_state(NATIVE, reason=(failure or FailureKind.SOFT).value)
            return

        if self._destination_builder is not None:
            try:
                destination = self._destination_builder(destination)
            except Exception:
                logger.exception("Destination augmentation failed; using raw URL")

        try:
            prompt = await self._policy.should_prompt()
        except Exception:
            logger.exception("Prompt eligibility check failed; showing destination")
            prompt = False
        if is_sticky(self._state):
            return
        if prompt:
            self._set_state(NotificationPrompt(destination), reason=trigger.value)
        else:
            self._set_state(Web(destination), reason=trigger.value)

    async def _ensure_min_loading(self, started: float) -> None:
        remaining = self._config.min_loading_seconds - (self._clock.monotonic() - started)
        if remaining > 0:
            await self._clock.sleep(remaining)

    def _set_state(self, state: GateState, *, reason: str) -> None:
        previous = self._state
        self._state = state
        if previous != state:
            logger.info("Gate route %s -> %s (%s)", describe(previous), describe(state), reason)
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Gate state listener failed")
