"""
RedirectResolver - manual redirect-chain walk.

The embedded browser gives up after a fixed number of redirects. When
that happens the chain is walked here with HEAD requests and automatic
redirect following disabled, and the browser reloads the final URL.

Key behaviors:
- One HEAD per hop, each bounded by its own timeout
- Location headers are resolved against the current URL
- Stops on non-3xx, missing/unusable Location, max hops or any error
- Never raises: returns the last URL successfully reached
- At most max_hops requests per resolution
"""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import urljoin, urlparse

import httpx

from .models import RedirectChain, RedirectConfig, StopReason

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = RedirectConfig()


def resolve_location(current_url: str, location: str | None) -> str | None:
    """Resolve a Location header against the current URL (http(s) only)."""
    if not location or not location.strip():
        return None
    try:
        candidate = urljoin(current_url, location.strip())
        parsed = urlparse(candidate)
    except ValueError:
        return None
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return None
    return candidate


def is_redirect_status(status_code: int) -> bool:
    return 300 <= status_code < 400


class RedirectResolver:
    """Stateless between calls; each resolve owns its own chain."""

    def __init__(
        self,
        config: RedirectConfig = DEFAULT_CONFIG,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.hop_timeout_seconds),
            transport=self._transport,
            follow_redirects=False,
        )

    async def resolve_chain(self, start_url: str, max_hops: int | None = None) -> RedirectChain:
        """Walk the chain from start_url and return every URL reached."""
        limit = self.config.max_hops if max_hops is None else max_hops
        visited = [start_url]
        current = start_url
        requests = 0
        stop_reason = StopReason.MAX_HOPS

        async with self._client() as client:
            while requests < limit:
                requests += 1
                try:
                    response = await asyncio.wait_for(
                        client.head(current),
                        timeout=self.config.hop_timeout_seconds,
                    )
                except (asyncio.TimeoutError, httpx.HTTPError, httpx.InvalidURL) as e:
                    logger.debug("Redirect hop failed at %s: %s", current, type(e).__name__)
                    stop_reason = StopReason.TRANSPORT_ERROR
                    break

                if not is_redirect_status(response.status_code):
                    stop_reason = StopReason.FINAL
                    break

                next_url = resolve_location(current, response.headers.get("location"))
                if next_url is None:
                    stop_reason = StopReason.MISSING_LOCATION
                    break

                logger.debug("Redirect hop %d: %s -> %s", requests, current, next_url)
                current = next_url
                visited.append(current)

        chain = RedirectChain(
            visited=tuple(visited), stop_reason=stop_reason, requests=requests
        )
        logger.info(
            "Redirect chain resolved in %d hops (%s)", chain.hops, chain.stop_reason.value
        )
        return chain

    async def resolve(self, start_url: str, max_hops: int | None = None) -> str:
        """Final URL of the chain starting at start_url."""
        chain = await self.resolve_chain(start_url, max_hops=max_hops)
        return chain.final_url


def create_redirect_resolver(
    config: RedirectConfig = DEFAULT_CONFIG,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RedirectResolver:
    """Factory for RedirectResolver."""
    return RedirectResolver(config, transport=transport)
