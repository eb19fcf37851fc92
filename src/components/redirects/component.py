"""
Redirects component - Web collaborator shell.

The web-rendering collaborator reports main-frame navigations and
navigation failures here. A redirect-limit failure triggers one manual
resolution followed by a single cache-bypassing reload.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from ._impl import RedirectResolver
from .ports import NavigationPort

logger = logging.getLogger(__name__)

# Browser error identifiers meaning "too many HTTP redirects"
REDIRECT_LIMIT_ERRORS = frozenset(
    {
        "too_many_redirects",
        "http_too_many_redirects",
        "NSURLErrorHTTPTooManyRedirects",
        "-1007",
        "ERR_TOO_MANY_REDIRECTS",
    }
)

INTERNAL_SCHEMES = frozenset({"http", "https", "about", "file", "data"})


def is_redirect_limit_error(error_code: str | int) -> bool:
    return str(error_code) in REDIRECT_LIMIT_ERRORS


def should_open_externally(url: str) -> bool:
    """Non-web schemes (tel:, mailto:, app links) are handed to the OS."""
    scheme = urlparse(url).scheme.lower()
    if not scheme:
        return False
    return scheme not in INTERNAL_SCHEMES


class RedirectRecovery:
    """Per-web-view recovery state."""

    def __init__(
        self,
        resolver: RedirectResolver,
        navigation: NavigationPort,
        root_url: str,
    ) -> None:
        self.resolver = resolver
        self.navigation = navigation
        self.root_url = root_url
        self.last_main_frame_url: str | None = None
        self._resolving = False

    def note_main_frame_navigation(self, url: str) -> None:
        self.last_main_frame_url = url

    @property
    def is_resolving(self) -> bool:
        return self._resolving

    async def handle_navigation_failure(
        self,
        error_code: str | int,
        current_url: str | None = None,
    ) -> str | None:
        """
        React to a failed navigation.

        Returns the URL reloaded, or None when the failure is not a
        redirect-limit error or a resolution is already running.
        """
        if not is_redirect_limit_error(error_code):
            return None
        if self._resolving:
            logger.debug("Redirect recovery already running; ignoring failure")
            return None

        start_url = self.last_main_frame_url or current_url or self.root_url
        self._resolving = True
        try:
            resolved = await self.resolver.resolve(start_url)
        finally:
            self._resolving = False

        await self.navigation.reload(resolved, bypass_cache=True)
        return resolved
