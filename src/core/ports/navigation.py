"""
Navigation port for the web-rendering collaborator.
"""

from __future__ import annotations

from typing import Protocol


class NavigationPort(Protocol):
    """The embedded browser that shows the Web route."""

    async def reload(self, url: str, *, bypass_cache: bool = True) -> None:
        """Load url in the main frame, optionally ignoring cached responses."""
        ...
