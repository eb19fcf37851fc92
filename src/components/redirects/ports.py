"""
Redirects component - Port interfaces.
"""

from __future__ import annotations

from src.core.ports.navigation import NavigationPort

__all__ = ["NavigationPort"]
