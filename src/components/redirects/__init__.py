"""
Redirects component - manual redirect-chain resolution past the browser cap.
"""

from ._impl import (
    RedirectResolver,
    create_redirect_resolver,
    is_redirect_status,
    resolve_location,
)
from .component import (
    REDIRECT_LIMIT_ERRORS,
    RedirectRecovery,
    is_redirect_limit_error,
    should_open_externally,
)
from .models import RedirectChain, RedirectConfig, StopReason
from .ports import NavigationPort

__all__ = [
    # Shell
    "RedirectRecovery",
    "is_redirect_limit_error",
    "should_open_externally",
    "REDIRECT_LIMIT_ERRORS",
    # Service
    "RedirectResolver",
    "create_redirect_resolver",
    "is_redirect_status",
    "resolve_location",
    # Models
    "RedirectChain",
    "RedirectConfig",
    "StopReason",
    # Ports
    "NavigationPort",
]
