"""
Push token component - persisted push token published by the platform.
"""

from ._impl import PUSH_TOKEN_STORAGE_KEY, PushTokenStore, TokenListener, redact_token

__all__ = ["PUSH_TOKEN_STORAGE_KEY", "PushTokenStore", "TokenListener", "redact_token"]
