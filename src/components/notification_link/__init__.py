"""
Notification link component - one-shot link from remote notification payloads.
"""

from ._impl import LINK_PATHS, PendingLinkStore, extract_link

__all__ = ["LINK_PATHS", "PendingLinkStore", "extract_link"]
