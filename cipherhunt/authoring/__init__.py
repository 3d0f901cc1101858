"""
Authoring - Build a hunt as a draft, then publish it.

Drafts use local ids; publishing validates the whole graph and swaps
local ids for store-assigned ones in two phases.
"""

from .draft import DraftGraph, LOCAL_ID_PREFIX
from .publisher import Publisher, PublishResult

__all__ = [
    "DraftGraph",
    "LOCAL_ID_PREFIX",
    "Publisher",
    "PublishResult",
]
