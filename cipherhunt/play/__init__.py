"""
Play - The hunt state machine.

States: started -> in_progress -> {completed | abandoned}.
The reducer turns (progress, current node, transition) into new
progress; persistence is the session layer's concern.
"""

from .progress import UserHuntProgress, ProgressStatus, ACTIVE_STATUSES
from .transition import Transition, TransitionType, TransitionResult
from .reducer import PlayReducer, apply_transition, available_choices, merge_state

__all__ = [
    "UserHuntProgress",
    "ProgressStatus",
    "ACTIVE_STATUSES",
    "Transition",
    "TransitionType",
    "TransitionResult",
    "PlayReducer",
    "apply_transition",
    "available_choices",
    "merge_state",
]
