"""
API Module - HTTP interface for authoring tools and players.

A front end:
1. Encodes clues while authoring
2. Validates and publishes a draft hunt
3. Starts a hunt for a player
4. Sends moves (continue, choose, answer, hint, back) and renders the view

Puzzle solutions stay server-side.
"""

from .schemas import (
    # Requests
    CipherRequest,
    HuntDraftRequest,
    AttemptRequest,
    ChoiceRequest,
    HintRequest,
    # Responses
    CipherResponse,
    CipherListResponse,
    HuntValidationResponse,
    PublishResponse,
    PlayResponse,
    ErrorResponse,
    ErrorCode,
)
from .service import APIService, TransitionRefused
from .app import create_app

__all__ = [
    # Requests
    "CipherRequest",
    "HuntDraftRequest",
    "AttemptRequest",
    "ChoiceRequest",
    "HintRequest",
    # Responses
    "CipherResponse",
    "CipherListResponse",
    "HuntValidationResponse",
    "PublishResponse",
    "PlayResponse",
    "ErrorResponse",
    "ErrorCode",
    # Service
    "APIService",
    "TransitionRefused",
    "create_app",
]
