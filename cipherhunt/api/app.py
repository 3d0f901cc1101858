"""
FastAPI Application - REST API for hunt authoring and play.

Endpoints:
    GET    /health                                         Health check
    GET    /api/v1/ciphers                                 List cipher kinds
    POST   /api/v1/ciphers/{kind}/encode                   Encode text
    POST   /api/v1/ciphers/{kind}/decode                   Decode text
    POST   /api/v1/hunts/validate                          Validate a draft hunt
    POST   /api/v1/hunts                                   Publish a draft hunt
    GET    /api/v1/hunts/{hunt_id}/players/{user_id}       Current play view
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/start    Start or resume
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/advance  Continue
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/choose   Pick a choice
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/attempt  Answer a puzzle
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/action   Trigger an action
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/hint     Reveal a hint
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/back     Go back
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/abandon  Abandon
    POST   /api/v1/hunts/{hunt_id}/players/{user_id}/restart  Restart

Authentication is handled upstream; `user_id` comes from the path.
All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional
import logging

from ..config import Settings, configure_logging
from ..errors import (
    AuthoringValidationError,
    CipherConfigError,
    CipherHuntError,
    CipherInputError,
    HuntNotFoundError,
    PlayIntegrityError,
    ProgressNotFoundError,
    PublishError,
)

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..ciphers import CipherKind
    from .service import APIService, TransitionRefused
    from .schemas import (
        # Request models
        CipherRequest,
        HuntDraftRequest,
        AttemptRequest,
        ChoiceRequest,
        HintRequest,
        # Response models
        CipherListResponse,
        CipherResponse,
        HuntValidationResponse,
        PublishResponse,
        PlayResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    settings = service.settings if service else Settings.from_env()
    configure_logging(settings)

    app = FastAPI(
        title="Cipher Hunt API",
        description="""
Puzzle-gated interactive stories: author a hunt as a graph of nodes and
encoded puzzles, publish it, then play it one node at a time.

## Error Codes

| Code | Description |
|------|-------------|
| `AUTHORING_VALIDATION` | Draft hunt breaks a graph invariant |
| `CIPHER_CONFIG` | Invalid shift, key or column count |
| `CIPHER_INPUT` | Text outside the cipher's domain |
| `PATH_BROKEN` | A node or puzzle on the player's path is missing |
| `PROGRESS_NOT_FOUND` | Player has not started the hunt |
| `HUNT_NOT_FOUND` | Hunt does not exist |
| `INVALID_TRANSITION` | Move not allowed on the current node |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(settings=settings)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(CipherHuntError)
    async def handle_engine_error(request: Request, exc: CipherHuntError) -> JSONResponse:
        if isinstance(exc, AuthoringValidationError):
            return make_error_response(
                ErrorCode.AUTHORING_VALIDATION, str(exc), details={"errors": exc.errors}
            )
        if isinstance(exc, CipherConfigError):
            return make_error_response(ErrorCode.CIPHER_CONFIG, str(exc))
        if isinstance(exc, CipherInputError):
            return make_error_response(ErrorCode.CIPHER_INPUT, str(exc))
        if isinstance(exc, PlayIntegrityError):
            return make_error_response(
                ErrorCode.PATH_BROKEN,
                str(exc),
                status_code=409,
                details={"node_id": exc.node_id, "puzzle_id": exc.puzzle_id},
            )
        if isinstance(exc, ProgressNotFoundError):
            return make_error_response(ErrorCode.PROGRESS_NOT_FOUND, str(exc), status_code=404)
        if isinstance(exc, HuntNotFoundError):
            return make_error_response(ErrorCode.HUNT_NOT_FOUND, str(exc), status_code=404)
        if isinstance(exc, PublishError):
            logger.error("Publish failed for hunt %s: %s", exc.hunt_id, exc)
            return make_error_response(
                ErrorCode.INTERNAL_ERROR,
                str(exc),
                status_code=500,
                details={"hunt_id": exc.hunt_id, "pending": exc.pending},
            )
        logger.error("Unhandled engine error: %s", exc)
        return make_error_response(ErrorCode.INTERNAL_ERROR, str(exc), status_code=500)

    @app.exception_handler(TransitionRefused)
    async def handle_refused(request: Request, exc: TransitionRefused) -> JSONResponse:
        return make_error_response(
            ErrorCode.INVALID_TRANSITION,
            str(exc),
            status_code=409,
            details={
                "reason": exc.reason,
                "view": exc.response.model_dump(mode="json"),
            },
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return api_service.health()

    # =========================================================================
    # Cipher Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/ciphers",
        response_model=CipherListResponse,
        tags=["Ciphers"],
        summary="List supported cipher kinds",
    )
    async def list_ciphers() -> CipherListResponse:
        return api_service.list_ciphers()

    @app.post(
        "/api/v1/ciphers/{kind}/encode",
        response_model=CipherResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Ciphers"],
        summary="Encode text with a cipher",
    )
    async def encode_text(kind: CipherKind, request: CipherRequest) -> CipherResponse:
        """Missing config values get the cipher's defaults; the response echoes them."""
        return api_service.encode(kind, request)

    @app.post(
        "/api/v1/ciphers/{kind}/decode",
        response_model=CipherResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Ciphers"],
        summary="Decode text with a cipher",
    )
    async def decode_text(kind: CipherKind, request: CipherRequest) -> CipherResponse:
        return api_service.decode(kind, request)

    # =========================================================================
    # Hunt Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/hunts/validate",
        response_model=HuntValidationResponse,
        tags=["Hunts"],
        summary="Validate a draft hunt without publishing",
    )
    async def validate_hunt(request: HuntDraftRequest) -> HuntValidationResponse:
        return api_service.validate_hunt(request)

    @app.post(
        "/api/v1/hunts",
        response_model=PublishResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Draft hunt is invalid"},
            500: {"model": ErrorResponse, "description": "Hunt left partially published"},
        },
        tags=["Hunts"],
        summary="Publish a draft hunt",
    )
    async def publish_hunt(request: HuntDraftRequest) -> PublishResponse:
        """
        Publish a draft hunt.

        References in node content use the draft's local ids; the
        response maps each local id to its persisted id.
        """
        return api_service.publish_hunt(request)

    # =========================================================================
    # Play Endpoints
    # =========================================================================

    play_responses = {
        404: {"model": ErrorResponse, "description": "Hunt or progress not found"},
        409: {"model": ErrorResponse, "description": "Move refused or path broken"},
    }

    @app.get(
        "/api/v1/hunts/{hunt_id}/players/{user_id}",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Get the player's current view",
    )
    async def get_play(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.current(user_id, hunt_id)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/start",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Start or resume a hunt",
    )
    async def start_hunt(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.start(user_id, hunt_id)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/advance",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Continue past a narrative, dialogue or visual cue node",
    )
    async def advance(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.advance(user_id, hunt_id)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/choose",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Pick a choice",
    )
    async def choose(hunt_id: str, user_id: str, request: ChoiceRequest) -> PlayResponse:
        return api_service.choose(user_id, hunt_id, request.choice_index)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/attempt",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Submit an answer to the current puzzle",
    )
    async def submit_attempt(hunt_id: str, user_id: str, request: AttemptRequest) -> PlayResponse:
        """An incorrect answer is a normal response with `outcome.correct=false`."""
        return api_service.submit_attempt(user_id, hunt_id, request.attempt)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/action",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Trigger the current action node",
    )
    async def trigger_action(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.trigger_action(user_id, hunt_id)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/hint",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Reveal a hint for the current puzzle",
    )
    async def reveal_hint(hunt_id: str, user_id: str, request: HintRequest) -> PlayResponse:
        """The hint's cost is charged the first time only."""
        return api_service.reveal_hint(user_id, hunt_id, request.hint_index)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/back",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Go back to the previous node",
    )
    async def go_back(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.go_back(user_id, hunt_id)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/abandon",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Abandon the hunt",
    )
    async def abandon(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.abandon(user_id, hunt_id)

    @app.post(
        "/api/v1/hunts/{hunt_id}/players/{user_id}/restart",
        response_model=PlayResponse,
        responses=play_responses,
        tags=["Play"],
        summary="Restart a completed or abandoned hunt",
    )
    async def restart(hunt_id: str, user_id: str) -> PlayResponse:
        return api_service.restart(user_id, hunt_id)

    return app


# For running directly: uvicorn cipherhunt.api.app:app
app = create_app()
