"""
API Service - Business logic layer between API and engine.

The service:
1. Turns draft hunt payloads into DraftGraphs and publishes them
2. Runs cipher encode/decode for authoring tools
3. Drives play through HuntPlayer
4. Formats views for front ends, never exposing puzzle solutions

This layer is framework-agnostic. Domain errors propagate as
CipherHuntError subclasses; a refused move raises TransitionRefused.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .. import __version__
from ..authoring import DraftGraph, Publisher
from ..ciphers import CipherConfig, CipherKind, cipher_info, get_codec
from ..config import Settings
from ..errors import AuthoringValidationError, CipherConfigError
from ..session import HuntPlayer, PlayView
from ..storage import HuntStore, InMemoryHuntStore
from ..story_graph import ValidationResult
from .schemas import (
    CipherInfo,
    CipherListResponse,
    CipherRequest,
    CipherResponse,
    ChoiceInfo,
    HealthResponse,
    HuntDraftRequest,
    HuntValidationResponse,
    NodeInfo,
    OutcomeInfo,
    PlayResponse,
    ProgressInfo,
    PublishResponse,
    PuzzleInfo,
)


class TransitionRefused(Exception):
    """A move the state machine refused; nothing was written."""

    def __init__(self, message: str, reason: str | None, response: PlayResponse):
        self.reason = reason
        self.response = response
        super().__init__(message)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Publish a hunt
        published = service.publish_hunt(request)

        # Play it
        view = service.start(user_id, published.hunt_id)
        view = service.submit_attempt(user_id, published.hunt_id, "HELLO WORLD")
    """
    store: HuntStore = field(default_factory=InMemoryHuntStore)
    settings: Settings = field(default_factory=Settings.from_env)

    def __post_init__(self):
        self.publisher = Publisher(self.store)
        self.player = HuntPlayer(self.store, path_limit=self.settings.path_limit)

    def health(self) -> HealthResponse:
        return HealthResponse(status="ok", service="cipherhunt", version=__version__)

    # =========================================================================
    # Ciphers
    # =========================================================================

    def list_ciphers(self) -> CipherListResponse:
        return CipherListResponse(ciphers=[CipherInfo(**info) for info in cipher_info()])

    def encode(self, kind: CipherKind, request: CipherRequest) -> CipherResponse:
        codec = get_codec(kind)
        config = codec.with_defaults(CipherConfig.from_dict(request.config))
        return CipherResponse(
            kind=codec.kind.value,
            input=request.text,
            output=codec.encode(request.text, config),
            config=config.to_dict(),
        )

    def decode(self, kind: CipherKind, request: CipherRequest) -> CipherResponse:
        codec = get_codec(kind)
        config = CipherConfig.from_dict(request.config)
        if codec.kind == CipherKind.SUBSTITUTION and config.key is None:
            raise CipherConfigError("substitution: decoding needs the key it was encoded with")
        config = codec.with_defaults(config)
        return CipherResponse(
            kind=codec.kind.value,
            input=request.text,
            output=codec.decode(request.text, config),
            config=config.to_dict(),
        )

    # =========================================================================
    # Authoring
    # =========================================================================

    def build_draft(self, request: HuntDraftRequest) -> DraftGraph:
        """
        Build a DraftGraph from a request.

        Raises AuthoringValidationError or CipherConfigError for payloads
        that cannot even be drafted.
        """
        starts = [node.local_id for node in request.nodes if node.is_starting_node]
        if len(starts) > 1:
            raise AuthoringValidationError(
                [f"Hunt must have exactly one starting node, found {len(starts)}"]
            )

        draft = DraftGraph(
            title=request.title,
            description=request.description,
            difficulty=request.difficulty,
            is_public=request.is_public,
            creator_id=request.creator_id,
        )
        for puzzle in request.puzzles:
            try:
                kind = CipherKind(puzzle.cipher_kind)
            except ValueError:
                raise AuthoringValidationError(
                    [f"Puzzle '{puzzle.local_id}' has unknown cipher kind '{puzzle.cipher_kind}'"]
                ) from None
            draft.add_puzzle(
                kind,
                solution=puzzle.solution,
                clue_text=puzzle.clue_text,
                cipher_config=puzzle.cipher_config,
                points=puzzle.points,
                hints=[hint.model_dump() for hint in puzzle.hints],
                title=puzzle.title,
                local_id=puzzle.local_id,
            )
        for node in request.nodes:
            draft.add_node(
                node.node_kind,
                node.content,
                choices=[choice.model_dump() for choice in node.choices] if node.choices is not None else None,
                is_starting_node=node.is_starting_node,
                local_id=node.local_id,
            )
        return draft

    def validate_hunt(self, request: HuntDraftRequest) -> HuntValidationResponse:
        try:
            result = self.build_draft(request).validate()
        except AuthoringValidationError as e:
            result = ValidationResult(valid=False, errors=list(e.errors))
        except CipherConfigError as e:
            result = ValidationResult(valid=False, errors=[str(e)])
        return HuntValidationResponse(
            valid=result.valid,
            errors=result.errors,
            warnings=result.warnings,
        )

    def publish_hunt(self, request: HuntDraftRequest) -> PublishResponse:
        result = self.publisher.publish(self.build_draft(request))
        return PublishResponse(
            hunt_id=result.hunt.hunt_id,
            title=result.hunt.title,
            starting_node_id=result.hunt.starting_node_id,
            id_map=result.id_map,
            warnings=result.warnings,
        )

    # =========================================================================
    # Play
    # =========================================================================

    def start(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.start(user_id, hunt_id))

    def current(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.current(user_id, hunt_id))

    def advance(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.advance(user_id, hunt_id))

    def choose(self, user_id: str, hunt_id: str, choice_index: int) -> PlayResponse:
        return self._respond(self.player.choose(user_id, hunt_id, choice_index))

    def submit_attempt(self, user_id: str, hunt_id: str, attempt: str) -> PlayResponse:
        return self._respond(self.player.submit_attempt(user_id, hunt_id, attempt))

    def trigger_action(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.trigger_action(user_id, hunt_id))

    def reveal_hint(self, user_id: str, hunt_id: str, hint_index: int) -> PlayResponse:
        return self._respond(self.player.reveal_hint(user_id, hunt_id, hint_index))

    def go_back(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.go_back(user_id, hunt_id))

    def abandon(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.abandon(user_id, hunt_id))

    def restart(self, user_id: str, hunt_id: str) -> PlayResponse:
        return self._respond(self.player.restart(user_id, hunt_id))

    def _respond(self, view: PlayView) -> PlayResponse:
        response = _convert_view(view)
        if view.result is not None and not view.result.success:
            raise TransitionRefused(view.result.error, view.result.error_code, response)
        return response


def _convert_view(view: PlayView) -> PlayResponse:
    progress = view.progress

    node_info = None
    if view.node is not None:
        node_info = NodeInfo(
            node_id=view.node.node_id,
            node_kind=view.node.node_kind.value,
            content=view.node.content.to_dict(),
            choices=[ChoiceInfo(index=index, text=choice.text) for index, choice in view.choices],
            is_end=view.node.is_end,
        )

    puzzle_info = None
    if view.puzzle is not None:
        puzzle = view.puzzle
        puzzle_info = PuzzleInfo(
            puzzle_id=puzzle.puzzle_id,
            title=puzzle.title,
            clue_text=puzzle.clue_text,
            cipher_kind=puzzle.cipher_kind.value,
            cipher_name=get_codec(puzzle.cipher_kind).name,
            points=puzzle.points,
            hint_count=len(puzzle.hints),
            solved=progress.has_completed(puzzle.puzzle_id),
        )

    outcome = None
    if view.result is not None:
        result = view.result
        outcome = OutcomeInfo(
            success=result.success,
            correct=result.correct,
            feedback=result.feedback,
            hint_text=result.hint_text,
            points_awarded=result.points_awarded,
            changes=result.changes,
        )

    return PlayResponse(
        progress=ProgressInfo(**progress.to_dict()),
        node=node_info,
        puzzle=puzzle_info,
        outcome=outcome,
        is_finished=view.is_finished,
    )
