"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the engine.
Puzzle solutions never appear in a play response.

Error Codes:
- AUTHORING_VALIDATION: The submitted hunt breaks a graph invariant
- CIPHER_CONFIG: A cipher configuration is invalid (shift, key, columns)
- CIPHER_INPUT: Text cannot be encoded or decoded by the chosen cipher
- PATH_BROKEN: Progress points at a node or puzzle that no longer exists
- PROGRESS_NOT_FOUND: The player has not started this hunt
- HUNT_NOT_FOUND: Hunt does not exist
- INVALID_TRANSITION: The move is not allowed on the current node
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..play.progress import ProgressStatus


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    AUTHORING_VALIDATION = "AUTHORING_VALIDATION"
    CIPHER_CONFIG = "CIPHER_CONFIG"
    CIPHER_INPUT = "CIPHER_INPUT"
    PATH_BROKEN = "PATH_BROKEN"
    PROGRESS_NOT_FOUND = "PROGRESS_NOT_FOUND"
    HUNT_NOT_FOUND = "HUNT_NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Ciphers
# =============================================================================

class CipherInfo(BaseModel):
    """Display metadata for one cipher kind."""
    kind: str
    name: str
    description: str


class CipherListResponse(BaseModel):
    ciphers: list[CipherInfo]


class CipherRequest(BaseModel):
    """Text to encode or decode, with an optional cipher config."""
    text: str
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="shift, key, advanced, solution, groups - as the cipher needs",
    )


class CipherResponse(BaseModel):
    kind: str
    input: str
    output: str
    config: dict[str, Any] = Field(
        default_factory=dict, description="Config actually used, defaults filled in"
    )


# =============================================================================
# Authoring
# =============================================================================

class HintSchema(BaseModel):
    text: str
    cost: int = Field(0, ge=0)


class PuzzleSchema(BaseModel):
    """A draft puzzle; `local_id` is how nodes refer to it."""
    local_id: str
    cipher_kind: str
    solution: str
    clue_text: Optional[str] = Field(
        None, description="Omit to encode the solution with the cipher config"
    )
    cipher_config: dict[str, Any] = Field(default_factory=dict)
    points: int = Field(0, ge=0)
    hints: list[HintSchema] = Field(default_factory=list, max_length=2)
    title: str = ""


class ChoiceSchema(BaseModel):
    text: str
    target_node_id: Optional[str] = None
    state_patch: Optional[dict[str, Any]] = None
    feedback: Optional[str] = None
    required_state: Optional[dict[str, Any]] = None


class NodeSchema(BaseModel):
    """A draft node; references in `content` and choices use local ids."""
    local_id: str
    node_kind: str = Field(
        ..., description="narrative, dialogue, visual_cue, puzzle_gate, choice, action_trigger, end"
    )
    content: dict[str, Any] = Field(default_factory=dict)
    choices: Optional[list[ChoiceSchema]] = None
    is_starting_node: bool = False


class HuntDraftRequest(BaseModel):
    """A complete draft hunt, published in one call."""
    title: str
    description: str = ""
    difficulty: str = "medium"
    is_public: bool = False
    creator_id: Optional[str] = None
    puzzles: list[PuzzleSchema] = Field(default_factory=list)
    nodes: list[NodeSchema] = Field(default_factory=list)


class HuntValidationResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class PublishResponse(BaseModel):
    hunt_id: str
    title: str
    starting_node_id: str
    id_map: dict[str, str] = Field(
        default_factory=dict, description="Draft local id -> persisted id"
    )
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# Play
# =============================================================================

class AttemptRequest(BaseModel):
    attempt: str


class ChoiceRequest(BaseModel):
    choice_index: int = Field(..., ge=0, description="Index from the node's choices list")


class HintRequest(BaseModel):
    hint_index: int = Field(..., ge=0, le=1)


class ProgressInfo(BaseModel):
    """A player's progress record."""
    user_id: str
    hunt_id: str
    current_node_id: Optional[str] = None
    status: ProgressStatus
    story_state: dict[str, Any] = Field(default_factory=dict)
    completed_puzzle_ids: list[str] = Field(default_factory=list)
    score: int = 0
    visited_path: list[str] = Field(default_factory=list)
    revealed_hints: list[str] = Field(default_factory=list)
    started_at: Optional[float] = None
    last_played_at: Optional[float] = None
    completed_at: Optional[float] = None

    model_config = {"from_attributes": True}


class ChoiceInfo(BaseModel):
    """An unlocked choice; send `index` back to pick it."""
    index: int
    text: str


class NodeInfo(BaseModel):
    node_id: str
    node_kind: str
    content: dict[str, Any] = Field(default_factory=dict)
    choices: list[ChoiceInfo] = Field(default_factory=list)
    is_end: bool = False


class PuzzleInfo(BaseModel):
    """The clue as shown to a player."""
    puzzle_id: str
    title: str = ""
    clue_text: str
    cipher_kind: str
    cipher_name: str
    points: int = 0
    hint_count: int = 0
    solved: bool = False


class OutcomeInfo(BaseModel):
    """What the last action did."""
    success: bool
    correct: Optional[bool] = None
    feedback: Optional[str] = None
    hint_text: Optional[str] = None
    points_awarded: int = 0
    changes: list[str] = Field(default_factory=list)


class PlayResponse(BaseModel):
    progress: ProgressInfo
    node: Optional[NodeInfo] = None
    puzzle: Optional[PuzzleInfo] = None
    outcome: Optional[OutcomeInfo] = None
    is_finished: bool = False
    api_version: str = "v1"


# =============================================================================
# Misc
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
