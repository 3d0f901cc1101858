"""
Hunt Player - The play loop over a HuntStore.

Every player action is one read-modify-write of that player's progress
record:
1. Read progress and the current node (and its puzzle, if any)
2. Apply the transition with the PlayReducer
3. Load the node moved to and its puzzle, so a broken path is caught
   before writing
4. Upsert progress keyed by (user_id, hunt_id)

If any lookup fails, PlayIntegrityError is raised and nothing is
written; the player can resume from the last good record. Callers must
not overlap actions for the same player.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import time

from ..config import DEFAULT_PATH_LIMIT
from ..errors import HuntNotFoundError, PlayIntegrityError, ProgressNotFoundError
from ..evaluator.evaluator import PuzzleEvaluator
from ..play.progress import ProgressStatus, UserHuntProgress
from ..play.reducer import PlayReducer
from ..play.transition import Transition, TransitionResult, TransitionType
from ..storage.base import HuntStore
from ..story_graph.content import NodeKind
from ..story_graph.nodes import Choice, StoryNode
from ..story_graph.puzzle import Puzzle

logger = logging.getLogger(__name__)


@dataclass
class PlayView:
    """
    What a front end needs to render after an action.

    `choices` pairs each unlocked choice with the index to send back
    when choosing it. `result` is None for plain reads.
    """
    progress: UserHuntProgress
    node: StoryNode | None = None
    puzzle: Puzzle | None = None
    choices: list[tuple[int, Choice]] = field(default_factory=list)
    result: TransitionResult | None = None

    @property
    def is_finished(self) -> bool:
        return not self.progress.is_active


class HuntPlayer:
    """
    Drives play sessions against a store.

    Usage:
        player = HuntPlayer(store)
        view = player.start("user-1", hunt_id)
        view = player.advance("user-1", hunt_id)
        view = player.submit_attempt("user-1", hunt_id, "HELLO WORLD")
    """

    def __init__(
        self,
        store: HuntStore,
        evaluator: PuzzleEvaluator | None = None,
        path_limit: int = DEFAULT_PATH_LIMIT,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.reducer = PlayReducer(evaluator=evaluator or PuzzleEvaluator(), path_limit=path_limit)
        self._clock = clock

    # Lifecycle

    def start(self, user_id: str, hunt_id: str) -> PlayView:
        """Begin a hunt, or resume it if the player already has progress."""
        existing = self.store.get_progress(user_id, hunt_id)
        if existing is not None:
            return self._view(existing)

        start_node = self._starting_node(hunt_id)
        puzzle = self._gate_puzzle(start_node)
        progress = UserHuntProgress.begin(user_id, hunt_id, start_node.node_id, now=self._clock())
        progress = self._stamp(self.reducer.arrive(progress, start_node), progress)
        progress = self.store.upsert_progress(progress)
        logger.info("User %s started hunt %s", user_id, hunt_id)
        return self._view(progress, start_node, puzzle)

    def current(self, user_id: str, hunt_id: str) -> PlayView:
        return self._view(self._require_progress(user_id, hunt_id))

    def abandon(self, user_id: str, hunt_id: str) -> PlayView:
        progress = self._require_progress(user_id, hunt_id)
        if not progress.is_active:
            return self._view(progress, result=TransitionResult.failure(
                f"Hunt is {progress.status.value} - nothing to abandon",
                error_code="HUNT_NOT_ACTIVE",
            ))

        abandoned = progress._copy_with(
            status=ProgressStatus.ABANDONED,
            current_node_id=None,
            last_played_at=self._clock(),
        )
        abandoned = self.store.upsert_progress(abandoned)
        logger.info("User %s abandoned hunt %s", user_id, hunt_id)
        return self._view(abandoned, result=TransitionResult.success_with_progress(
            abandoned, changes=["Hunt abandoned"],
        ))

    def restart(self, user_id: str, hunt_id: str) -> PlayView:
        """Reset a completed or abandoned hunt back to its starting node."""
        progress = self._require_progress(user_id, hunt_id)
        if progress.is_active:
            return self._view(progress, result=TransitionResult.failure(
                "Hunt is still in progress - finish or abandon it first",
                error_code="HUNT_STILL_ACTIVE",
            ))

        start_node = self._starting_node(hunt_id)
        puzzle = self._gate_puzzle(start_node)
        fresh = UserHuntProgress.begin(user_id, hunt_id, start_node.node_id, now=self._clock())
        fresh = self._stamp(self.reducer.arrive(fresh, start_node), fresh)
        fresh = self.store.upsert_progress(fresh)
        logger.info("Reset progress of user %s on hunt %s", user_id, hunt_id)
        return self._view(fresh, start_node, puzzle, result=TransitionResult.success_with_progress(
            fresh, changes=["Hunt restarted"],
        ))

    # Transitions

    def advance(self, user_id: str, hunt_id: str) -> PlayView:
        return self.act(user_id, hunt_id, Transition.advance())

    def choose(self, user_id: str, hunt_id: str, choice_index: int) -> PlayView:
        return self.act(user_id, hunt_id, Transition.choose(choice_index))

    def submit_attempt(self, user_id: str, hunt_id: str, attempt: str) -> PlayView:
        return self.act(user_id, hunt_id, Transition.submit_attempt(attempt))

    def trigger_action(self, user_id: str, hunt_id: str) -> PlayView:
        return self.act(user_id, hunt_id, Transition.trigger_action())

    def reveal_hint(self, user_id: str, hunt_id: str, hint_index: int) -> PlayView:
        return self.act(user_id, hunt_id, Transition.reveal_hint(hint_index))

    def go_back(self, user_id: str, hunt_id: str) -> PlayView:
        return self.act(user_id, hunt_id, Transition.go_back())

    def act(self, user_id: str, hunt_id: str, transition: Transition) -> PlayView:
        """
        Apply one transition as a read-modify-write.

        A refused transition writes nothing and comes back as a view
        whose result carries the error.
        """
        progress = self._require_progress(user_id, hunt_id)

        node = None
        puzzle = None
        if transition.transition_type != TransitionType.GO_BACK and progress.current_node_id:
            node = self._load_node(progress.current_node_id, hunt_id)
            puzzle = self._gate_puzzle(node)

        result = self.reducer.apply(progress, node, transition, puzzle)
        if not result.success:
            return self._view(progress, node, puzzle, result=result)

        new_progress = result.new_progress
        next_node = None
        next_puzzle = None
        if new_progress.current_node_id is not None:
            next_node = self._load_node(new_progress.current_node_id, hunt_id)
            next_puzzle = self._gate_puzzle(next_node)
            new_progress = self.reducer.arrive(new_progress, next_node)

        new_progress = self.store.upsert_progress(self._stamp(new_progress, progress))
        result.new_progress = new_progress
        return self._view(new_progress, next_node, next_puzzle, result=result)

    # Helpers

    def _require_progress(self, user_id: str, hunt_id: str) -> UserHuntProgress:
        progress = self.store.get_progress(user_id, hunt_id)
        if progress is None:
            raise ProgressNotFoundError(f"User {user_id} has not started hunt {hunt_id}")
        return progress

    def _starting_node(self, hunt_id: str) -> StoryNode:
        hunt = self.store.get_hunt(hunt_id)
        if hunt is None:
            raise HuntNotFoundError(f"Hunt {hunt_id} not found")
        if hunt.starting_node_id is None:
            logger.warning("Hunt %s has no starting node", hunt_id)
            raise PlayIntegrityError(f"Hunt {hunt_id} has no starting node")
        return self._load_node(hunt.starting_node_id, hunt_id)

    def _load_node(self, node_id: str, hunt_id: str) -> StoryNode:
        node = self.store.get_node(node_id)
        if node is None or node.hunt_id != hunt_id:
            logger.warning("Hunt %s references missing node %s", hunt_id, node_id)
            raise PlayIntegrityError(
                f"This path is broken: node {node_id} is missing", node_id=node_id
            )
        return node

    def _load_puzzle(self, puzzle_id: str, node_id: str) -> Puzzle:
        puzzle = self.store.get_puzzle(puzzle_id)
        if puzzle is None:
            logger.warning("Node %s references missing puzzle %s", node_id, puzzle_id)
            raise PlayIntegrityError(
                f"This path is broken: puzzle {puzzle_id} is missing",
                node_id=node_id,
                puzzle_id=puzzle_id,
            )
        return puzzle

    def _gate_puzzle(self, node: StoryNode) -> Puzzle | None:
        if node.node_kind != NodeKind.PUZZLE_GATE:
            return None
        return self._load_puzzle(node.content.puzzle_id, node.node_id)

    def _stamp(self, progress: UserHuntProgress, before: UserHuntProgress) -> UserHuntProgress:
        now = self._clock()
        completed_at = progress.completed_at
        if progress.status == ProgressStatus.COMPLETED and before.status != ProgressStatus.COMPLETED:
            completed_at = now
        return progress._copy_with(last_played_at=now, completed_at=completed_at)

    def _view(
        self,
        progress: UserHuntProgress,
        node: StoryNode | None = None,
        puzzle: Puzzle | None = None,
        result: TransitionResult | None = None,
    ) -> PlayView:
        """Build a view; loads the node and its puzzle when not supplied."""
        if node is None and progress.current_node_id is not None:
            node = self._load_node(progress.current_node_id, progress.hunt_id)
            puzzle = self._gate_puzzle(node)

        choices: list[tuple[int, Choice]] = []
        if node is not None:
            choices = [
                (index, choice)
                for index, choice in enumerate(node.ordered_choices())
                if choice.is_unlocked(progress.story_state)
            ]
        return PlayView(progress=progress, node=node, puzzle=puzzle, choices=choices, result=result)
