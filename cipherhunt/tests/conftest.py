"""
Pytest fixtures for CipherHunt tests.
"""

import itertools

import pytest

from ..authoring import DraftGraph, Publisher, PublishResult
from ..ciphers import CipherConfig, CipherKind
from ..evaluator import PuzzleEvaluator
from ..play import UserHuntProgress
from ..session import HuntPlayer
from ..storage import InMemoryHuntStore
from ..story_graph import Hint, NodeKind, Puzzle, StoryNode


@pytest.fixture
def store() -> InMemoryHuntStore:
    """Create an empty in-memory store."""
    return InMemoryHuntStore()


@pytest.fixture
def evaluator() -> PuzzleEvaluator:
    return PuzzleEvaluator()


@pytest.fixture
def clock():
    """A deterministic clock: 1000.0, 1001.0, ..."""
    ticks = itertools.count(1000)
    return lambda: float(next(ticks))


@pytest.fixture
def caesar_puzzle() -> Puzzle:
    """A Caesar puzzle worth 10 points with two paid hints."""
    return Puzzle(
        puzzle_id="p-hello",
        clue_text="KHOOR ZRUOG",
        cipher_kind=CipherKind.CAESAR,
        cipher_config=CipherConfig(shift=3),
        solution="HELLO WORLD",
        points=10,
        hints=[Hint(text="Shift each letter back", cost=2), Hint(text="By three", cost=5)],
    )


@pytest.fixture
def linear_nodes(caesar_puzzle: Puzzle) -> list[StoryNode]:
    """start(narrative) -> gate(puzzle, no failure edge) -> end."""
    return [
        StoryNode(
            node_id="start",
            hunt_id="h1",
            node_kind=NodeKind.NARRATIVE,
            content={"text": "A note is pinned to the door.", "next": "gate"},
            display_order=0,
            is_starting_node=True,
        ),
        StoryNode(
            node_id="gate",
            hunt_id="h1",
            node_kind=NodeKind.PUZZLE_GATE,
            content={"puzzle_id": caesar_puzzle.puzzle_id, "prompt": "Read the note", "success": "end"},
            display_order=1,
        ),
        StoryNode(
            node_id="end",
            hunt_id="h1",
            node_kind=NodeKind.END,
            content={"message": "The door opens.", "outcome": "success"},
            display_order=2,
        ),
    ]


@pytest.fixture
def start_progress() -> UserHuntProgress:
    """Progress of user u1 sitting on the start node of h1."""
    return UserHuntProgress.begin("u1", "h1", "start", now=1000.0)


@pytest.fixture
def linear_draft() -> DraftGraph:
    """Draft of start(narrative) -> gate(caesar puzzle) -> end."""
    draft = DraftGraph(title="The Locked Door")
    puzzle = draft.add_puzzle(
        CipherKind.CAESAR,
        "HELLO WORLD",
        cipher_config={"shift": 3},
        points=10,
        hints=[{"text": "Shift each letter back", "cost": 2}],
    )
    start = draft.add_node(NodeKind.NARRATIVE, {"text": "A note is pinned to the door."})
    gate = draft.add_node(NodeKind.PUZZLE_GATE, {"puzzle_id": puzzle.puzzle_id, "success": None})
    end = draft.add_node(NodeKind.END, {"message": "The door opens.", "outcome": "success"})
    draft.update_node_content(start.node_id, {"text": "A note is pinned to the door.", "next": gate.node_id})
    draft.update_node_content(gate.node_id, {"puzzle_id": puzzle.puzzle_id, "success": end.node_id})
    return draft


@pytest.fixture
def branching_draft() -> DraftGraph:
    """
    Draft with a choice, an action gated on story state, and a gate
    with a failure edge:

        intro -> crossroads --(take the key)--> shed -> cellar(gate) -> win
                            \\-(walk on)-------> lose       \\-failure-> lose
    """
    draft = DraftGraph(title="Crossroads", difficulty="easy")
    riddle = draft.add_puzzle(
        CipherKind.RIDDLE,
        "a map",
        clue_text="I have cities but no houses. What am I?",
        points=5,
        local_id="riddle",
    )
    draft.add_node(NodeKind.NARRATIVE, {"text": "You reach a fork.", "next": "crossroads"}, local_id="intro")
    draft.add_node(
        NodeKind.CHOICE,
        {"prompt": "Which way?"},
        choices=[
            {"text": "Take the key", "target_node_id": "shed",
             "state_patch": {"has_key": True}, "feedback": "It is cold."},
            {"text": "Walk on", "target_node_id": "lose"},
        ],
        local_id="crossroads",
    )
    draft.add_node(
        NodeKind.ACTION_TRIGGER,
        {"label": "Unlock the shed", "success": "cellar",
         "required_state": {"has_key": True}, "state_patch": {"shed_open": True}},
        local_id="shed",
    )
    draft.add_node(
        NodeKind.PUZZLE_GATE,
        {"puzzle_id": riddle.puzzle_id, "success": "win", "failure": "lose"},
        local_id="cellar",
    )
    draft.add_node(NodeKind.END, {"message": "Treasure!", "outcome": "success"}, local_id="win")
    draft.add_node(NodeKind.END, {"message": "Lost.", "outcome": "failure"}, local_id="lose")
    return draft


@pytest.fixture
def published(store: InMemoryHuntStore, linear_draft: DraftGraph) -> PublishResult:
    """The linear draft published into the store."""
    return Publisher(store).publish(linear_draft)


@pytest.fixture
def player(store: InMemoryHuntStore, clock) -> HuntPlayer:
    return HuntPlayer(store, clock=clock)
