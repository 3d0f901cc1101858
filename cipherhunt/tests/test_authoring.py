"""
Tests for hunt authoring and two-phase publish.

Tests:
- DraftGraph node and puzzle editing
- Delete, reorder and starting node rules
- Publish id rewriting
- Partial publish recovery
"""

import pytest

from ..authoring import LOCAL_ID_PREFIX, DraftGraph, Publisher
from ..ciphers import CipherKind
from ..errors import AuthoringValidationError, CipherConfigError, PublishError
from ..storage import InMemoryHuntStore
from ..story_graph import NodeKind


class FlakyStore(InMemoryHuntStore):
    """Store whose first N content updates fail."""

    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    def update_node_content(self, node_id, content, choices=None):
        if self.failures:
            self.failures -= 1
            raise RuntimeError("connection reset")
        return super().update_node_content(node_id, content, choices)


class TestDraftNodes:
    """Tests for adding and editing nodes."""

    def test_local_ids_generated(self):
        draft = DraftGraph(title="t")
        node = draft.add_node(NodeKind.END, {"message": "bye"})
        assert node.node_id.startswith(LOCAL_ID_PREFIX)

    def test_first_node_starts(self):
        draft = DraftGraph(title="t")
        first = draft.add_node(NodeKind.NARRATIVE, {"text": "a"})
        second = draft.add_node(NodeKind.END, {})
        assert first.is_starting_node
        assert not second.is_starting_node
        assert draft.starting_node is first

    def test_display_order_follows_insertion(self, branching_draft):
        assert [n.node_id for n in branching_draft.nodes] == [
            "intro", "crossroads", "shed", "cellar", "win", "lose",
        ]
        assert [n.display_order for n in branching_draft.nodes] == [0, 1, 2, 3, 4, 5]

    def test_unknown_kind(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError):
            draft.add_node("teleport", {})

    def test_bad_content(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError) as excinfo:
            draft.add_node(NodeKind.PUZZLE_GATE, {"success": None})
        assert any("puzzle_id" in e for e in excinfo.value.errors)
        assert draft.nodes == []

    def test_choices_only_on_choice_nodes(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError):
            draft.add_node(NodeKind.NARRATIVE, {"text": "a"}, choices=[{"text": "go"}])

    def test_duplicate_local_id(self, branching_draft):
        with pytest.raises(AuthoringValidationError):
            branching_draft.add_node(NodeKind.END, {}, local_id="win")

    def test_update_choices_reindexes(self, branching_draft):
        node = branching_draft.update_choices(
            "crossroads",
            [{"text": "Back", "target_node_id": "intro", "display_order": 9}, {"text": "Stay"}],
        )
        assert [(c.text, c.display_order) for c in node.choices] == [("Back", 0), ("Stay", 1)]

    def test_update_content_revalidates(self, branching_draft):
        with pytest.raises(AuthoringValidationError):
            branching_draft.update_node_content("intro", {"next": "crossroads"})

    def test_set_starting_node_is_exclusive(self, branching_draft):
        branching_draft.set_starting_node("crossroads")
        starts = [n.node_id for n in branching_draft.nodes if n.is_starting_node]
        assert starts == ["crossroads"]


class TestDraftDelete:
    """Tests for node deletion."""

    def test_cannot_delete_start_with_others(self, branching_draft):
        with pytest.raises(AuthoringValidationError):
            branching_draft.delete_node("intro")

    def test_can_delete_only_node(self):
        draft = DraftGraph(title="t")
        node = draft.add_node(NodeKind.END, {})
        draft.delete_node(node.node_id)
        assert draft.nodes == []

    def test_delete_referenced_node_reports_referrers(self, branching_draft):
        referrers = branching_draft.delete_node("shed")
        assert referrers == ["crossroads"]

    def test_dangling_reference_fails_validation(self, branching_draft):
        branching_draft.delete_node("shed")
        result = branching_draft.validate()
        assert not result.valid
        assert any("unknown node 'shed'" in e for e in result.errors)

    def test_delete_reindexes(self, branching_draft):
        branching_draft.delete_node("shed")
        assert [n.display_order for n in branching_draft.nodes] == [0, 1, 2, 3, 4]


class TestDraftOrdering:
    """Tests for reorder and move."""

    def test_reorder_partial(self, branching_draft):
        nodes = branching_draft.reorder(["win", "intro"])
        assert [n.node_id for n in nodes] == ["win", "intro", "crossroads", "shed", "cellar", "lose"]
        assert [n.display_order for n in nodes] == list(range(6))

    def test_reorder_unknown_node(self, branching_draft):
        with pytest.raises(AuthoringValidationError):
            branching_draft.reorder(["nowhere"])

    def test_reorder_duplicate(self, branching_draft):
        with pytest.raises(AuthoringValidationError):
            branching_draft.reorder(["win", "win"])

    def test_move_node(self, branching_draft):
        nodes = branching_draft.move_node("cellar", -2)
        assert [n.node_id for n in nodes][:4] == ["intro", "cellar", "crossroads", "shed"]

    def test_move_node_clamped(self, branching_draft):
        nodes = branching_draft.move_node("lose", -100)
        assert nodes[0].node_id == "lose"


class TestDraftPuzzles:
    """Tests for add_puzzle."""

    def test_clue_encoded_from_solution(self):
        draft = DraftGraph(title="t")
        puzzle = draft.add_puzzle(CipherKind.CAESAR, "HELLO WORLD", cipher_config={"shift": 3})
        assert puzzle.clue_text == "KHOOR ZRUOG"

    def test_default_config_applied(self):
        draft = DraftGraph(title="t")
        puzzle = draft.add_puzzle("caesar", "abc")
        assert puzzle.cipher_config.shift == 3
        assert puzzle.clue_text == "def"

    def test_explicit_clue_kept(self):
        draft = DraftGraph(title="t")
        puzzle = draft.add_puzzle(CipherKind.ATBASH, "secret", clue_text="Find the word")
        assert puzzle.clue_text == "Find the word"

    def test_bad_config(self):
        draft = DraftGraph(title="t")
        with pytest.raises(CipherConfigError):
            draft.add_puzzle(CipherKind.CAESAR, "abc", cipher_config={"shift": 0})

    def test_riddle_needs_clue(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError):
            draft.add_puzzle(CipherKind.RIDDLE, "a map")

    def test_negative_points(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError):
            draft.add_puzzle(CipherKind.ATBASH, "abc", points=-1)

    def test_too_many_hints(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError) as excinfo:
            draft.add_puzzle(CipherKind.ATBASH, "abc", hints=["one", "two", "three"])
        assert "at most 2 hints" in str(excinfo.value)

    def test_hints_from_strings_and_dicts(self):
        draft = DraftGraph(title="t")
        puzzle = draft.add_puzzle(CipherKind.ATBASH, "abc", hints=["free", {"text": "paid", "cost": 3}])
        assert [(h.text, h.cost) for h in puzzle.hints] == [("free", 0), ("paid", 3)]

    def test_anagram_solution_solves_clue(self, evaluator):
        draft = DraftGraph(title="t")
        puzzle = draft.add_puzzle(CipherKind.ANAGRAM, "dirty room", points=5)
        assert sorted(puzzle.clue_text) == sorted("dirtyroom")
        assert evaluator.evaluate(puzzle, "dirty room").correct

    def test_single_word_anagram_rejected(self):
        """An anagram nobody could ever solve is refused when added."""
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError):
            draft.add_puzzle(CipherKind.ANAGRAM, "listen", points=5)
        assert draft.puzzles == []

    def test_anagram_clue_with_other_letters_rejected(self):
        draft = DraftGraph(title="t")
        with pytest.raises(AuthoringValidationError):
            draft.add_puzzle(CipherKind.ANAGRAM, "dirty room", clue_text="dusty moor")


class TestPublish:
    """Tests for Publisher.publish()."""

    def test_publish_linear(self, store, linear_draft):
        result = Publisher(store).publish(linear_draft)
        local_ids = {n.node_id for n in linear_draft.nodes} | {p.puzzle_id for p in linear_draft.puzzles}
        assert set(result.id_map) == local_ids
        assert not any(v.startswith(LOCAL_ID_PREFIX) for v in result.id_map.values())

        start_id = result.id_map[linear_draft.starting_node.node_id]
        assert result.hunt.starting_node_id == start_id
        assert store.get_hunt(result.hunt.hunt_id).starting_node_id == start_id

    def test_references_rewritten(self, store, linear_draft):
        result = Publisher(store).publish(linear_draft)
        persisted = set(result.id_map.values())
        for node in result.nodes:
            assert node.hunt_id == result.hunt.hunt_id
            for _, target in node.content.references().items():
                assert target is None or target in persisted

        gate = next(n for n in result.nodes if n.node_kind == NodeKind.PUZZLE_GATE)
        puzzle = store.get_puzzle(gate.content.puzzle_id)
        assert puzzle is not None
        assert puzzle.hunt_id == result.hunt.hunt_id

    def test_published_puzzles_listed(self, store, linear_draft):
        result = Publisher(store).publish(linear_draft)
        local_puzzle = linear_draft.puzzles[0]
        assert [p.puzzle_id for p in result.puzzles] == [result.id_map[local_puzzle.puzzle_id]]
        assert result.puzzles[0].hunt_id == result.hunt.hunt_id
        assert result.puzzles[0].clue_text == "KHOOR ZRUOG"
        assert store.list_puzzles("some-other-hunt") == []

    def test_choice_targets_rewritten(self, store, branching_draft):
        result = Publisher(store).publish(branching_draft)
        crossroads = store.get_node(result.id_map["crossroads"])
        assert [c.target_node_id for c in crossroads.choices] == [
            result.id_map["shed"], result.id_map["lose"],
        ]
        assert crossroads.choices[0].state_patch == {"has_key": True}

    def test_nodes_keep_display_order(self, store, branching_draft):
        result = Publisher(store).publish(branching_draft)
        reverse = {v: k for k, v in result.id_map.items()}
        assert [reverse[n.node_id] for n in result.nodes] == [
            "intro", "crossroads", "shed", "cellar", "win", "lose",
        ]

    def test_draft_untouched(self, store, linear_draft):
        Publisher(store).publish(linear_draft)
        assert all(n.node_id.startswith(LOCAL_ID_PREFIX) for n in linear_draft.nodes)

    def test_warnings_passed_through(self, store, linear_draft):
        linear_draft.add_node(NodeKind.END, {"message": "orphan"})
        result = Publisher(store).publish(linear_draft)
        assert any("unreachable" in w for w in result.warnings)


class TestPublishRejections:
    """Invalid drafts are rejected before anything is written."""

    def test_two_starting_nodes(self, store, linear_draft):
        linear_draft.nodes[-1].is_starting_node = True
        with pytest.raises(AuthoringValidationError) as excinfo:
            Publisher(store).publish(linear_draft)
        assert "exactly one starting node" in str(excinfo.value)
        assert store._hunts == {}
        assert store._nodes == {}

    def test_missing_puzzle(self, store):
        draft = DraftGraph(title="t")
        draft.add_node(NodeKind.PUZZLE_GATE, {"puzzle_id": "local-puzzle-99", "success": None, "failure": None})
        with pytest.raises(AuthoringValidationError) as excinfo:
            Publisher(store).publish(draft)
        assert any("unknown puzzle" in e for e in excinfo.value.errors)
        assert store._hunts == {}

    def test_dangling_node(self, store, linear_draft):
        start = linear_draft.starting_node
        linear_draft.update_node_content(start.node_id, {"text": "x", "next": "local-node-404"})
        with pytest.raises(AuthoringValidationError):
            Publisher(store).publish(linear_draft)
        assert store._puzzles == {}


class TestPartialPublish:
    """Tests for recovering from a failure in the reference pass."""

    def test_failure_reports_pending(self, linear_draft):
        store = FlakyStore(failures=1)
        with pytest.raises(PublishError) as excinfo:
            Publisher(store).publish(linear_draft)
        error = excinfo.value
        assert store.get_hunt(error.hunt_id) is not None
        assert linear_draft.starting_node.node_id in error.pending
        assert set(error.id_map) >= {n.node_id for n in linear_draft.nodes}

    def test_resolve_again_completes(self, linear_draft):
        store = FlakyStore(failures=1)
        publisher = Publisher(store)
        with pytest.raises(PublishError) as excinfo:
            publisher.publish(linear_draft)
        error = excinfo.value
        assert store.get_hunt(error.hunt_id).starting_node_id is None

        result = publisher.resolve_references(linear_draft, error.hunt_id, error.id_map)
        start_id = error.id_map[linear_draft.starting_node.node_id]
        assert result.hunt.starting_node_id == start_id
        start = store.get_node(start_id)
        assert start.content.next == error.id_map[linear_draft.nodes[1].node_id]

    def test_resolve_is_idempotent(self, store, linear_draft):
        publisher = Publisher(store)
        first = publisher.publish(linear_draft)
        again = publisher.resolve_references(linear_draft, first.hunt.hunt_id, first.id_map)
        assert [n.to_dict() for n in again.nodes] == [n.to_dict() for n in first.nodes]
