import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.game.session import DEFAULT_DISK_COUNT, GameSession
from src.utils.templates import TemplateManager
from tests.mocks.mock_audio import RecordingListener

CONFIG = {"disk_count": 3, "min_disks": 2, "max_disks": 5}


class TestDiskCount:
    """Disk-count setting tests."""

    def test_initial_disk_count_from_config(self):
        session = GameSession(CONFIG)
        assert session.disk_count == 3
        assert session.puzzle.snapshot_pegs() == [[3, 2, 1], [], []]

    def test_initial_disk_count_is_clamped(self):
        session = GameSession({**CONFIG, "disk_count": 9})
        assert session.disk_count == 5

    @pytest.mark.parametrize("requested,expected", [(1, 2), (2, 2), (4, 4), (5, 5), (6, 5), (-10, 2)])
    def test_set_disk_count_clamps(self, requested, expected):
        session = GameSession(CONFIG)
        assert session.set_disk_count(requested) == expected
        assert session.disk_count == expected
        assert session.puzzle.n_disks == expected

    def test_set_disk_count_starts_new_game(self):
        session = GameSession(CONFIG)
        session.begin_drag(0)
        session.drop(2)
        session.begin_drag(0)

        session.set_disk_count(4)

        assert session.move_count == 0
        assert session.dragging is None
        assert session.puzzle.snapshot_pegs() == [[4, 3, 2, 1], [], []]

    def test_defaults_without_config_values(self):
        session = GameSession({})
        assert (session.min_disks, session.max_disks) == (2, 5)
        assert session.disk_count == DEFAULT_DISK_COUNT == 4

    def test_default_disk_count_independent_of_range(self):
        session = GameSession({"min_disks": 2, "max_disks": 8})
        assert session.disk_count == 4


class TestDragAndDrop:
    """Drag adapter tests."""

    def test_drag_and_drop_moves_disk(self):
        session = GameSession(CONFIG)
        assert session.begin_drag(0)
        assert session.dragging == 0

        result = session.drop(2)

        assert result.applied
        assert result.moved_disk == 1
        assert session.dragging is None
        assert session.move_count == 1

    def test_cannot_drag_from_empty_peg(self):
        session = GameSession(CONFIG)
        assert not session.begin_drag(1)
        assert session.dragging is None

    def test_can_drop_checks_targets(self):
        session = GameSession(CONFIG)
        session.begin_drag(0)
        session.drop(2)

        session.begin_drag(0)
        assert [session.can_drop(peg) for peg in range(3)] == [False, True, False]
        assert session.move_count == 1

    def test_can_drop_without_drag(self):
        session = GameSession(CONFIG)
        assert not any(session.can_drop(peg) for peg in range(3))

    def test_illegal_drop_ends_drag_without_moving(self):
        session = GameSession(CONFIG)
        session.begin_drag(0)
        session.drop(2)
        session.begin_drag(0)

        result = session.drop(2)

        assert not result.applied
        assert session.dragging is None
        assert session.move_count == 1
        assert session.puzzle.snapshot_pegs() == [[3, 2], [], [1]]

    def test_drop_without_drag_is_rejected(self):
        session = GameSession(CONFIG)
        result = session.drop(1)
        assert not result.applied
        assert result.reason == "No disk is being dragged"
        assert result.source is None
        assert result.target == 1
        assert session.move_count == 0

    def test_cancel_drag(self):
        session = GameSession(CONFIG)
        session.begin_drag(0)
        session.cancel_drag()
        assert session.dragging is None
        assert session.move_count == 0

    def test_new_drag_replaces_previous(self):
        session = GameSession(CONFIG)
        session.begin_drag(0)
        session.drop(1)
        session.begin_drag(0)
        session.begin_drag(1)
        assert session.dragging == 1

    def test_solve_and_play_again(self):
        session = GameSession({**CONFIG, "disk_count": 2})
        for source, target in [(0, 1), (0, 2), (1, 2)]:
            session.begin_drag(source)
            session.drop(target)

        assert session.is_solved()
        assert not session.begin_drag(2)

        session.play_again()
        assert not session.is_solved()
        assert session.move_count == 0
        assert session.puzzle.snapshot_pegs() == [[2, 1], [], []]


class TestSessionListeners:
    """Listener wiring tests."""

    def test_listener_receives_pickup_move_and_win(self):
        listener = RecordingListener()
        session = GameSession({**CONFIG, "disk_count": 2}, listeners=[listener])
        for source, target in [(0, 1), (0, 2), (1, 2)]:
            session.begin_drag(source)
            session.drop(target)

        assert listener.events == [
            ("picked_up", 0), ("moved", 0, 1, 1),
            ("picked_up", 0), ("moved", 0, 2, 2),
            ("picked_up", 1), ("moved", 1, 2, 1),
            ("solved",),
        ]

    def test_listener_kept_after_disk_count_change(self):
        listener = RecordingListener()
        session = GameSession(CONFIG, listeners=[listener])
        session.set_disk_count(2)
        session.begin_drag(0)
        assert listener.events == [("picked_up", 0)]


class TestDescribe:
    """Text board tests."""

    def test_describe_without_templates(self):
        session = GameSession(CONFIG)
        assert session.describe() == "Peg 0: 3 (bottom), 2, 1 (top)\nPeg 1: (empty)\nPeg 2: (empty)\nMoves: 0"

    def test_describe_with_templates(self):
        templates = TemplateManager({"board": "{board}\n-- {move_count} moves --"})
        session = GameSession({**CONFIG, "disk_count": 2}, templates=templates)
        session.begin_drag(0)
        session.drop(1)
        assert session.describe() == "Peg 0: 2\nPeg 1: 1\nPeg 2: (empty)\n-- 1 moves --"
