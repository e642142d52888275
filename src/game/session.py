import logging
from typing import Any, Dict, List, Optional

from src.puzzles.base import MoveResult, PuzzleListener, RejectedMove
from src.puzzles.tower_of_hanoi import TowerOfHanoi
from src.utils.templates import TemplateManager

logger = logging.getLogger(__name__)

DEFAULT_MIN_DISKS = 2
DEFAULT_MAX_DISKS = 5
DEFAULT_DISK_COUNT = 4


class GameSession:
    """One player's game: the puzzle, the disk-count setting and the drag in progress.

    Gestures arrive as discrete intents (begin a drag on a peg, hover a peg,
    drop on a peg) and are turned into calls on the puzzle. Listeners passed
    here survive resets and disk-count changes.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        listeners: Optional[List[PuzzleListener]] = None,
        templates: Optional[TemplateManager] = None,
    ):
        """
        Args:
            config: Configuration dictionary (disk_count, min_disks, max_disks)
            listeners: Receivers of puzzle notifications, e.g. SoundEffects
            templates: Texts used by ``describe``
        """
        self.min_disks = config.get("min_disks", DEFAULT_MIN_DISKS)
        self.max_disks = config.get("max_disks", DEFAULT_MAX_DISKS)
        self.listeners = list(listeners or [])
        self.templates = templates
        self.disk_count = self.clamp_disk_count(config.get("disk_count", DEFAULT_DISK_COUNT))
        self.puzzle = TowerOfHanoi(self.disk_count, listeners=self.listeners)
        self.dragging: Optional[int] = None

        logger.debug(f"Initialized GameSession with {self.disk_count} disks "
                     f"(range {self.min_disks}-{self.max_disks})")

    def clamp_disk_count(self, disk_count: int) -> int:
        return max(self.min_disks, min(self.max_disks, int(disk_count)))

    def set_disk_count(self, disk_count: int) -> int:
        """Change the number of disks and start a new game.

        Values outside [min_disks, max_disks] are clamped, like a bounded slider.

        Returns:
            The disk count actually used
        """
        effective = self.clamp_disk_count(disk_count)
        if effective != disk_count:
            logger.info(f"Disk count {disk_count} clamped to {effective}")
        self.disk_count = effective
        self.reset()
        return effective

    def reset(self) -> None:
        self.dragging = None
        self.puzzle.reset(self.disk_count)

    def play_again(self) -> None:
        self.reset()

    def begin_drag(self, peg: int) -> bool:
        """Start dragging the top disk of ``peg``.

        Returns:
            False when the peg has nothing that may be lifted
        """
        disk = self.puzzle.pick_up(peg)
        if disk is None:
            logger.debug(f"Nothing to drag on peg {peg}")
            self.dragging = None
            return False

        self.dragging = peg
        return True

    def can_drop(self, target: int) -> bool:
        if self.dragging is None:
            return False
        return self.puzzle.is_legal_move(self.dragging, target)

    def drop(self, target: int) -> MoveResult:
        """Finish the drag on ``target``; the drag ends whether or not the move applies."""
        source, self.dragging = self.dragging, None
        if source is None:
            return RejectedMove(source=None, target=target, reason="No disk is being dragged")\
                .to_result(self.puzzle.is_solved())

        result = self.puzzle.move(source, target)
        if not result.applied:
            logger.debug(f"Drop on peg {target} rejected: {result.reason}")
        logger.debug(f"Drop result: {result.to_json()}")
        return result

    def cancel_drag(self) -> None:
        self.dragging = None

    @property
    def move_count(self) -> int:
        return self.puzzle.move_count

    def is_solved(self) -> bool:
        return self.puzzle.is_solved()

    def describe(self) -> str:
        """Text board with move counter, for logs and the terminal."""
        if self.templates is None:
            return f"{self.puzzle.get_state()}\nMoves: {self.move_count}"
        return self.templates.render("board", board=self.puzzle.get_state(), move_count=self.move_count)
