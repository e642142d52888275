from copy import deepcopy
import logging
from typing import List, Optional, Tuple

from src.puzzles.base import (
    InvalidConfigurationError,
    MoveResult,
    PuzzleInterface,
    PuzzleListener,
    RejectedMove,
)

logger = logging.getLogger(__name__)

PEG_COUNT = 3
GOAL_PEG = 2


class TowerOfHanoi(PuzzleInterface):

    @staticmethod
    def get_optimal_move_count_for_difficulty(difficulty: int) -> int:
        return (2**difficulty) - 1

    @staticmethod
    def build_pegs(n_disks: int) -> List[List[int]]:
        return [
            list(range(n_disks, 0, -1)),  # Peg 0: all disks (largest to smallest)
            [],  # Peg 1: empty
            [],  # Peg 2: empty
        ]

    def __init__(self, n_disks: int = 3, listeners: Optional[List[PuzzleListener]] = None):
        self._validate_disk_count(n_disks)

        self.n_disks = n_disks
        self.pegs: List[List[int]] = self.build_pegs(n_disks)
        self._move_count = 0
        self._listeners: List[PuzzleListener] = list(listeners or [])

    @staticmethod
    def _validate_disk_count(n_disks: object) -> None:
        # bool is an int subclass; True would silently mean one disk
        if isinstance(n_disks, bool) or not isinstance(n_disks, int):
            raise InvalidConfigurationError(
                f"Number of disks must be an integer, got {type(n_disks).__name__}", n_disks
            )
        if n_disks < 1:
            raise InvalidConfigurationError(f"Number of disks must be at least 1, got {n_disks}", n_disks)

    @property
    def move_count(self) -> int:
        return self._move_count

    def add_listener(self, listener: PuzzleListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: PuzzleListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> List[PuzzleListener]:
        return list(self._listeners)

    def get_state(self) -> str:
        """Return formatted state string.

        Returns:
            String representation in format:
            "Peg 0: 3 (bottom), 2, 1 (top)\nPeg 1: (empty)\nPeg 2: (empty)"
        """
        lines = []

        for peg_idx, peg_disks in enumerate(self.pegs):
            if not peg_disks:
                lines.append(f"Peg {peg_idx}: (empty)")
            elif len(peg_disks) == 1:
                lines.append(f"Peg {peg_idx}: {peg_disks[0]}")
            else:
                disk_parts = [f"{peg_disks[0]} (bottom)"]
                if len(peg_disks) > 2:
                    disk_parts.extend(map(str, peg_disks[1:-1]))
                disk_parts.append(f"{peg_disks[-1]} (top)")
                lines.append(f"Peg {peg_idx}: {', '.join(disk_parts)}")

        return "\n".join(lines)

    def snapshot_pegs(self) -> List[List[int]]:
        return deepcopy(self.pegs)

    def pick_up(self, peg: int) -> Optional[int]:
        """Announce that the top disk of a peg is being lifted.

        Nothing moves until ``move`` is called; this only tells listeners
        (sound, animation) that a drag started.

        Returns:
            Size of the lifted disk, or None if nothing can be lifted from the peg
        """
        if self._validate_peg_index(peg) or self.is_solved():
            return None

        top_disk = self.get_top_disk(peg)
        if top_disk is None:
            return None

        logger.debug(f"Picked up disk {top_disk} from peg {peg}")
        self._notify("on_disk_picked_up", peg)
        return top_disk

    def move(self, source: int, target: int) -> MoveResult:
        """Move the top disk of ``source`` onto ``target``.

        Illegal requests leave the puzzle untouched and come back as a
        rejected MoveResult.
        """
        is_valid, error_message = self.can_move(source, target)
        if not is_valid:
            rejected = RejectedMove(source=source, target=target, reason=error_message)
            logger.debug(str(rejected))
            return rejected.to_result(self.is_solved())

        disk = self.execute_move(source, target)
        solved = self.is_solved()

        self._notify("on_move_applied", source, target, disk)
        if solved:
            logger.info(f"Puzzle with {self.n_disks} disks solved in {self._move_count} moves")
            self._notify("on_solved")

        return MoveResult(applied=True, source=source, target=target, moved_disk=disk, now_solved=solved)

    def execute_move(self, from_peg: int, to_peg: int) -> int:
        """Move the top disk without validation.

        Args:
            from_peg: Source peg index (0, 1, or 2)
            to_peg: Destination peg index (0, 1, or 2)

        Returns:
            Size of the moved disk
        """
        removed_disk = self.pegs[from_peg].pop()
        self.pegs[to_peg].append(removed_disk)
        self._move_count += 1
        logger.debug(f"Executed move: disk {removed_disk} from peg {from_peg} to peg {to_peg}")
        return removed_disk

    def is_legal_move(self, source: int, target: int) -> bool:
        is_valid, _ = self.can_move(source, target)
        return is_valid

    def can_move(self, from_peg: int, to_peg: int) -> Tuple[bool, str]:
        """Check if a move is legal without executing it.

        Args:
            from_peg: Source peg index (0, 1, or 2)
            to_peg: Destination peg index (0, 1, or 2)

        Returns:
            Tuple of (is_valid, error_message)
            - is_valid: True if move is legal, False otherwise
            - error_message: Empty string if valid, detailed error if invalid
        """

        error = self._validate_move_parameters(from_peg, to_peg)\
             or self._validate_not_solved()\
             or self._validate_source(from_peg)\
             or self._validate_destination_constraints(from_peg, to_peg)

        return (False, error) if error else (True, "")

    def get_top_disk(self, peg: int) -> Optional[int]:
        if not self.pegs[peg]:
            return None

        return self.pegs[peg][-1]

    def _validate_peg_index(self, peg: int) -> Optional[str]:
        if isinstance(peg, bool) or not isinstance(peg, int) or peg < 0 or peg >= PEG_COUNT:
            return f"Invalid peg index: {peg}. Must be 0, 1, or 2."

    def _validate_pegs(self, from_peg: int, to_peg: int) -> Optional[str]:
        if from_peg == to_peg:
            return f"Cannot move from peg {from_peg} to same peg"

    def _validate_move_parameters(self, from_peg: int, to_peg: int) -> Optional[str]:
        return self._validate_peg_index(from_peg)\
             or self._validate_peg_index(to_peg)\
             or self._validate_pegs(from_peg, to_peg)

    def _validate_not_solved(self) -> Optional[str]:
        if self.is_solved():
            return "Puzzle is already solved"

    def _validate_source(self, from_peg: int) -> Optional[str]:
        if not self.pegs[from_peg]:
            return f"Peg {from_peg} is empty, nothing to move"

    def _validate_destination_constraints(self, from_peg: int, to_peg: int) -> Optional[str]:
        """Validate destination peg constraints."""
        disk = self.pegs[from_peg][-1]
        destination_top = self.get_top_disk(to_peg)
        if destination_top is not None and disk >= destination_top:
            return (
                f"Cannot place disk {disk} on disk {destination_top}: "
                f"larger disk cannot be placed on smaller disk"
            )

    def is_solved(self) -> bool:
        return len(self.pegs[GOAL_PEG]) == self.n_disks

    def reset(self, disk_count: Optional[int] = None) -> None:
        n_disks = self.n_disks if disk_count is None else disk_count
        self._validate_disk_count(n_disks)

        self.n_disks = n_disks
        self.pegs = self.build_pegs(n_disks)
        self._move_count = 0
        logger.info(f"Puzzle reset with {n_disks} disks")

    def _notify(self, hook: str, *args) -> None:
        for listener in list(self._listeners):
            try:
                getattr(listener, hook)(*args)
            except Exception as e:
                logger.warning(f"Listener {type(listener).__name__}.{hook} failed: {e}")

    def __str__(self) -> str:
        return f"TowerOfHanoi({self.n_disks} disks):\n{self.get_state()}"

    def get_optimal_move_count(self) -> int:
        return self.get_optimal_move_count_for_difficulty(self.n_disks)

    def size(self) -> int:
        return self.n_disks
