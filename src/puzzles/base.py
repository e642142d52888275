from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
import json
from typing import List, Optional


class InvalidConfigurationError(ValueError):
    """Raised when a puzzle is built or reset with an unusable disk count."""

    def __init__(self, message: str, disk_count: object = None):
        self.disk_count = disk_count
        super().__init__(message)


@dataclass
class MoveResult:
    """Outcome of a single move request.

    Attributes:
        applied: Whether the move changed the puzzle
        source: Peg the disk was taken from, None when no disk was being dragged
        target: Peg the disk was dropped on
        moved_disk: Size of the disk that moved, None when rejected
        now_solved: Whether the puzzle is solved after the request
        reason: Empty when applied, otherwise why the move was refused
    """

    applied: bool
    source: Optional[int]
    target: int
    moved_disk: Optional[int] = None
    now_solved: bool = False
    reason: str = ""

    def to_json(self) -> str:
        return json.dumps(asdict(self))


@dataclass
class RejectedMove:
    """A refused move. Returned, never raised: illegal drops are routine."""

    source: Optional[int]
    target: int
    reason: str

    def __str__(self) -> str:
        return f"Rejected move {self.source} -> {self.target}: {self.reason}"

    def to_result(self, now_solved: bool) -> MoveResult:
        return MoveResult(
            applied=False,
            source=self.source,
            target=self.target,
            now_solved=now_solved,
            reason=self.reason,
        )


class PuzzleListener:
    """Receives notifications from a puzzle.

    All hooks default to no-ops so listeners only override what they need.
    Listeners must not mutate the puzzle from inside a hook.
    """

    def on_disk_picked_up(self, peg: int) -> None:
        pass

    def on_move_applied(self, source: int, target: int, disk: int) -> None:
        pass

    def on_solved(self) -> None:
        pass


class PuzzleInterface(ABC):
    """Abstract base class defining the interface for puzzle implementations.
    """

    @abstractmethod
    def size(self) -> int:
        """Return the size of the puzzle.
        """

    @abstractmethod
    def get_state(self) -> str:
        """Get the current puzzle state as a string.
        """

    @abstractmethod
    def snapshot_pegs(self) -> List[List[int]]:
        """Return an independent copy of every peg, base first.
        """

    @abstractmethod
    def is_legal_move(self, source: int, target: int) -> bool:
        """Check a move without side effects."""

    @abstractmethod
    def move(self, source: int, target: int) -> MoveResult:
        """Apply a move if it is legal.

        Returns:
            MoveResult with applied=False and a reason when the move is refused
        """

    @abstractmethod
    def reset(self, disk_count: Optional[int] = None) -> None:
        """Start over, optionally with a different size.
        """

    @abstractmethod
    def is_solved(self) -> bool:
        """Check if the puzzle is in a solved state.
        """

    @property
    @abstractmethod
    def move_count(self) -> int:
        """Number of moves applied since the last reset."""
