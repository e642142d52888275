from typing import Any, List, Optional, Set, Tuple

from src.audio.effects import AudioBackend
from src.puzzles.base import PuzzleListener


class FakeAudioBackend(AudioBackend):
    """Records every call; optionally raises from selected methods."""

    def __init__(self, failing: Optional[Set[str]] = None):
        """
        Args:
            failing: Method names that raise RuntimeError when called
        """
        self.failing = set(failing or [])
        self.calls: List[Tuple[Any, ...]] = []
        self.loaded = {}

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if method in self.failing:
            raise RuntimeError(f"{method} refused by audio device")

    def load(self, name: str, path: str) -> None:
        self._record("load", name, path)
        self.loaded[name] = path

    def play(self, name: str) -> None:
        self._record("play", name)

    def stop(self, name: str) -> None:
        self._record("stop", name)

    def play_loop(self, name: str, volume: float) -> None:
        self._record("play_loop", name, volume)

    def pause_loop(self) -> None:
        self._record("pause_loop")

    def resume_loop(self) -> None:
        self._record("resume_loop")

    def stop_all(self) -> None:
        self._record("stop_all")

    def played(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "play"]

    def methods(self) -> List[str]:
        return [call[0] for call in self.calls]


class RecordingListener(PuzzleListener):
    """Collects puzzle notifications as tuples in arrival order."""

    def __init__(self):
        self.events: List[Tuple[Any, ...]] = []

    def on_disk_picked_up(self, peg: int) -> None:
        self.events.append(("picked_up", peg))

    def on_move_applied(self, source: int, target: int, disk: int) -> None:
        self.events.append(("moved", source, target, disk))

    def on_solved(self) -> None:
        self.events.append(("solved",))


class ExplodingListener(PuzzleListener):
    """Raises from every hook."""

    def on_disk_picked_up(self, peg: int) -> None:
        raise RuntimeError("pickup listener broke")

    def on_move_applied(self, source: int, target: int, disk: int) -> None:
        raise RuntimeError("move listener broke")

    def on_solved(self) -> None:
        raise RuntimeError("solved listener broke")
