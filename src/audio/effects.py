from abc import ABC, abstractmethod
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Set

import pygame

from src.puzzles.base import PuzzleListener

logger = logging.getLogger(__name__)

BACKGROUND = "background"
EFFECTS = ("pickup", "drop", "win")


class AudioBackend(ABC):
    """Minimal playback surface the sound effects need.

    Implementations may raise on any call; callers treat playback as
    fire-and-forget and swallow failures.
    """

    @abstractmethod
    def load(self, name: str, path: str) -> None:
        """Register a sound file under ``name``."""

    @abstractmethod
    def play(self, name: str) -> None:
        """Play an effect from the beginning."""

    @abstractmethod
    def stop(self, name: str) -> None:
        """Stop an effect and rewind it."""

    @abstractmethod
    def play_loop(self, name: str, volume: float) -> None:
        """Start looping a background track."""

    @abstractmethod
    def pause_loop(self) -> None:
        pass

    @abstractmethod
    def resume_loop(self) -> None:
        pass

    @abstractmethod
    def stop_all(self) -> None:
        pass


class PygameAudioBackend(AudioBackend):
    """pygame.mixer backend: Sound objects for effects, mixer.music for the loop."""

    def __init__(self):
        self._paths: Dict[str, str] = {}
        self._sounds: Dict[str, Any] = {}
        self._failed: Set[str] = set()
        self._loop_started = False

    def _ensure_mixer(self) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
            logger.debug("Initialized pygame mixer")

    def load(self, name: str, path: str) -> None:
        self._paths[name] = path
        self._sounds.pop(name, None)
        self._failed.discard(name)

    def _sound(self, name: str) -> Any:
        if name not in self._sounds:
            self._ensure_mixer()
            try:
                self._sounds[name] = pygame.mixer.Sound(self._paths[name])
            except (pygame.error, OSError):
                # Reported once by the caller, later plays stay silent
                self._failed.add(name)
                raise
        return self._sounds[name]

    def play(self, name: str) -> None:
        if name in self._failed:
            return
        sound = self._sound(name)
        sound.stop()
        sound.play()

    def stop(self, name: str) -> None:
        if name in self._sounds:
            self._sounds[name].stop()

    def play_loop(self, name: str, volume: float) -> None:
        self._ensure_mixer()
        pygame.mixer.music.load(self._paths[name])
        pygame.mixer.music.set_volume(volume)
        pygame.mixer.music.play(loops=-1)
        self._loop_started = True

    def pause_loop(self) -> None:
        if self._loop_started:
            pygame.mixer.music.pause()

    def resume_loop(self) -> None:
        if self._loop_started:
            pygame.mixer.music.unpause()

    def stop_all(self) -> None:
        if not pygame.mixer.get_init():
            return
        pygame.mixer.music.stop()
        for sound in self._sounds.values():
            sound.stop()
        self._loop_started = False


class SoundEffects(PuzzleListener):
    """Plays pickup/drop/win effects and a background loop for a puzzle.

    Never lets a playback problem reach the puzzle: every backend call is
    wrapped and failures are only logged.
    """

    def __init__(
        self,
        backend: AudioBackend,
        sounds: Dict[str, str],
        background_volume: float = 0.3,
        muted: bool = False,
    ):
        """
        Args:
            backend: Playback implementation
            sounds: Mapping of sound name (background, pickup, drop, win) to file path
            background_volume: Volume of the background loop, 0.0 to 1.0
            muted: Start muted
        """
        self.backend = backend
        self.background_volume = background_volume
        self.muted = muted
        self._background_started = False
        self._loop_playing = False
        self.available: Set[str] = set()

        for name, path in sounds.items():
            if self._safely(f"load {name}", self.backend.load, name, path):
                self.available.add(name)

    @classmethod
    def from_config(cls, config: Dict[str, Any], backend: Optional[AudioBackend] = None) -> "SoundEffects":
        audio_dir = Path(config.get("audio_dir", "./audio"))
        sounds = {name: str(audio_dir / filename) for name, filename in config.get("sound_files", {}).items()}

        missing = sorted(name for name, path in sounds.items() if not Path(path).is_file())
        if missing:
            logger.warning(f"Sound files not found in {audio_dir}, playing without: {', '.join(missing)}")
        sounds = {name: path for name, path in sounds.items() if name not in missing}

        return cls(
            backend or PygameAudioBackend(),
            sounds,
            background_volume=config.get("background_volume", 0.3),
            muted=config.get("muted", False),
        )

    def _safely(self, action: str, func, *args) -> bool:
        try:
            func(*args)
            return True
        except Exception as e:
            logger.warning(f"Audio {action} failed: {e}")
            return False

    def play(self, name: str) -> None:
        if self.muted or name not in self.available:
            return
        self._safely(f"play {name}", self.backend.play, name)

    def on_disk_picked_up(self, peg: int) -> None:
        self.play("pickup")

    def on_move_applied(self, source: int, target: int, disk: int) -> None:
        self.play("drop")

    def on_solved(self) -> None:
        self.play("win")

    def start_background(self) -> None:
        self._background_started = True
        if self.muted or BACKGROUND not in self.available:
            return
        self._safely("start background", self._start_loop)

    def _start_loop(self) -> None:
        self.backend.play_loop(BACKGROUND, self.background_volume)
        self._loop_playing = True

    def set_muted(self, muted: bool) -> None:
        if muted == self.muted:
            return
        self.muted = muted
        logger.info("Sound muted" if muted else "Sound unmuted")

        if muted:
            self._safely("pause background", self.backend.pause_loop)
            for name in EFFECTS:
                self._safely(f"stop {name}", self.backend.stop, name)
        elif self._background_started and BACKGROUND in self.available:
            self._safely("resume background", self._resume_or_start)

    def _resume_or_start(self) -> None:
        # A loop requested while muted was never handed to the backend
        if self._loop_playing:
            self.backend.resume_loop()
        else:
            self.backend.play_loop(BACKGROUND, self.background_volume)
            self._loop_playing = True

    def toggle_mute(self) -> bool:
        self.set_muted(not self.muted)
        return self.muted

    def shutdown(self) -> None:
        self._background_started = False
        self._loop_playing = False
        self._safely("shutdown", self.backend.stop_all)
