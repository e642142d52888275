"""Pygame window for the game: pegs, draggable disks, counter, mute and win banner."""

import colorsys
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pygame

from src.audio.effects import SoundEffects
from src.game.session import GameSession
from src.utils.templates import TemplateManager

logger = logging.getLogger(__name__)

Rect = Tuple[int, int, int, int]

# Colours
BACKGROUND_COLOR = (235, 242, 252)
PANEL_COLOR = (255, 255, 255)
TEXT_COLOR = (55, 65, 81)
ACCENT_COLOR = (37, 99, 235)
WIN_COLOR = (22, 163, 74)
TOWER_COLOR = (243, 244, 246)
TOWER_BORDER = (55, 65, 81)
TOWER_OVER = (220, 252, 231)
TOWER_CAN_DROP = (34, 197, 94)
BASE_COLOR = (31, 41, 55)
BUTTON_COLOR = (59, 130, 246)
BUTTON_TEXT = (255, 255, 255)

# Geometry
PEG_COUNT = 3
DISK_UNIT = 40         # disk width per size step
DISK_HEIGHT = 25
TOWER_WIDTH = 250
TOWER_HEIGHT = 350
BASE_HEIGHT = 16
BOTTOM_MARGIN = 150


def disk_color(size: int) -> Tuple[int, int, int]:
    """hsl(size * 30, 70%, 50%) as an RGB triple."""
    hue = ((size * 30) % 360) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.7)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


def peg_centers(width: int, count: int = PEG_COUNT) -> List[int]:
    """Centre x of each peg, one per equal-width column."""
    column = width / count
    return [int(column * i + column / 2) for i in range(count)]


def peg_at(x: float, width: int, count: int = PEG_COUNT) -> Optional[int]:
    """Column under an x coordinate, or None outside the window."""
    if x < 0 or x >= width:
        return None
    return min(count - 1, int(x // (width / count)))


def tower_rect(center_x: int, base_y: int) -> Rect:
    return center_x - TOWER_WIDTH // 2, base_y - TOWER_HEIGHT, TOWER_WIDTH, TOWER_HEIGHT


def disk_rect(center_x: int, base_y: int, stack_index: int, size: int) -> Rect:
    """Rectangle of the disk at ``stack_index`` (0 is the base) on a peg."""
    width = size * DISK_UNIT
    top = base_y - BASE_HEIGHT - (stack_index + 1) * DISK_HEIGHT
    return center_x - width // 2, top, width, DISK_HEIGHT


def top_disk_at(pegs: Sequence[Sequence[int]], pos: Tuple[int, int], width: int, base_y: int) -> Optional[int]:
    """Peg whose top disk is under ``pos``; only top disks can be grabbed."""
    peg = peg_at(pos[0], width, len(pegs))
    if peg is None or not pegs[peg]:
        return None

    left, top, w, h = disk_rect(peg_centers(width, len(pegs))[peg], base_y, len(pegs[peg]) - 1, pegs[peg][-1])
    x, y = pos
    return peg if left <= x < left + w and top <= y < top + h else None


class HanoiApp:

    def __init__(
        self,
        session: GameSession,
        sound_effects: SoundEffects,
        templates: TemplateManager,
        config: Dict[str, Any],
    ):
        self.session = session
        self.sound_effects = sound_effects
        self.templates = templates
        self.width = config.get("window_width", 960)
        self.height = config.get("window_height", 640)
        self.fps = config.get("fps", 60)
        self.base_y = self.height - BOTTOM_MARGIN

        self.running = False
        self.drag_pos: Tuple[int, int] = (0, 0)
        self.screen = None
        self.font = None
        self.big_font = None
        self.play_again_rect: Optional[pygame.Rect] = None
        self.mute_rect: Optional[pygame.Rect] = None

    def run(self) -> None:
        pygame.init()
        try:
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(self.templates.render("title"))
            self.font = pygame.font.Font(None, 30)
            self.big_font = pygame.font.Font(None, 52)
            clock = pygame.time.Clock()

            self.sound_effects.start_background()
            self.running = True
            logger.info("Game window opened")

            while self.running:
                for event in pygame.event.get():
                    self.handle_event(event)
                self.draw()
                pygame.display.flip()
                clock.tick(self.fps)
        finally:
            self.sound_effects.shutdown()
            pygame.quit()
            logger.info("Game window closed")

    def handle_event(self, event: Any) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._handle_press(event.pos)
        elif event.type == pygame.MOUSEMOTION and self.session.dragging is not None:
            self.drag_pos = event.pos
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._handle_release(event.pos)

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_r:
            self.session.reset()
        elif key == pygame.K_m:
            self.sound_effects.toggle_mute()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS, pygame.K_RIGHT):
            self.session.set_disk_count(self.session.disk_count + 1)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS, pygame.K_LEFT):
            self.session.set_disk_count(self.session.disk_count - 1)

    def _handle_press(self, pos: Tuple[int, int]) -> None:
        if self.play_again_rect is not None and self.play_again_rect.collidepoint(pos):
            self.session.play_again()
            return
        if self.mute_rect is not None and self.mute_rect.collidepoint(pos):
            self.sound_effects.toggle_mute()
            return

        peg = top_disk_at(self.session.puzzle.pegs, pos, self.width, self.base_y)
        if peg is not None and self.session.begin_drag(peg):
            self.drag_pos = pos

    def _handle_release(self, pos: Tuple[int, int]) -> None:
        if self.session.dragging is None:
            return
        target = peg_at(pos[0], self.width)
        if target is None:
            self.session.cancel_drag()
        else:
            self.session.drop(target)

    def draw(self) -> None:
        self.screen.fill(BACKGROUND_COLOR)
        self._draw_header()
        self._draw_towers()
        self._draw_dragged_disk()
        self._draw_footer()

    def _blit_centered(self, text: str, font: Any, color: Tuple[int, int, int], center: Tuple[int, int]) -> pygame.Rect:
        surface = font.render(text, True, color)
        rect = surface.get_rect(center=center)
        self.screen.blit(surface, rect)
        return rect

    def _draw_header(self) -> None:
        self._blit_centered(self.templates.render("title"), self.big_font, ACCENT_COLOR, (self.width // 2, 40))
        self._blit_centered(
            self.templates.render("disk_count", disk_count=self.session.disk_count),
            self.font, TEXT_COLOR, (self.width // 2, 85),
        )

        label = "Sound: off" if self.sound_effects.muted else "Sound: on"
        surface = self.font.render(label, True, TEXT_COLOR)
        self.mute_rect = surface.get_rect(topright=(self.width - 20, 20))
        self.screen.blit(surface, self.mute_rect)

    def _draw_towers(self) -> None:
        hover = peg_at(self.drag_pos[0], self.width) if self.session.dragging is not None else None

        for peg, center_x in enumerate(peg_centers(self.width)):
            rect = pygame.Rect(tower_rect(center_x, self.base_y))
            can_drop = self.session.can_drop(peg)
            pygame.draw.rect(self.screen, TOWER_OVER if peg == hover else TOWER_COLOR, rect, border_radius=8)
            pygame.draw.rect(self.screen, TOWER_CAN_DROP if can_drop else TOWER_BORDER, rect, width=4, border_radius=8)
            pygame.draw.rect(
                self.screen, BASE_COLOR,
                (rect.left, self.base_y - BASE_HEIGHT, rect.width, BASE_HEIGHT),
                border_radius=4,
            )

            disks = self.session.puzzle.pegs[peg]
            for index, size in enumerate(disks):
                if peg == self.session.dragging and index == len(disks) - 1:
                    continue
                pygame.draw.rect(self.screen, disk_color(size), disk_rect(center_x, self.base_y, index, size), border_radius=10)

    def _draw_dragged_disk(self) -> None:
        source = self.session.dragging
        if source is None:
            return
        size = self.session.puzzle.get_top_disk(source)
        if size is None:
            return
        width = size * DISK_UNIT
        x, y = self.drag_pos
        pygame.draw.rect(self.screen, disk_color(size), (x - width // 2, y - DISK_HEIGHT // 2, width, DISK_HEIGHT), border_radius=10)

    def _draw_footer(self) -> None:
        footer_y = self.base_y + 35
        self._blit_centered(
            self.templates.render("moves", move_count=self.session.move_count),
            self.font, TEXT_COLOR, (self.width // 2, footer_y),
        )

        if not self.session.is_solved():
            self.play_again_rect = None
            self._blit_centered(self.templates.render("controls"), self.font, TEXT_COLOR, (self.width // 2, footer_y + 40))
            return

        self._blit_centered(
            self.templates.render(
                "solved",
                move_count=self.session.move_count,
                optimal_moves=self.session.puzzle.get_optimal_move_count(),
            ),
            self.font, WIN_COLOR, (self.width // 2, footer_y + 35),
        )
        button = self.font.render(self.templates.render("play_again"), True, BUTTON_TEXT)
        self.play_again_rect = button.get_rect(center=(self.width // 2, footer_y + 80)).inflate(32, 16)
        pygame.draw.rect(self.screen, BUTTON_COLOR, self.play_again_rect, border_radius=20)
        self.screen.blit(button, button.get_rect(center=self.play_again_rect.center))
