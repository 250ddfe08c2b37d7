# gridpath/app/viewer.py
#!/usr/bin/env python3
"""
A* Grid Viewer: chessboard grid, random endpoints, stepwise search

- Keyboard:
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> randomize start/target
    [C]          -> clear search (same endpoints)
    [1]..[9]     -> load bundled map
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit
- Mouse:
    left click on a cell -> toggle wall

Settings: see gridpath/app/config.py (GRIDPATH_* env, --key=value args).
"""

import logging
import random
import sys
import time
from typing import List, Optional, Tuple

import pygame

from gridpath.app.config import MAX_SPEED, Settings, resolve_settings
from gridpath.app.session import Session
from gridpath.core.grid import Grid
from gridpath.core.maps import list_maps, load_map
from gridpath.core.types import Coord

logger = logging.getLogger(__name__)

PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 48
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
WALL_GRAY   = ( 70, 74, 82)
GREEN       = (  0,200,  0)
RED         = (220, 30, 30)
CYAN        = (  0,220,220)
OPEN_A      = (0,150,255,90)
CLOSED_A    = (255,0,120,70)
BORDER      = (120,120,120)

BACKGROUND  = ( 30, 33, 40)
BUTTON_OFF  = ( 50, 55, 66)
BUTTON_ON   = ( 58, 86,160)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)


# ---------- Buttons ----------
class Button:
    """Flat clickable label; `active` highlights it (used for Run / Pause)."""

    def __init__(self, label: str, rect: pygame.Rect, callback):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.active = False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        pygame.draw.rect(screen, BUTTON_ON if self.active else BUTTON_OFF, self.rect)
        text = font.render(self.label, True, TEXT_LIGHT)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def click(self, pos: Tuple[int, int]) -> bool:
        if self.rect.collidepoint(pos):
            self.callback()
            return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, session: Session, settings: Settings):
        pygame.init()

        self.session = session
        self.settings = settings
        self.maps = list_maps(settings.map_dir)
        self.steps_per_sec = settings.steps_per_sec

        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 26)

        grid = session.grid
        cs = self._auto_cell_size(grid)
        win_w = GRID_MARGIN*2 + grid.cols * cs + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.rows * cs, 520)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"A* Grid: {session.name}")

        self._buttons: List[Button] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self._last_step_t = 0.0

    # ---------- layout ----------
    def _auto_cell_size(self, grid: Grid) -> int:
        return max(12, min(CELL_SIZE_DEFAULT, 688 // max(grid.rows, grid.cols)))

    def _layout(self, win_w: int, win_h: int):
        """Largest cell size that fits; grid at the left margin, panel after it."""
        grid = self.session.grid
        self.cell_size = max(8, min((win_w - PANEL_W - 2 * GRID_MARGIN) // grid.cols,
                                    (win_h - 2 * GRID_MARGIN) // grid.rows))
        self._grid_origin = (GRID_MARGIN, GRID_MARGIN)
        self._panel_x = 2 * GRID_MARGIN + grid.cols * self.cell_size
        self._build_buttons()

    def _cell_at(self, px: int, py: int) -> Optional[Coord]:
        ox, oy = self._grid_origin
        cs = self.cell_size
        if px < ox or py < oy:
            return None
        pos = ((py - oy) // cs, (px - ox) // cs)
        return pos if self.session.grid.in_bounds(pos) else None

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.session.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        res = self.session.step()
        if res.status == "done":
            logger.info("path found: %d cells, %d expansions",
                        res.metrics.get("path_len", 0), res.metrics.get("popped", 0))
        elif res.status == "no_path":
            logger.info("no path between %s and %s",
                        self.session.start.position, self.session.target.position)
        self._refresh_active_states()

    def _quit(self):
        pygame.quit()
        sys.exit(0)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self._quit()
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    self._quit()
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_r:
                    self._randomize()
                elif e.key == pygame.K_c:
                    self._clear()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-1)
                elif pygame.K_1 <= e.key <= pygame.K_9:
                    keys = list(self.maps)
                    idx = e.key - pygame.K_1
                    if idx < len(keys):
                        self._switch_map(keys[idx])
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(480, e.w), max(360, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if any(b.click(e.pos) for b in self._buttons):
                    continue
                pos = self._cell_at(*e.pos)
                if pos is not None and self.session.toggle_wall(pos):
                    self._refresh_active_states()

    # ---------- actions ----------
    def _toggle_run(self):
        self.session.toggle_run()
        self._refresh_active_states()

    def _randomize(self):
        self.session.randomize()
        self._refresh_active_states()

    def _clear(self):
        self.session.restart()
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(MAX_SPEED, self.steps_per_sec + dv)))

    def _switch_map(self, key: str):
        try:
            grid_map = load_map(self.maps[key])
        except (OSError, ValueError, KeyError) as ex:
            logger.error("failed to load map %s: %s", key, ex)
            return
        self.session.load(grid_map)
        logger.info("switched to map %s", grid_map.name)
        pygame.display.set_caption(f"A* Grid: {grid_map.name}")
        self._layout(*self.screen.get_size())

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill(BACKGROUND)
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _cell_rect(self, pos: Coord) -> pygame.Rect:
        ox, oy = self._grid_origin
        cs = self.cell_size
        row, col = pos
        return pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)

    def _fill_alpha(self, pos: Coord, rgba: Tuple[int, int, int, int]):
        s = pygame.Surface((self.cell_size, self.cell_size), pygame.SRCALPHA)
        s.fill(rgba)
        self.screen.blit(s, self._cell_rect(pos).topleft)

    def _draw_grid(self):
        sess = self.session
        for cell in sess.grid:
            rect = self._cell_rect(cell.position)
            if not cell.walkable:
                color = WALL_GRAY
            else:
                color = WHITE if (cell.row + cell.col) % 2 == 0 else BLACK
            pygame.draw.rect(self.screen, color, rect)
            pygame.draw.rect(self.screen, BORDER, rect, 1)

        for pos in sess.closed_set:
            self._fill_alpha(pos, CLOSED_A)
        for pos in sess.open_set:
            self._fill_alpha(pos, OPEN_A)

        # path cells cyan, start green, target red
        for pos in sess.path:
            if pos != sess.target.position:
                pygame.draw.rect(self.screen, CYAN, self._cell_rect(pos))
        self._draw_badge(sess.start.position, GREEN, "S")
        self._draw_badge(sess.target.position, RED, "T")

    def _draw_badge(self, pos: Coord, color: Tuple[int, int, int], label: str):
        rect = self._cell_rect(pos)
        pygame.draw.rect(self.screen, color, rect)
        if self.cell_size >= 18:
            txt = self.font_small.render(label, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=rect.center))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        x, w, h = self._panel_x + 8, PANEL_W - 32, 34
        actions = [
            ("Run / Pause", self._toggle_run),
            ("Step Once", self._do_step),
            ("Randomize", self._randomize),
            ("Clear", self._clear),
            ("Speed -", lambda: self._bump_speed(-1)),
            ("Speed +", lambda: self._bump_speed(+1)),
        ]
        self._buttons = [Button(label, pygame.Rect(x, 240 + i * (h + 8), w, h), cb)
                         for i, (label, cb) in enumerate(actions)]
        self._refresh_active_states()

    def _refresh_active_states(self):
        if self._buttons:
            self._buttons[0].active = self.session.running

    def _draw_metrics_and_buttons(self):
        x0 = self._panel_x + 8
        y0 = GRID_MARGIN

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        m = self.session.metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"State: {self.session.state}")
        line(f"Popped: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}  Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']}")
        line(f"Map: {self.session.name}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def build_session(settings: Settings) -> Session:
    rng = random.Random(settings.seed)
    if settings.map_name:
        maps = list_maps(settings.map_dir)
        if settings.map_name not in maps:
            raise ValueError(f"unknown map {settings.map_name!r}; available: {', '.join(maps) or 'none'}")
        return Session.from_map(load_map(maps[settings.map_name]), rng=rng)
    return Session(Grid.create(settings.size, settings.size), rng=rng)


def main(argv=None):
    try:
        settings = resolve_settings(argv)
    except ValueError as ex:
        print(f"Invalid settings: {ex}", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        session = build_session(settings)
    except (OSError, ValueError) as ex:
        logger.error("failed to start: %s", ex)
        sys.exit(1)
    Viewer(session, settings).run()


if __name__ == "__main__":
    main()
