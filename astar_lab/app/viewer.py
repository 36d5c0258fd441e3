#!/usr/bin/env python3
"""
A* Lab Viewer — edit a grid, then watch A* explore it one event at a time.

- Mouse:
    click/drag on empty cells -> draw walls (drag over walls to erase)
    drag the start / goal     -> move it
- Keyboard:
    [SPACE]      -> run/pause
    [N]          -> single step
    [C]          -> cancel the running search
    [R]          -> clear search overlay
    [W]          -> clear walls
    [1]..[9]     -> switch preset map
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Config:
- ENV: ASTAR_LAB_MAP=<name>   ASTAR_LAB_SPEED=<steps/sec>
- CLI: --map=<name>           --speed=<steps/sec>
"""

import os
import sys
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import pygame

from astar_lab.core.astar import AStarSearch, search
from astar_lab.core.grid import Grid, create_grid
from astar_lab.core.maps import list_maps, load_map
from astar_lab.core.types import (
    Cancelled, ConfigurationError, Coord, Found, Overlay, Role, Unreachable,
)


# ---------- Config resolution ----------
def resolve_setting(key: str, env_var: str, default: str) -> str:
    value = os.getenv(env_var, default)
    for arg in sys.argv:
        if arg.startswith(f"--{key}="):
            value = arg.split("=", 1)[1]
    return value


def resolve_speed() -> int:
    raw = resolve_setting("speed", "ASTAR_LAB_SPEED", "20")
    try:
        return max(1, min(60, int(raw)))
    except ValueError:
        print(f"Ignoring bad speed {raw!r}, using 20 steps/s")
        return 20


MAP_FILES = list_maps()
DEFAULT_MAP = resolve_setting("map", "ASTAR_LAB_MAP", "01_open_field")

PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
FONT_NAME = None  # default pygame font

# Colors
WHITE        = (255, 255, 255)
BLACK        = (  0,   0,   0)
EMPTY_FILL   = (245, 247, 250)
WALL_FILL    = ( 51,  65,  85)
START_FILL   = ( 99, 102, 241)
GOAL_FILL    = (239,  68,  68)
VISITED_FILL = (224, 231, 255)
FRONTIER_FILL= (236, 253, 245)
PATH_FILL    = ( 52, 211, 153)
GRID_LINE    = (203, 213, 225)

CARD_BG     = (24, 28, 36, 220)
CARD_HI     = (255, 255, 255, 18)
TEXT_LIGHT  = (230, 235, 240)
ACCENT_GOLD = (255, 210, 0)

OVERLAY_FILL = {
    Overlay.VISITED: VISITED_FILL,
    Overlay.FRONTIER: FRONTIER_FILL,
    Overlay.PATH: PATH_FILL,
}


# ---------- Simple UI Button ----------
BUTTON_FILL = {"idle": (36, 40, 48), "hover": (46, 50, 60), "active": (58, 86, 160)}
BUTTON_EDGE = (120, 170, 255)
BUTTON_TEXT = (235, 238, 242)


@dataclass
class UIButton:
    label: str
    rect: pygame.Rect
    on_click: Callable[[], None]
    togglable: bool = False
    hover: bool = False
    active: bool = False  # only drawn for togglable buttons

    def set_active(self, value: bool):
        self.active = bool(value)

    def state(self) -> str:
        if self.togglable and self.active:
            return "active"
        return "hover" if self.hover else "idle"

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        state = self.state()
        pygame.draw.rect(screen, BUTTON_FILL[state], self.rect, border_radius=10)
        if state == "active":
            pygame.draw.rect(screen, BUTTON_EDGE, self.rect, width=2, border_radius=10)
        text = font.render(self.label, True, BUTTON_TEXT)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        """Track hover; fire on left click inside. True if the click was consumed."""
        inside = self.rect.collidepoint(event.pos)
        if event.type == pygame.MOUSEMOTION:
            self.hover = bool(inside)
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and inside:
            self.on_click()
            return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, map_key: str = "custom"):
        pygame.init()

        self.grid = grid
        self.selected_map_key = map_key
        self.cell_size = CELL_SIZE_DEFAULT
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        win_w = GRID_MARGIN * 2 + grid.cols * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN * 2 + grid.rows * self.cell_size, 560)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"A* Lab — {map_key}")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.run: Optional[AStarSearch] = None
        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = resolve_speed()
        self.state = "Idle"
        self._last_step_t = 0.0
        self._last_metrics: Dict = {}

        # mouse editing: Role being painted while the button is held
        self._drag_role: Optional[Role] = None

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.grid.cols, avail_h // self.grid.rows)))

        grid_plate_w = self.grid.cols * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.rows * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(0, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Coord]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        c = (int(row), int(col))
        return c if self.grid.in_bounds(c) else None

    # ---------- main loop ----------
    def loop(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.steps_per_sec)
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self._do_step()

    def _searching(self) -> bool:
        return self.run is not None and not self.run.done

    def _do_step(self):
        if self.run is None or self.run.done:
            self.grid.clear_search_state()
            self.run = search(self.grid)
        item = self.run.step()
        self._last_metrics = self.run.metrics()
        if not self.run.done:
            self.grid.apply(item)
            return

        self.running = False
        if isinstance(item, Found):
            self.state = "Done"
            print(f"Path found: {item.total_steps} steps, {self._last_metrics['popped']} cells expanded")
        elif isinstance(item, Unreachable):
            self.state = "No path"
            print("No path: goal is unreachable")
        elif isinstance(item, Cancelled):
            self.state = "Cancelled"
        self._refresh_active_states()

    # ---------- controls ----------
    def _toggle_run(self):
        if self.run is not None and self.run.done:
            self.run = None  # next tick starts a fresh search
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _cancel(self):
        if self._searching():
            self.run.cancel()
            self._do_step()

    def _clear_overlay(self):
        self._cancel()
        self.run = None
        self.running = False
        self.state = "Idle"
        self.grid.clear_search_state()
        self._last_metrics = {}
        self._refresh_active_states()

    def _clear_walls(self):
        self._clear_overlay()
        self.grid.clear_walls()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(60, self.steps_per_sec + dv)))

    def _switch_map(self, key: str):
        if key not in MAP_FILES:
            return
        try:
            grid = load_map(MAP_FILES[key])
        except ConfigurationError as ex:
            print(f"Failed to load map {key}: {ex}")
            return
        self._clear_overlay()
        self.grid = grid
        self.selected_map_key = key
        pygame.display.set_caption(f"A* Lab — {key}")
        self._layout(*self.screen.get_size())

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e)
            elif e.type == pygame.VIDEORESIZE:
                w, h = max(640, e.w), max(480, e.h)
                self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                self._layout(w, h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                self._handle_edit(e)

    def _handle_key(self, e: pygame.event.Event):
        if e.key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif e.key == pygame.K_SPACE:
            self._toggle_run()
        elif e.key == pygame.K_n:
            self._do_step()
        elif e.key == pygame.K_c:
            self._cancel()
        elif e.key == pygame.K_r:
            self._clear_overlay()
        elif e.key == pygame.K_w:
            self._clear_walls()
        elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._bump_speed(+1)
        elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self._bump_speed(-1)
        elif pygame.K_1 <= e.key <= pygame.K_9:
            keys = list(MAP_FILES)
            idx = e.key - pygame.K_1
            if idx < len(keys):
                self._switch_map(keys[idx])

    def _handle_edit(self, e: pygame.event.Event):
        if e.type == pygame.MOUSEBUTTONUP:
            self._drag_role = None
            return
        if self._searching():
            return  # no edits while a search is in flight
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            c = self._cell_at(e.pos)
            if c is None:
                return
            self._clear_overlay()
            role = self.grid.role(c)
            if role in (Role.START, Role.GOAL):
                self._drag_role = role
            else:
                self._drag_role = Role.EMPTY if role is Role.OBSTACLE else Role.OBSTACLE
                self.grid.set_cell_role(c, self._drag_role)
        elif e.type == pygame.MOUSEMOTION and self._drag_role is not None:
            c = self._cell_at(e.pos)
            if c is not None:
                self.grid.set_cell_role(c, self._drag_role)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h - 1)
            c = tuple(int(top[i] + (bot[i] - top[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        for row in range(self.grid.rows):
            for col in range(self.grid.cols):
                rect = pygame.Rect(ox + col * cs, oy + row * cs, cs, cs)
                role = self.grid.roles[row][col]
                if role is Role.OBSTACLE:
                    fill = WALL_FILL
                elif role is Role.START:
                    fill = START_FILL
                elif role is Role.GOAL:
                    fill = GOAL_FILL
                else:
                    fill = OVERLAY_FILL.get(self.grid.overlays[row][col], EMPTY_FILL)
                pygame.draw.rect(self.screen, fill, rect)
                pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

        self._draw_badge(self.grid.start, "S")
        self._draw_badge(self.grid.goal, "G")

    def _draw_badge(self, cell: Coord, label: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        row, col = cell
        txt = self.font.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(ox + col * cs + cs // 2, oy + row * cs + cs // 2)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step);         y += h + gap
        add("Cancel", self._cancel);             y += h + gap
        add("Clear Path", self._clear_overlay);  y += h + gap
        add("Clear Walls", self._clear_walls);   y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Speed −", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+1)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0, 0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Expanded: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_steps") is not None:
            line(f"Steps: {m['total_steps']}")
        line("-" * 26)
        line(f"Map: {self.selected_map_key}  |  {self.state}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    key = DEFAULT_MAP
    if key in MAP_FILES:
        try:
            grid = load_map(MAP_FILES[key])
        except ConfigurationError as ex:
            print(f"Failed to load default map: {ex}")
            sys.exit(1)
    else:
        print(f"Unknown map {key!r}, starting with an empty grid")
        grid, key = create_grid(), "custom"
    Viewer(grid, key).loop()


if __name__ == "__main__":
    main()
