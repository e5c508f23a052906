#!/usr/bin/env python3
"""
gridpath viewer: paint walls, move the target, watch the search re-plan.

- Mouse:
    [LMB]          -> paint wall under cursor
    [SHIFT]+[LMB]  -> erase wall under cursor
- Keyboard:
    [O]          -> move target to cursor
    [1]/[2]/[3]  -> strategy (Breadth-first / Greedy / A*)
    [SPACE]      -> toggle instant mode
    [V]          -> toggle node visualization
    [N]          -> single step
    [R]          -> reset search
    [M]          -> next bundled map (maps/*.json)
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Configuration: see gridpath/app/config.py (GRIDPATH_* env, --key=value flags).
"""

# --- bootstrap import path so `from gridpath...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# ------------------------------------------------------------------------------

import logging
from typing import List, Optional, Tuple
import pygame

from gridpath.app.config import GridMap, ViewerConfig, bundled_maps, load_map, resolve_config
from gridpath.core.session import SearchSession
from gridpath.core.strategies import Strategy
from gridpath.core.types import Cell, StepResult, snap

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 260            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font
MAX_INSTANT_STEPS = 200_000

# Colors
WHITE       = (255,255,255)
GRAY        = (128,128,128)
DARKGRAY    = ( 80, 80, 80)
GREEN       = (  0,228, 48)
GOLD        = (255,203,  0)
CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STRATEGY_KEYS = {
    pygame.K_1: Strategy.LAYER,
    pygame.K_2: Strategy.GREEDY,
    pygame.K_3: Strategy.ASTAR,
}


def cost_color(cost: int, greatest: int) -> Tuple[int, int, int]:
    """Cyan near the start fading to black at the most expensive node."""
    r = cost / greatest if greatest > 0 else 0.0
    r = min(1.0, max(0.0, r))
    v = int(255 * (1.0 - r))
    return (0, v, v)


def default_map(cfg: ViewerConfig) -> GridMap:
    """An empty walled field that fills the window; target up-left of centre."""
    cs = cfg.cell_size
    w = max(cs, cfg.width - PANEL_W - 2 * GRID_MARGIN - cs)
    h = max(cs, cfg.height - 2 * GRID_MARGIN - cs)
    cx, cy = snap(w / 2, h / 2, cs)
    goal = (max(0, cx - 15 * cs), max(0, cy - 15 * cs))
    return GridMap(width=cs * (w // cs), height=cs * (h // cs),
                   start=(cx, cy), goal=goal, cell_size=cs)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, cfg: ViewerConfig, grid: Optional[GridMap] = None):
        pygame.init()

        self.cfg = cfg
        self.cell_size = cfg.cell_size
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)

        self.instant = cfg.instant
        self.visualize = cfg.visualize
        self.steps_per_sec = cfg.steps_per_sec
        self.clock = pygame.time.Clock()
        self._last_step_t = 0.0
        self._buttons: List[UIButton] = []
        self.selected_map_key = "custom"

        self._load_grid(grid or default_map(cfg))

    def _load_grid(self, grid: GridMap):
        """(Re)build window, session and buttons around ``grid``."""
        self.grid = grid
        cs = self.cell_size
        win_w = GRID_MARGIN * 2 + grid.width + cs + PANEL_W
        win_h = max(GRID_MARGIN * 2 + grid.height + cs, 600)
        self.screen = pygame.display.set_mode((win_w, win_h))
        pygame.display.set_caption(f"gridpath: {self.selected_map_key}")
        self._grid_origin = (GRID_MARGIN, GRID_MARGIN)
        self._right_band = pygame.Rect(win_w - PANEL_W, 0, PANEL_W, win_h)

        strategy = self.session.strategy if hasattr(self, "session") else self.cfg.strategy
        self.session = SearchSession(
            grid.start, grid.goal,
            obstacles=grid.obstacles(),
            strategy=strategy,
            cell_size=cs,
        )
        self.cursor: Cell = grid.start
        self._last = StepResult(status="idle", metrics=self.session.arena.metrics())
        self._build_buttons()

    # ---------- geometry ----------
    def cell_at(self, px: int, py: int) -> Cell:
        """Grid position of the cell containing a window pixel."""
        ox, oy = self._grid_origin
        cs = self.cell_size
        return (cs * int((px - ox) // cs), cs * int((py - oy) // cs))

    def _cell_rect(self, c: Cell) -> pygame.Rect:
        ox, oy = self._grid_origin
        return pygame.Rect(ox + c[0], oy + c[1], self.cell_size, self.cell_size)

    def _in_field(self, c: Cell) -> bool:
        return 0 <= c[0] <= self.grid.width and 0 <= c[1] <= self.grid.height

    # ---------- loop ----------
    def run(self):
        while True:
            if not self._handle_events():
                break
            self._handle_mouse_paint()
            self._tick_algorithm()
            self._draw()
            self.clock.tick(60)
        pygame.quit()

    def _tick_algorithm(self):
        if self.session.arena.finished:
            return
        if self.instant or not self.visualize:
            done = self.session.run_to_completion(max_steps=MAX_INSTANT_STEPS)
            if not done:
                logger.warning("search still running after %d steps", MAX_INSTANT_STEPS)
            self._last = StepResult(status=self.session.arena.status,
                                    path=self.session.path() or None,
                                    metrics=self.session.arena.metrics())
            return
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        self._last = self.session.step()

    def _handle_events(self) -> bool:
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                return False
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    return False
                elif e.key == pygame.K_SPACE:
                    self.instant = not self.instant
                elif e.key == pygame.K_v:
                    self.visualize = not self.visualize
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_m:
                    self._cycle_map()
                elif e.key == pygame.K_o:
                    self.session.set_target(self.cursor)
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self.steps_per_sec = min(240, self.steps_per_sec + 5)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self.steps_per_sec = max(1, self.steps_per_sec - 5)
                elif e.key in STRATEGY_KEYS:
                    self._switch_strategy(STRATEGY_KEYS[e.key])
                self._refresh_active_states()
            elif e.type == pygame.MOUSEMOTION:
                self.cursor = self.cell_at(*e.pos)
                for b in self._buttons:
                    b.handle_mouse(e)
            elif e.type == pygame.MOUSEBUTTONDOWN:
                for b in self._buttons:
                    if b.handle_mouse(e):
                        break
        return True

    def _handle_mouse_paint(self):
        if not pygame.mouse.get_pressed()[0]:
            return
        px, py = pygame.mouse.get_pos()
        if self._right_band.collidepoint(px, py):
            return
        c = self.cell_at(px, py)
        if not self._in_field(c):
            return
        if pygame.key.get_mods() & pygame.KMOD_SHIFT:
            self.session.remove_obstacle(c)
        else:
            self.session.add_obstacle(c)

    def _switch_strategy(self, strategy: Strategy):
        self.session.set_strategy(strategy)
        self._last = StepResult(status="idle", metrics=self.session.arena.metrics())
        self._refresh_active_states()

    def _reset(self):
        self.session.reset()
        self._last = StepResult(status="idle", metrics=self.session.arena.metrics())

    def _cycle_map(self):
        keys = list(bundled_maps())
        if not keys:
            return
        idx = keys.index(self.selected_map_key) + 1 if self.selected_map_key in keys else 0
        self._switch_map(keys[idx % len(keys)])

    def _switch_map(self, key: str):
        maps = bundled_maps()
        if key not in maps:
            return
        try:
            grid = load_map(maps[key], self.cell_size)
        except (OSError, ValueError) as ex:
            logger.error("failed to load map %s: %s", key, ex)
            return
        self.selected_map_key = key
        self._load_grid(grid)

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill(DARKGRAY)
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_grid(self):
        arena = self.session.arena
        cs = self.cell_size

        if self.visualize:
            greatest = arena.greatest_cost
            for node in arena.nodes:
                pygame.draw.rect(self.screen, cost_color(node.cost, greatest),
                                 self._cell_rect(node.position))

            # outline what the latest step touched, if it belongs to this episode
            last = self._last
            if last.metrics.get("steps") == arena.steps and last.status == "running":
                for i in last.opened:
                    pygame.draw.rect(self.screen, WHITE, self._cell_rect(arena.nodes[i].position), 1)
                if last.current is not None:
                    pygame.draw.rect(self.screen, GOLD, self._cell_rect(arena.nodes[last.current].position), 2)

        for c in self.session.obstacles:
            pygame.draw.rect(self.screen, GRAY, self._cell_rect(c))

        if arena.target_id is not None:
            for c in arena.reconstruct_path(arena.target_id):
                pygame.draw.rect(self.screen, WHITE, self._cell_rect(c))

        pygame.draw.rect(self.screen, GREEN, self._cell_rect(self.session.start))
        pygame.draw.rect(self.screen, GOLD, self._cell_rect(self.session.target))
        pygame.draw.rect(self.screen, WHITE, self._cell_rect(self.cursor), 2)

        fps = self.clock.get_fps()
        ox, oy = self._grid_origin
        for i, text in enumerate((f"fps: {fps:.0f}", f"nodes: {len(arena)}")):
            surf = self.font_small.render(text, True, GREEN)
            self.screen.blit(surf, (ox + 2, oy + 2 + i * (cs // 2 + 6)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            nonlocal y
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)
            y += h + gap

        add("Instant", self._toggle_instant, togglable=True, store_as="btn_instant")
        add("Visualize", self._toggle_visualize, togglable=True, store_as="btn_visualize")
        add("Step Once", self._do_step)
        add("Reset", self._reset)
        add("Next Map", self._cycle_map)
        add("Breadth-first", lambda: self._switch_strategy(Strategy.LAYER),
            togglable=True, store_as="btn_layer")
        add("Greedy", lambda: self._switch_strategy(Strategy.GREEDY),
            togglable=True, store_as="btn_greedy")
        add("A*", lambda: self._switch_strategy(Strategy.ASTAR),
            togglable=True, store_as="btn_astar")

        self._refresh_active_states()

    def _refresh_active_states(self):
        self.btn_instant.set_active(self.instant)
        self.btn_visualize.set_active(self.visualize)
        strategy = self.session.strategy
        self.btn_layer.set_active(strategy is Strategy.LAYER)
        self.btn_greedy.set_active(strategy is Strategy.GREEDY)
        self.btn_astar.set_active(strategy is Strategy.ASTAR)

    def _toggle_instant(self):
        self.instant = not self.instant
        self._refresh_active_states()

    def _toggle_visualize(self):
        self.visualize = not self.visualize
        self._refresh_active_states()

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 210), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        status = self.session.arena.status
        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self.session.arena.metrics()
        line(f"Algo: {m['algo']}")
        line(f"Nodes: {m['nodes']}")
        line(f"Open: {m['open_size']}")
        line(f"Path Len: {m['path_len']}")
        line(f"Steps: {m['steps']}")
        line("No path" if status == "no_path" else f"State: {status}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font_small)


# ---------- main ----------
def main(argv: Optional[List[str]] = None) -> int:
    try:
        cfg = resolve_config(argv)
    except ValueError as ex:
        print(f"gridpath: {ex}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    grid = None
    if cfg.map_path is not None:
        try:
            grid = load_map(cfg.map_path, cfg.cell_size)
        except (OSError, ValueError) as ex:
            logger.error("failed to load map %s: %s", cfg.map_path, ex)
            return 1

    Viewer(cfg, grid).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
