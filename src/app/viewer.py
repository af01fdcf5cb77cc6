# src/app/viewer.py
#!/usr/bin/env python3
"""
A* Pathfinding Viewer — Minimal Controls + Metrics

- Keyboard:
    [1]..[9]     -> switch map (files in the map directory, by name)
    [G]          -> random map
    [S]          -> save the current map into the map directory
    [SPACE]      -> run/pause (one expansion per step)
    [N]          -> single step
    [F]          -> solve on a background thread, replay its progress
    [C]          -> cancel the current search
    [R]          -> reset
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit
- Mouse:
    left click on a grid cell toggles a wall and resets the search

Settings: see src/app/settings.py (--steps=, --maps=, --seed=, --log-level=)
"""

# --- bootstrap import path so `from src...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

import logging
from typing import Dict, List, Optional, Tuple
import pygame

from src.app.settings import Settings, configure_logging, load_settings
from src.core.astar import AStarAlgo
from src.core.generator import random_map
from src.core.maps import GridMap, list_maps, load_map, save_map, toggle_wall
from src.core.path import reconstruct
from src.core.types import Cancelled, Cell, Found, SearchStatus, StepResult
from src.core.worker import SearchWorker

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 420            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font
RANDOM_SIZE = (25, 25)
RANDOM_WALKABLE_P = 0.8
RANDOM_MAX_COST = 9

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
GRASS_GREEN = (144, 238, 144)
ASPHALT_GRAY= (200,200,200)
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
NEON_MINT   = (0,255,200)
PROBE_RED   = (255, 90, 90)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STATE_LABELS = {
    SearchStatus.SUCCEEDED: "Done",
    SearchStatus.FAILED: "No path",
    SearchStatus.CANCELLED: "Cancelled",
}


def _lerp(a: Tuple[int, int, int], b: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    return tuple(int(a[i] + (b[i] - a[i]) * t) for i in range(3))


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)

        # subtle highlight top band
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))

        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, gm: GridMap, settings: Optional[Settings] = None):
        pygame.init()

        self.settings = settings or Settings()
        self.maps: Dict[str, Path] = list_maps(self.settings.map_dir)
        self.gm = gm
        self.selected_map_key = gm.name
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.cell_size = self._auto_cell_size()
        grid_px_w = GRID_MARGIN*2 + gm.grid.width * self.cell_size
        grid_px_h = GRID_MARGIN*2 + gm.grid.height* self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 720)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"A* — {gm.name}")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.open_set: set = set()
        self.closed_set: set = set()
        self.path: List[Cell] = []
        self.current: Optional[Cell] = None

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = self.settings.steps_per_sec
        self.state = "Idle"
        self._last_step_t = 0.0
        self.worker: Optional[SearchWorker] = None

        self.algo = AStarAlgo()
        self.algo.init(gm.grid, gm.start, gm.goal)
        self._reset_overlays()

    @property
    def grid(self):
        return self.gm.grid

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)

        cs_by_w = avail_w // self.grid.width
        cs_by_h = avail_h // self.grid.height
        self.cell_size = int(max(4, min(cs_by_w, cs_by_h)))

        grid_plate_w = self.grid.width  * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.height * self.cell_size + 2 * GRID_MARGIN

        left_x = max(0, (win_w - (grid_plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def _auto_cell_size(self) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(6, min(CELL_SIZE_DEFAULT, target_h // self.grid.height))

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.worker is not None:
                self._pump_worker()
            elif self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _due(self) -> bool:
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            return True
        return False

    def _tick_algorithm(self):
        if self._due():
            self._do_step()

    def _do_step(self):
        if self.worker is not None:
            return
        res: StepResult = self.algo.step()
        for c in res.opened:
            self.open_set.add(c)
            self.closed_set.discard(c)
        for c in res.closed:
            self.closed_set.add(c)
            self.open_set.discard(c)
        self.current = res.current
        if res.path is not None:
            self.path = res.path
        elif res.current is not None and self.algo.state is not None:
            self.path = self._best_path_to(res.current)
        self._apply_status(res.status)
        if res.metrics:
            self._last_metrics = res.metrics

    def _best_path_to(self, c: Cell) -> List[Cell]:
        return reconstruct(self.algo.state, c)

    def _apply_status(self, status: SearchStatus):
        if status in STATE_LABELS:
            self.state = STATE_LABELS[status]
            self.running = False
        else:
            self.state = "Running" if self.running else "Idle"
        self._refresh_active_states()

    # ---------- background solve ----------
    def _start_background(self):
        self._reset()
        self.worker = SearchWorker(self.grid, self.gm.start, self.gm.goal).start_search()
        self.state = "Solving"
        self._refresh_active_states()

    def _pump_worker(self):
        # replay a few events per frame so fast searches stay visible
        batch = max(1, self.steps_per_sec // 4) if self._due() else 0
        for ev in self.worker.drain(limit=batch):
            self.open_set.add(ev.cell)
            self.closed_set.discard(ev.cell)
            self.closed_set.add(ev.settled)
            self.open_set.discard(ev.settled)
            self.current = ev.settled
            self.path = list(ev.path)
            self._last_metrics["popped"] = len(self.closed_set)
            self._last_metrics["open_size"] = len(self.open_set)
            self._last_metrics["closed_count"] = len(self.closed_set)
        if not self.worker.done or not self.worker.events.empty():
            return
        result = self.worker.wait()
        self.worker = None
        if isinstance(result, Found):
            self.path = list(result.path)
            self._last_metrics["path_len"] = len(result.path)
            self._last_metrics["total_cost"] = result.total_cost
            self._apply_status(SearchStatus.SUCCEEDED)
        elif isinstance(result, Cancelled):
            self._apply_status(SearchStatus.CANCELLED)
        else:
            self.path = []
            self._apply_status(SearchStatus.FAILED)

    def _cancel(self):
        if self.worker is not None:
            self.worker.cancel()
        else:
            self.algo.cancel()
            self._apply_status(self.algo.status)

    # ---------- events ----------
    def _apply_resize(self, req_w: int, req_h: int):
        new_w = max(640, req_w)
        new_h = max(480, req_h)
        self.screen = pygame.display.set_mode((new_w, new_h), pygame.RESIZABLE)
        self._layout(new_w, new_h)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self._quit()
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    self._quit()
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_f:
                    self._start_background()
                elif e.key == pygame.K_c:
                    self._cancel()
                elif e.key == pygame.K_g:
                    self._random_map()
                elif e.key == pygame.K_s:
                    self._save_map()
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
                self._apply_resize(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    cell = self._cell_at(e.pos)
                    if cell is not None:
                        self._toggle_cell(cell)
                        continue
                for b in self._buttons:
                    b.handle_mouse(e)

    def _quit(self):
        if self.worker is not None:
            self.worker.cancel()
        pygame.quit(); sys.exit(0)

    def _set_map(self, gm: GridMap):
        if self.worker is not None:
            self.worker.cancel()
            self.worker = None
        self.gm = gm
        self.selected_map_key = gm.name
        pygame.display.set_caption(f"A* — {gm.name}")
        self.algo = AStarAlgo()
        self.algo.init(gm.grid, gm.start, gm.goal)
        self._reset_overlays()
        self._layout(*self.screen.get_size())
        self.running = False; self.state = "Idle"
        self._refresh_active_states()

    def _switch_map(self, key: str):
        if key not in self.maps: return
        try:
            self._set_map(load_map(self.maps[key]))
        except (OSError, ValueError, KeyError) as ex:
            logger.error("Failed to load map %s: %s", key, ex)

    def _random_map(self):
        w, h = RANDOM_SIZE
        seed = self.settings.seed
        gm = random_map(w, h, RANDOM_WALKABLE_P, start=(0, 0), goal=(w - 1, h - 1),
                        max_cost=RANDOM_MAX_COST, seed=seed)
        if seed is not None:
            self.settings.seed = seed + 1
        self._set_map(gm)

    def _save_map(self):
        try:
            save_map(self.gm, self.settings.map_dir)
        except OSError as ex:
            logger.error("Failed to save map %s: %s", self.gm.name, ex)
            return
        self.maps = list_maps(self.settings.map_dir)
        self._build_buttons()

    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        if pos[0] < ox or pos[1] < oy or not self.grid.in_bounds(col, row):
            return None
        return (col, row)

    def _toggle_cell(self, cell: Cell):
        try:
            gm = toggle_wall(self.gm, cell)
        except ValueError as ex:
            logger.info("%s", ex)
            return
        self._set_map(gm)

    def _reset_overlays(self):
        self.open_set.clear()
        self.closed_set.clear()
        self.path = []
        self.current = None
        self._last_metrics = {
            "algo": self.algo.name,
            "popped": 0,
            "open_size": 0,
            "closed_count": 0,
            "path_len": 0,
            "total_cost": None,
        }

    def _reset(self):
        if self.worker is not None:
            self.worker.cancel()
            self.worker = None
        self.running = False
        self.state = "Idle"
        self.algo.reset()
        self._reset_overlays()
        self._refresh_active_states()

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
            pygame.draw.line(self.screen, _lerp(top, bot, y / max(1, h-1)), (0, y), (w, y))

    def _cell_color(self, cost: Optional[int], max_cost: int) -> Tuple[int, int, int]:
        if cost is None:
            return BLACK
        if max_cost <= 1:
            return ASPHALT_GRAY
        return _lerp(ASPHALT_GRAY, GRASS_GREEN, (cost - 1) / (max_cost - 1))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        max_cost = max((c for row in self.grid.costs for c in row if c is not None), default=1)

        for row in range(self.grid.height):
            for col in range(self.grid.width):
                cost = self.grid.costs[row][col]
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                pygame.draw.rect(self.screen, self._cell_color(cost, max_cost), rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)
                if cost is not None and cost > 1 and cs >= 18:
                    txt = self.font_small.render(str(cost), True, (60, 60, 60))
                    self.screen.blit(txt, txt.get_rect(center=rect.center))

        # overlays
        for (col,row) in self.closed_set:
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(NEON_MAG_A)
            self.screen.blit(s, (ox + col*cs, oy + row*cs))

        for (col,row) in self.open_set:
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(NEON_CYAN_A)
            self.screen.blit(s, (ox + col*cs, oy + row*cs))

        # path
        if len(self.path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col,row) in self.path]
            color = NEON_MINT if self.state == "Done" else PROBE_RED
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, color + (60,), False, pts, 7)
            self.screen.blit(glow, (0,0), special_flags=pygame.BLEND_ADD)
            pygame.draw.lines(self.screen, color, False, pts, max(2, cs // 5))

        self._draw_badge(self.gm.start, BLUE, "S")
        self._draw_badge(self.gm.goal,  RED,  "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], label: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        col,row = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        pygame.draw.circle(self.screen, color, (cx,cy), max(3, cs//2 - 2))
        if cs >= 14:
            txt = self.font_small.render(label, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=(cx,cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 32
        gap = 6

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Solve in Background", self._start_background, togglable=True, store_as="btn_bg"); y += h + gap
        add("Cancel", self._cancel); y += h + gap
        add("Reset", self._reset); y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Speed −", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+1)))
        y += h + gap

        add("Random Map", self._random_map); y += h + gap
        add("Save Map", self._save_map); y += h + gap

        self._map_buttons: Dict[str, UIButton] = {}
        for i, key in enumerate(list(getattr(self, "maps", {}))[:9]):
            add(f"Map {i+1}: {key}", lambda k=key: self._switch_map(k), togglable=True)
            self._map_buttons[key] = self._buttons[-1]
            y += h + gap

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))
        if hasattr(self, "btn_bg"):
            self.btn_bg.set_active(getattr(self, "worker", None) is not None)
        for key, btn in getattr(self, "_map_buttons", {}).items():
            btn.set_active(key == getattr(self, "selected_map_key", None))

    def _toggle_run(self):
        if self.state in ("Done", "No path", "Cancelled") or self.worker is not None:
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(60, self.steps_per_sec + dv)))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 230), pygame.SRCALPHA)
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

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Popped: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']}")
        line("-" * 26)
        line(f"Map: {self.selected_map_key}   State: {self.state}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


def initial_map(settings: Settings) -> GridMap:
    maps = list_maps(settings.map_dir)
    if maps:
        return load_map(next(iter(maps.values())))
    w, h = RANDOM_SIZE
    return random_map(w, h, RANDOM_WALKABLE_P, start=(0, 0), goal=(w - 1, h - 1),
                      max_cost=RANDOM_MAX_COST, seed=settings.seed)


# ---------- main ----------
def main(gm: Optional[GridMap] = None, settings: Optional[Settings] = None):
    settings = settings or load_settings()
    configure_logging(settings)
    if gm is None:
        try:
            gm = initial_map(settings)
        except (OSError, ValueError, KeyError) as ex:
            logger.error("Failed to load default map: %s", ex)
            sys.exit(1)
    Viewer(gm, settings).run()


if __name__ == "__main__":
    main()
