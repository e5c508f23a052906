import pygame

from gridpath.app import viewer as viewer_mod
from gridpath.app.config import ViewerConfig
from gridpath.app.viewer import Viewer, cost_color, default_map
from gridpath.core.strategies import Strategy


def _viewer(**kw) -> Viewer:
    return Viewer(ViewerConfig(width=640, height=480, **kw))


def _feed(monkeypatch, events):
    monkeypatch.setattr(pygame.event, "get", lambda: events)


def test_cost_color_gradient():
    assert cost_color(0, 100) == (0, 255, 255)
    assert cost_color(100, 100) == (0, 0, 0)
    assert cost_color(5, 0) == (0, 255, 255)


def test_default_map_fits_window():
    grid = default_map(ViewerConfig(width=640, height=480))
    assert grid.width % 20 == 0 and grid.height % 20 == 0
    assert 0 <= grid.goal[0] < grid.start[0]
    assert 0 <= grid.goal[1] < grid.start[1]


def test_strategy_keys_switch_and_reset(monkeypatch):
    v = _viewer()
    v.session.advance()
    _feed(monkeypatch, [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_1)])
    assert v._handle_events() is True
    assert v.session.strategy is Strategy.LAYER
    assert len(v.session.arena) == 1
    assert v.btn_layer.active and not v.btn_astar.active


def test_instant_mode_runs_to_completion(monkeypatch):
    v = _viewer()
    _feed(monkeypatch, [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE)])
    v._handle_events()
    assert v.instant is True
    v._tick_algorithm()
    assert v.session.arena.status == "done"
    assert v._last.path[-1] == v.session.target
    v._draw()


def test_single_step_key(monkeypatch):
    v = _viewer()
    _feed(monkeypatch, [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_n)])
    v._handle_events()
    assert v.session.arena.steps == 1
    assert v._last.current == 0
    v._draw()


def test_move_target_to_cursor(monkeypatch):
    v = _viewer()
    _feed(monkeypatch, [
        pygame.event.Event(pygame.MOUSEMOTION, pos=(16 + 45, 16 + 25), rel=(0, 0), buttons=(0, 0, 0)),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_o),
    ])
    v._handle_events()
    assert v.cursor == (40, 20)
    assert v.session.target == (40, 20)


def test_mouse_paints_and_erases_walls(monkeypatch):
    v = _viewer()
    monkeypatch.setattr(pygame.mouse, "get_pressed", lambda *a, **k: (True, False, False))
    monkeypatch.setattr(pygame.mouse, "get_pos", lambda: (16 + 5, 16 + 5))
    monkeypatch.setattr(pygame.key, "get_mods", lambda: 0)
    v._handle_mouse_paint()
    assert (0, 0) in v.session.obstacles

    monkeypatch.setattr(pygame.key, "get_mods", lambda: pygame.KMOD_LSHIFT)
    v._handle_mouse_paint()
    assert (0, 0) not in v.session.obstacles


def test_quit_event_stops_loop(monkeypatch):
    v = _viewer()
    _feed(monkeypatch, [pygame.event.Event(pygame.QUIT)])
    assert v._handle_events() is False


def test_cycle_bundled_maps(monkeypatch):
    v = _viewer(strategy=Strategy.GREEDY)
    _feed(monkeypatch, [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_m)])
    v._handle_events()
    assert v.selected_map_key == "01_open"
    assert v.session.start == (40, 100)
    assert v.session.strategy is Strategy.GREEDY


def test_main_rejects_bad_flags():
    assert viewer_mod.main(["--strategy=nope"]) == 2


def test_cell_at_maps_every_pixel_of_a_cell_to_that_cell():
    v = _viewer()
    for x in (0, 20, 40, 60):
        assert v.cell_at(16 + x, 16) == (x, 0)
        assert v.cell_at(16 + x + 19, 16 + 19) == (x, 0)
    assert v.cell_at(15, 15) == (-20, -20)
