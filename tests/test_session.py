from gridpath.core.obstacles import ObstacleSet
from gridpath.core.session import SearchSession
from gridpath.core.strategies import Strategy
from gridpath.core.types import adjacent


def _session(strategy=Strategy.ASTAR, target=(100, 0)):
    obs = ObstacleSet()
    obs.add_border(200, 200)
    return SearchSession((0, 0), target, obstacles=obs, strategy=strategy)


def test_obstacle_edit_resets_search():
    s = _session()
    s.run_to_completion()
    assert s.arena.status == "done"
    s.add_obstacle((60, 0))
    assert len(s.arena) == 1
    assert s.arena.target_id is None
    s.run_to_completion()
    assert (60, 0) not in s.path()
    s.remove_obstacle((60, 0))
    assert len(s.arena) == 1


def test_noop_obstacle_edits_keep_search():
    s = _session()
    s.add_obstacle((60, 60))
    s.run_to_completion()
    count = len(s.arena)
    s.add_obstacle((60, 60))
    s.remove_obstacle((140, 140))
    assert len(s.arena) == count
    assert s.arena.status == "done"


def test_target_on_discovered_cell_uses_cache():
    s = _session(strategy=Strategy.LAYER)
    s.run_to_completion()
    count = len(s.arena)
    s.set_target((0, 60))
    assert len(s.arena) == count
    assert s.arena.status == "done"
    assert s.path()[-1] == (0, 60)
    assert s.advance() is True


def test_target_on_unexplored_cell_resets():
    s = _session()
    s.run_to_completion()
    s.set_target((200, 200))
    assert len(s.arena) == 1
    assert s.arena.status == "running"
    assert s.run_to_completion()
    assert s.path()[-1] == (200, 200)


def test_target_on_start_is_found_immediately():
    s = _session(target=(0, 0))
    assert s.arena.status == "done"
    assert s.path() == [(0, 0)]
    s.set_target((40, 0))
    s.set_target((0, 0))
    assert s.path() == [(0, 0)]


def test_strategy_switch_restarts_episode():
    s = _session()
    s.run_to_completion()
    s.set_strategy(Strategy.GREEDY)
    assert s.strategy is Strategy.GREEDY
    assert len(s.arena) == 1
    assert s.run_to_completion()


def test_step_reports_touched_nodes():
    s = _session(strategy=Strategy.ASTAR, target=(40, 0))
    first = s.step()
    assert first.status == "running"
    assert first.current == 0
    # border walls sit above and left of the root
    assert first.opened == [1, 2]
    assert [s.arena.nodes[i].position for i in first.opened] == [(20, 0), (0, 20)]
    assert first.path is None
    assert first.metrics["steps"] == 1

    second = s.step()
    assert second.status == "done"
    assert second.path == [(0, 0), (20, 0), (40, 0)]

    idle = s.step()
    assert idle.status == "done"
    assert idle.opened == [] and idle.current is None


def test_step_opens_all_four_neighbours_in_open_field():
    s = SearchSession((0, 0), (40, 0), strategy=Strategy.ASTAR)
    first = s.step()
    assert first.opened == [1, 2, 3, 4]
    assert [s.arena.nodes[i].position for i in first.opened] == [
        (0, -20), (20, 0), (0, 20), (-20, 0)]


def test_replan_after_blocking_path():
    s = _session(target=(200, 100))
    s.arena.start = (0, 100)
    s.reset()
    s.run_to_completion()
    first = s.path()
    for cell in first[1:-1]:
        s.add_obstacle(cell)
        s.run_to_completion()
        path = s.path()
        assert path[0] == (0, 100) and path[-1] == (200, 100)
        assert cell not in path
        assert all(adjacent(a, b) for a, b in zip(path, path[1:]))
