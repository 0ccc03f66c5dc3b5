import pytest

from city_library.floor_map import Coordinate, FloorMap
from city_library.pathfinder import find_path, narrate_path, render_route, step_direction

C = Coordinate

MAZE = [
    "#######",
    "#E#   #",
    "# # # #",
    "#   # #",
    "#######",
]


def make_map(rows):
    return FloorMap.build(width=len(rows[0]), height=len(rows)).populate_from_rows(rows)


def test_entrance_to_neighbour_on_default_map(floor_map):
    path = find_path(floor_map, C(1, 1), C(1, 2))
    assert list(path) == [C(1, 1), C(1, 2)]
    assert narrate_path(path) == ["RIGHT to (1,2)"]


def test_render_route_marks_start_and_goal(floor_map):
    path = find_path(floor_map, C(1, 1), C(1, 2))
    rows = render_route(floor_map, path)
    assert rows[1] == "#SX      #"
    # the map itself is untouched
    assert floor_map.rows()[1] == "#E       #"


def test_render_route_marks_walkway_between(floor_map):
    path = find_path(floor_map, C(1, 1), C(1, 3))
    assert render_route(floor_map, path)[1] == "#S*X     #"


def test_render_empty_route_is_plain_map(floor_map):
    assert render_route(floor_map, ()) == floor_map.rows()


def test_shortest_path_on_open_floor(floor_map):
    path = find_path(floor_map, C(1, 1), C(4, 8))
    # Manhattan distance on an obstacle-free interior
    assert len(path) - 1 == 3 + 7
    assert path[0] == C(1, 1) and path[-1] == C(4, 8)


def test_shortest_path_around_walls():
    maze = make_map(MAZE)
    path = find_path(maze, C(1, 1), C(1, 5))
    assert list(path) == [C(1, 1), C(2, 1), C(3, 1), C(3, 2), C(3, 3),
                          C(2, 3), C(1, 3), C(1, 4), C(1, 5)]
    assert narrate_path(path) == [
        "DOWN to (2,1)", "DOWN to (3,1)", "RIGHT to (3,2)", "RIGHT to (3,3)",
        "UP to (2,3)", "UP to (1,3)", "RIGHT to (1,4)", "RIGHT to (1,5)",
    ]


def test_path_steps_are_adjacent_and_walkable():
    maze = make_map(MAZE)
    path = find_path(maze, C(1, 1), C(3, 5))
    assert path
    for current, following in zip(path, path[1:]):
        assert abs(current.row - following.row) + abs(current.col - following.col) == 1
        assert maze.is_walkable(following.row, following.col)


def test_tie_break_follows_up_down_left_right(floor_map):
    path = find_path(floor_map, C(1, 1), C(2, 2))
    assert list(path) == [C(1, 1), C(2, 1), C(2, 2)]
    assert narrate_path(path) == ["DOWN to (2,1)", "RIGHT to (2,2)"]


def test_same_path_every_time(floor_map):
    assert find_path(floor_map, C(1, 1), C(4, 8)) == find_path(floor_map, C(1, 1), C(4, 8))


def test_start_equals_goal(floor_map):
    path = find_path(floor_map, C(2, 2), C(2, 2))
    assert path == (C(2, 2),)
    assert narrate_path(path) == []


def test_unreachable_goal_gives_empty_path():
    sealed = make_map(["#####", "#E# #", "#####"])
    assert find_path(sealed, C(1, 1), C(1, 3)) == ()


@pytest.mark.parametrize("goal", [C(0, 0), C(20, 20)])
def test_blocked_or_off_map_goal_gives_empty_path(floor_map, goal):
    assert find_path(floor_map, C(1, 1), goal) == ()


def test_blocked_start_gives_empty_path(floor_map):
    assert find_path(floor_map, C(0, 1), C(2, 2)) == ()


def test_route_markers_are_obstacles():
    fm = make_map(["######", "#E S #", "######"])
    assert find_path(fm, C(1, 1), C(1, 3)) == ()
    assert find_path(fm, C(1, 1), C(1, 4)) == ()
    fm = make_map(["######", "#E X #", "######"])
    assert find_path(fm, C(1, 1), C(1, 4)) == ()


def test_unknown_symbols_are_walkable():
    fm = make_map(["#####", "#EB.#", "#####"])
    path = find_path(fm, C(1, 1), C(1, 3))
    assert list(path) == [C(1, 1), C(1, 2), C(1, 3)]
    # only walkway and '.' cells get the route marker
    assert render_route(fm, path)[1] == "#SBX#"


def test_step_direction_falls_back_to_move():
    assert step_direction(C(1, 1), C(2, 2)) == "MOVE"
    assert narrate_path([C(1, 1), C(3, 1)]) == ["MOVE to (3,1)"]
