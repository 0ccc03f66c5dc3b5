"""
pathfinder.py

Shortest walking routes on a floor map: breadth-first search over the four
orthogonal neighbours, path reconstruction and step-by-step directions.
"""

from __future__ import annotations
import logging
from collections import deque
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from city_library import config
from city_library.floor_map import Coordinate, FloorMap

logger = logging.getLogger(__name__)

# Neighbour visiting order is fixed so that routes are reproducible.
DIRECTIONS = (
    (-1, 0, "UP"),
    (1, 0, "DOWN"),
    (0, -1, "LEFT"),
    (0, 1, "RIGHT"),
)

Path = Tuple[Coordinate, ...]


def find_path(floor_map: FloorMap, start: Coordinate, goal: Coordinate) -> Path:
    """
    Find a shortest 4-connected route from `start` to `goal`.

    Returns:
        The route as a tuple of coordinates from start to goal inclusive, or an
        empty tuple when either end is outside the map or not walkable, or the
        goal cannot be reached. No route is a normal outcome, not an error.
    """
    if not floor_map.is_walkable(start.row, start.col) or not floor_map.is_walkable(goal.row, goal.col):
        logger.debug("No route: %s or %s is blocked or off the map", start, goal)
        return ()

    visited = np.zeros((floor_map.height, floor_map.width), dtype=bool)
    parent: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    visited[start.row, start.col] = True
    queue = deque([start])

    found = False
    while queue:
        current = queue.popleft()
        if current == goal:
            found = True
            break
        for dr, dc, _ in DIRECTIONS:
            nr, nc = current.row + dr, current.col + dc
            if not floor_map.in_bounds(nr, nc) or visited[nr, nc]:
                continue
            if not floor_map.is_walkable(nr, nc):
                continue
            visited[nr, nc] = True
            neighbour = Coordinate(nr, nc)
            parent[neighbour] = current
            queue.append(neighbour)

    if not found:
        logger.debug("No route from %s to %s", start, goal)
        return ()

    path: List[Coordinate] = []
    node: Optional[Coordinate] = goal
    while node is not None:
        path.append(node)
        node = parent[node]
    path.reverse()
    logger.debug("Route from %s to %s takes %d step(s)", start, goal, len(path) - 1)
    return tuple(path)


def step_direction(current: Coordinate, following: Coordinate) -> str:
    """UP/DOWN/LEFT/RIGHT for a unit move, MOVE for anything else."""
    delta = (following.row - current.row, following.col - current.col)
    for dr, dc, name in DIRECTIONS:
        if delta == (dr, dc):
            return name
    return "MOVE"


def narrate_path(path: Sequence[Coordinate]) -> List[str]:
    """One "<DIRECTION> to (row,col)" line per step of the route."""
    return [f"{step_direction(current, following)} to {following}"
            for current, following in zip(path, path[1:])]


def render_route(floor_map: FloorMap, path: Sequence[Coordinate],
                 goal: Optional[Coordinate] = None) -> List[str]:
    """
    Draw the route over the map as text rows.

    The first cell of the route becomes 'S', the goal 'X' and walkway cells in
    between '*'. Other cells keep their symbol.
    """
    view = floor_map.grid
    if path:
        start = path[0]
        goal = path[-1] if goal is None else goal
        for step in path:
            if step == start:
                view[step.row, step.col] = config.START_MARKER
            elif step == goal:
                view[step.row, step.col] = config.GOAL_MARKER
            elif view[step.row, step.col] in (config.WALKWAY, "."):
                view[step.row, step.col] = config.ROUTE_MARKER
    return ["".join(row) for row in view]
