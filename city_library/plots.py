"""
plots.py

Figures of a branch floor map (optionally with a route drawn over it) and of
loan activity over time.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from city_library import config
from city_library.floor_map import Coordinate, FloorMap

logger = logging.getLogger(__name__)

plt.rcParams.update({"figure.max_open_warning": 0})

# Cell codes used for the floor map image
OPEN, WALL, ENTRANCE, OTHER = 0, 1, 2, 3

# RGB colour per cell code
PALETTE = np.array([
    [0.97, 0.97, 0.97],  # open
    [0.25, 0.25, 0.25],  # wall
    [0.17, 0.63, 0.17],  # entrance
    [0.62, 0.79, 0.88],  # shelves and anything else
])


def save_plot(fig, path: Path) -> None:
    """
    Save a matplotlib figure to disk ensuring the parent directory exists.

    Args:
        fig: matplotlib.figure.Figure instance.
        path: Path to the PNG file to write.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)


def encode_floor_map(floor_map: FloorMap) -> np.ndarray:
    """Map each cell symbol to a small integer code for plotting."""
    grid = floor_map.grid
    codes = np.full(grid.shape, OTHER, dtype=int)
    codes[grid == config.WALKWAY] = OPEN
    codes[grid == config.WALL] = WALL
    codes[grid == config.ENTRANCE] = ENTRANCE
    return codes


def plot_route(floor_map: FloorMap, path: Sequence[Coordinate], out_path: Path,
               title: Optional[str] = None) -> Path:
    """
    Draw the floor map and, when `path` is non-empty, the route across it.

    Returns:
        The path of the saved PNG.
    """
    codes = encode_floor_map(floor_map)
    fig, ax = plt.subplots(figsize=(max(4, floor_map.width * 0.6), max(3, floor_map.height * 0.6)))
    ax.imshow(PALETTE[codes])
    if path:
        cols = [step.col for step in path]
        rows = [step.row for step in path]
        ax.plot(cols, rows, color="#d62728", linewidth=2, marker="o", markersize=4)
        ax.scatter([cols[-1]], [rows[-1]], color="#d62728", marker="X", s=120, zorder=3)
    ax.set_xticks(range(floor_map.width))
    ax.set_yticks(range(floor_map.height))
    if title is None:
        title = f"Route ({len(path) - 1} steps)" if path else "Floor map"
    ax.set_title(title)
    out_path = Path(out_path)
    save_plot(fig, out_path)
    logger.info("Saved floor map plot to %s", out_path)
    return out_path


def plot_loan_activity(activity_log: pd.DataFrame, out_path: Path) -> Optional[Path]:
    """
    Count plot of activity-log actions per day.

    Returns:
        The path of the saved PNG, or None when the log is empty.
    """
    if activity_log is None or activity_log.empty:
        logger.warning("Activity log is empty; nothing to plot")
        return None
    df = activity_log.copy()
    df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.date
    df = df.dropna(subset=["date"])
    fig, ax = plt.subplots(figsize=(10, 5))
    sns.countplot(data=df, x="date", hue="action", ax=ax)
    ax.set_title("Library activity per day")
    ax.set_xlabel("")
    ax.set_ylabel("Events")
    plt.xticks(rotation=45, ha="right")
    out_path = Path(out_path)
    save_plot(fig, out_path)
    logger.info("Saved activity plot to %s", out_path)
    return out_path
