"""Chart helpers rendering habit histories to PNG files."""

from __future__ import annotations

from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.figure import Figure

from .services.habits import HabitStats
from .services.reports import HeatmapCell

BAR_COLOR = "#3B82F6"
HEATMAP_CMAP = LinearSegmentedColormap.from_list("habit", ["#EBEDF0", "#22C55E"])


def _save(fig: Figure, output_path: Path | None) -> Path:
    """Write ``fig`` to ``output_path`` (or a temp file) and close it."""
    if output_path is None:
        with NamedTemporaryFile(delete=False, suffix=".png") as tmp:
            output_path = Path(tmp.name)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, bbox_inches="tight", dpi=100)
    plt.close(fig)
    return output_path


def _placeholder(message: str, output_path: Path | None) -> Path:
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=12, color="#999")
    ax.axis("off")
    return _save(fig, output_path)


def completion_history_png(
    stats: HabitStats, *, period: str = "weekly", output_path: Path | None = None
) -> Path:
    """Render the trailing weekly or monthly completion counts as a bar chart."""

    if period not in {"weekly", "monthly"}:
        raise ValueError(f"period must be 'weekly' or 'monthly', got {period!r}")

    buckets = stats.weekly_stats if period == "weekly" else stats.monthly_stats
    if not buckets or not any(b.completions for b in buckets):
        return _placeholder("No completions yet\nMark a habit done to see history", output_path)

    labels = [b.label for b in buckets]
    counts = [b.completions for b in buckets]
    positions = list(range(len(labels)))

    fig, ax = plt.subplots(figsize=(10, 5))
    bars = ax.bar(positions, counts, color=BAR_COLOR, width=0.6)
    for bar, count in zip(bars, counts):
        if count:
            ax.annotate(
                str(count),
                (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                textcoords="offset points",
                xytext=(0, 4),
                ha="center",
                fontsize=8,
            )

    ax.set_xticks(positions)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_ylabel("Completions")
    ax.set_title(f"{period.capitalize()} completions", fontsize=14, fontweight="bold", pad=12)
    ax.grid(True, axis="y", linestyle="--", alpha=0.3)
    ax.set_axisbelow(True)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    fig.tight_layout()
    return _save(fig, output_path)


def heatmap_png(grid: Sequence[Sequence[HeatmapCell]], *, output_path: Path | None = None) -> Path:
    """Render a week-by-day activity heatmap; rows are weeks, oldest at the top."""

    if not grid or not any(cell.total for row in grid for cell in row):
        return _placeholder("No activity recorded", output_path)

    values = [[cell.intensity for cell in row] for row in grid]
    fig, ax = plt.subplots(figsize=(4, max(2.5, len(grid) * 0.35)))
    ax.imshow(values, cmap=HEATMAP_CMAP, vmin=0.0, vmax=1.0, aspect="equal")

    ax.set_yticks(range(len(grid)))
    ax.set_yticklabels([row[0].day.strftime("%b %d") for row in grid], fontsize=7)
    ax.set_xticks(range(len(grid[0])))
    ax.set_xticklabels([cell.day.strftime("%a")[0] for cell in grid[-1]], fontsize=8)
    ax.set_title("Activity", fontsize=12, fontweight="bold")
    for spine in ax.spines.values():
        spine.set_visible(False)
    return _save(fig, output_path)


__all__ = ["completion_history_png", "heatmap_png"]
