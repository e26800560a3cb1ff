"""
ASCII charts for weekly volume and weight progress.

Creates terminal-friendly plots for the CLI.
"""

from datetime import date

from .models import WeeklyVolume


def create_weekly_volume_chart(volumes: list[WeeklyVolume], width: int = 30) -> str:
    """
    Bar per muscle group, filled towards its weekly goal.

    Filled cells (█) show completed sets, shaded cells (░) the remainder up
    to the goal.  A ✓ marks groups that reached their goal.
    """
    if not volumes:
        return "No muscle groups to display."

    scale = max(max(v.goal, v.count) for v in volumes) or 1
    label_len = max(len(v.muscle_group) for v in volumes)

    lines = ["Weekly Volume (Sets / Muscle)", "─" * (label_len + width + 14)]
    for v in volumes:
        done = int(round(v.count / scale * width))
        goal = int(round(v.goal / scale * width))
        bar = "█" * done + "░" * max(0, goal - done)
        mark = " ✓" if v.reached else ""
        lines.append(f"{v.muscle_group:>{label_len}} │{bar:<{width}} {v.count}/{v.goal}{mark}")
    return "\n".join(lines)


def create_progress_plot(
    points: list[tuple[date, float]],
    exercise_name: str,
    height: int = 10,
) -> str:
    """
    Plot heaviest weight per session-day as a column chart.

    Args:
        points: [(day, weight)] ascending by day
        exercise_name: Title
        height: Plot height in lines

    Returns:
        ASCII art string
    """
    if not points:
        return f"No data for {exercise_name}."

    weights = [w for _, w in points]
    pad = (max(weights) - min(weights)) * 0.1 or 5.0
    lo = max(0.0, min(weights) - pad)
    hi = max(weights) + pad

    col_w = 7
    lines = [f"{exercise_name}: PR Evolution", ""]
    for row in range(height, 0, -1):
        threshold = lo + (hi - lo) * row / height
        label = f"{threshold:6.1f} ┤" if row in (height, height // 2, 1) else "       │"
        cells = "".join(("  ███  " if w >= threshold else " " * col_w) for w in weights)
        lines.append(label + cells)
    lines.append("       └" + "─" * (col_w * len(points)))
    lines.append("        " + "".join(f"{d.strftime('%m/%d'):^{col_w}}" for d, _ in points))
    lines.append("        " + "".join(f"{w:^{col_w}.1f}" for w in weights))
    return "\n".join(lines)
