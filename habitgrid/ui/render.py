# ui/render.py

import calendar
from typing import Any, Dict, List

from habitgrid.core.models import Cell, GridLayout

DAY_ABBR = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]

COMPLETED = "🟩"
EMPTY = "⬜️"
TODAY = "🔲"
FUTURE = "▫️"
PADDING = "  "
LOCKED = "🔒"

# Порог серии (дней) -> значок, от большего к меньшему
STREAK_BADGES = ((30, "🏆"), (7, "🔥"), (3, "✨"))
DEFAULT_BADGE = "🔹"

def progress_bar(done: int, total: int, length: int = 10) -> str:
    """Полоса выполнения: done из total дней"""
    if total <= 0:
        return EMPTY * length + " 0/0"
    done = max(0, min(done, total))
    filled = length * done // total
    percent = done * 100 // total
    return COMPLETED * filled + EMPTY * (length - filled) + f" {done}/{total} ({percent}%)"

def streak_emoji(streak: int) -> str:
    for threshold, badge in STREAK_BADGES:
        if streak >= threshold:
            return badge
    return DEFAULT_BADGE

def cell_symbol(cell: Cell) -> str:
    if not cell.in_scope:
        return PADDING
    if cell.completed:
        return COMPLETED
    if cell.is_today:
        return TODAY
    if cell.is_future:
        return FUTURE
    return EMPTY

def render_grid(layout: GridLayout) -> str:
    """Сетка ячеек по их row/col; обзор года выводится по месяцам"""
    if layout.months:
        return render_year_overview(layout)

    matrix = [[PADDING] * layout.columns for _ in range(layout.rows)]
    for cell in layout.cells:
        matrix[cell.row][cell.col] = cell_symbol(cell)
    return "\n".join("".join(row).rstrip() for row in matrix)

def render_month(layout: GridLayout, title: str = "") -> str:
    lines = [title] if title else []
    lines.append(" ".join(DAY_ABBR))
    lines.append(render_grid(layout))
    return "\n".join(lines)

def render_year_overview(layout: GridLayout) -> str:
    """Двенадцать месяцев подряд; закрытые месяцы помечены замком"""
    blocks: List[str] = []
    for panel in layout.months:
        title = calendar.month_name[panel.month_index + 1]
        if panel.locked:
            blocks.append(f"{title} {LOCKED}")
        else:
            blocks.append(render_month(panel.layout, title))
    return "\n\n".join(blocks)

def render_week(layout: GridLayout) -> str:
    done = layout.completed_count or 0
    return render_grid(layout) + "\n" + progress_bar(done, len(layout.cells), length=len(layout.cells))

def render_summary(summary: Dict[str, Any]) -> str:
    """Карточка привычки из HabitTrackerService.habit_summary"""
    streak = summary.get("streak", 0)
    lines = [
        f"{streak_emoji(streak)} {summary['name']}",
        f"Серия: {streak} дн. (рекорд: {summary.get('longest_streak', 0)})",
        f"Неделя: {progress_bar(summary.get('completed_this_week', 0), 7, length=7)}",
        f"30 дней: {progress_bar(summary.get('completed_last_30_days', 0), 30)}"
    ]
    return "\n".join(lines)
