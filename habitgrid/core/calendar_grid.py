#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGrid v1.0 - Calendar Grid
Расчет календарных сеток без зависимостей от UI и хранилища

Каждый построитель получает описание вида, функцию чтения отметок
(DateKey -> bool) и текущую дату, и возвращает неизменяемый GridLayout.
Одинаковые входные данные всегда дают равные результаты.

Месяцы нумеруются с 0 (0 = январь), неделя начинается с понедельника.
"""

import logging
import math
from datetime import date, timedelta
from typing import AbstractSet, Callable, List, Optional

from habitgrid.core.models import (
    Cell, GridLayout, MonthGrid, MonthLabel, MonthPanel, RollingYearGrid,
    TodayWeek, ViewMode, WeekAlignedYearGrid, YearGrid, YearOverview
)
from habitgrid.utils import datetime_utils
from habitgrid.utils.datetime_utils import (
    coerce_date, days_in_month, days_in_year, to_date_key, week_start
)

logger = logging.getLogger(__name__)

CompletionLookup = Callable[[str], bool]

# Панели месяцев в обзоре года, 4 x 3
OVERVIEW_ROWS = 4
OVERVIEW_COLUMNS = 3


def _never_completed(date_key: str) -> bool:
    return False


def _make_cell(day: date, in_scope: bool, row: int, col: int,
               lookup: CompletionLookup, today: date) -> Cell:
    key = to_date_key(day)
    if not in_scope:
        # Ячейка-заполнитель хранит свою дату, но не классифицируется
        return Cell(date=key, in_scope=False, completed=False, is_today=False,
                    row=row, col=col, month_boundary=False, is_future=day > today)
    return Cell(
        date=key,
        in_scope=True,
        completed=bool(lookup(key)),
        is_today=day == today,
        row=row,
        col=col,
        month_boundary=day.day == 1,
        is_future=day > today
    )


def _check_month_index(month_index: int):
    if not 0 <= month_index <= 11:
        raise ValueError(f"month_index должен быть в диапазоне 0..11, получено {month_index}")


def is_month_locked(year: int, month_index: int, today: date,
                    unlocked_months: AbstractSet[int] = frozenset()) -> bool:
    """Будущий месяц текущего года закрыт, пока пользователь его не откроет"""
    if year != today.year:
        return False
    return month_index > today.month - 1 and month_index not in unlocked_months


# ===== ПОСТРОИТЕЛИ =====

def build_year_grid(view: YearGrid, lookup: CompletionLookup, today: date) -> GridLayout:
    """Дни года подряд, построчно по view.columns"""
    if view.columns < 1:
        raise ValueError(f"columns должно быть положительным, получено {view.columns}")

    start = date(view.year, 1, 1)
    total = days_in_year(view.year)
    rows = math.ceil(total / view.columns)

    cells: List[Cell] = []
    labels: List[MonthLabel] = []
    for index in range(rows * view.columns):
        day = start + timedelta(days=index)
        row, col = divmod(index, view.columns)
        in_scope = index < total
        cells.append(_make_cell(day, in_scope, row, col, lookup, today))
        if in_scope and day.day == 1:
            labels.append(MonthLabel(month_index=day.month - 1, row=row, column=col))

    return GridLayout(view=view, rows=rows, columns=view.columns,
                      cells=tuple(cells), month_labels=tuple(labels))


def build_week_aligned_year_grid(view: WeekAlignedYearGrid, lookup: CompletionLookup,
                                 today: date) -> GridLayout:
    """Год в 7 строк по дням недели, колонка = неделя с понедельника"""
    first = date(view.year, 1, 1)
    last = date(view.year, 12, 31)
    start = week_start(first)
    end = last + timedelta(days=6 - last.weekday())
    total = (end - start).days + 1

    cells: List[Cell] = []
    labels: List[MonthLabel] = []
    for index in range(total):
        day = start + timedelta(days=index)
        col, row = divmod(index, 7)
        in_scope = first <= day <= last
        cells.append(_make_cell(day, in_scope, row, col, lookup, today))
        if in_scope and day.day == 1:
            labels.append(MonthLabel(month_index=day.month - 1, row=0, column=col))

    return GridLayout(view=view, rows=7, columns=total // 7,
                      cells=tuple(cells), month_labels=tuple(labels))


def build_month_grid(view: MonthGrid, lookup: CompletionLookup, today: date) -> GridLayout:
    _check_month_index(view.month_index)

    month = view.month_index + 1
    first = date(view.year, month, 1)
    leading = first.weekday()
    count = days_in_month(view.year, month)

    cells: List[Cell] = []
    for index in range(leading + count):
        day = first + timedelta(days=index - leading)
        row, col = divmod(index, 7)
        cells.append(_make_cell(day, index >= leading, row, col, lookup, today))

    return GridLayout(view=view, rows=math.ceil(len(cells) / 7), columns=7, cells=tuple(cells))


def build_year_overview(view: YearOverview, lookup: CompletionLookup, today: date) -> GridLayout:
    """
    Двенадцать сеток месяцев

    Обзор - контейнер панелей: rows/columns описывают раскладку панелей,
    ячейки лежат в months[i].layout. Закрытые месяцы тоже рассчитываются.
    """
    panels = []
    for month_index in range(12):
        layout = build_month_grid(MonthGrid(view.year, month_index), lookup, today)
        locked = is_month_locked(view.year, month_index, today, view.unlocked_months)
        panels.append(MonthPanel(month_index=month_index, locked=locked, layout=layout))

    return GridLayout(view=view, rows=OVERVIEW_ROWS, columns=OVERVIEW_COLUMNS,
                      cells=(), months=tuple(panels))


def build_today_week(view: TodayWeek, lookup: CompletionLookup, today: date) -> GridLayout:
    """Неделя с понедельника, содержащая опорную дату, и число выполненных дней"""
    reference = coerce_date(view.reference_date)
    if reference is None:
        raise ValueError(f"Неверная опорная дата: {view.reference_date!r}")

    start = week_start(reference)
    cells = tuple(
        _make_cell(start + timedelta(days=i), True, 0, i, lookup, today)
        for i in range(7)
    )
    completed = sum(1 for cell in cells if cell.completed)
    return GridLayout(view=view, rows=1, columns=7, cells=cells, completed_count=completed)


def build_rolling_year_grid(view: RollingYearGrid, lookup: CompletionLookup,
                            today: date) -> GridLayout:
    """Последние view.days дней до view.end_date включительно, от старых к новым"""
    if view.days < 1:
        raise ValueError(f"days должно быть положительным, получено {view.days}")
    end = coerce_date(view.end_date)
    if end is None:
        raise ValueError(f"Неверная конечная дата: {view.end_date!r}")

    start = end - timedelta(days=view.days - 1)
    cells: List[Cell] = []
    labels: List[MonthLabel] = []
    for index in range(view.days):
        day = start + timedelta(days=index)
        cells.append(_make_cell(day, True, 0, index, lookup, today))
        if day.day == 1:
            labels.append(MonthLabel(month_index=day.month - 1, row=0, column=index))

    return GridLayout(view=view, rows=1, columns=view.days,
                      cells=tuple(cells), month_labels=tuple(labels))


_BUILDERS = {
    ViewMode.YEAR_GRID: build_year_grid,
    ViewMode.WEEK_ALIGNED_YEAR_GRID: build_week_aligned_year_grid,
    ViewMode.MONTH_GRID: build_month_grid,
    ViewMode.YEAR_OVERVIEW: build_year_overview,
    ViewMode.TODAY_WEEK: build_today_week,
    ViewMode.ROLLING_YEAR_GRID: build_rolling_year_grid,
}


def build_grid(view, completion_lookup: Optional[CompletionLookup] = None,
               today: Optional[date] = None) -> GridLayout:
    """Построить сетку для любого поддерживаемого режима"""
    builder = _BUILDERS.get(getattr(view, "kind", None))
    if builder is None:
        raise TypeError(f"Неподдерживаемый вид календаря: {view!r}")

    lookup = completion_lookup or _never_completed
    today = today or datetime_utils.today()
    return builder(view, lookup, today)


class CalendarGridBuilder:
    """Построитель сеток, привязанный к одной функции чтения отметок"""

    def __init__(self, completion_lookup: Optional[CompletionLookup] = None):
        self.completion_lookup = completion_lookup or _never_completed

    def build(self, view, today: Optional[date] = None) -> GridLayout:
        return build_grid(view, self.completion_lookup, today)

    @staticmethod
    def days_in_year(year: int) -> int:
        return days_in_year(year)

    @staticmethod
    def days_in_month(year: int, month_index: int) -> int:
        _check_month_index(month_index)
        return days_in_month(year, month_index + 1)
