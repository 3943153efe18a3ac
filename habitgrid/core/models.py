#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGrid v1.0 - Core Data Models
Модели данных привычек и календарной сетки

Версия: 1.0.0
Дата: 2026-10-16
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple
import logging

from habitgrid.shared.models import RESERVED_KEYS

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class ViewMode(Enum):
    """Режимы отображения календаря"""
    YEAR_GRID = "year_grid"
    WEEK_ALIGNED_YEAR_GRID = "week_aligned_year_grid"
    MONTH_GRID = "month_grid"
    YEAR_OVERVIEW = "year_overview"
    TODAY_WEEK = "today_week"
    ROLLING_YEAR_GRID = "rolling_year_grid"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Ошибка валидации данных"""
    pass

def validate_habit_name(name: str, field_name: str = "name") -> str:
    """Валидация имени привычки, возвращает обрезанное имя"""
    if not isinstance(name, str):
        raise ValidationError(f"{field_name} должен быть строкой")

    name = name.strip()
    if not name:
        raise ValidationError(f"{field_name} не может быть пустым")

    if name in RESERVED_KEYS:
        raise ValidationError(f"{field_name} '{name}' зарезервировано")

    return name

# ===== HABIT MODELS =====

@dataclass
class HabitRecord:
    """Привычка с историей выполнения"""
    name: str
    completions: Dict[str, bool] = field(default_factory=dict)  # YYYY-MM-DD -> bool
    color: Optional[str] = None  # HEX цвет для UI

    def is_completed_on(self, date_key: str) -> bool:
        return bool(self.completions.get(date_key, False))

    def toggle(self, date_key: str) -> bool:
        """Переключить отметку за дату и вернуть новое значение"""
        value = not self.completions.get(date_key, False)
        self.completions[date_key] = value
        return value

    def renamed(self, new_name: str) -> "HabitRecord":
        """Та же история и цвет под новым именем"""
        return HabitRecord(name=new_name, completions=self.completions, color=self.color)

# ===== GRID MODELS =====

@dataclass(frozen=True)
class Cell:
    """Ячейка календарной сетки"""
    date: str
    in_scope: bool
    completed: bool
    is_today: bool
    row: int
    col: int
    month_boundary: bool
    is_future: bool = False

@dataclass(frozen=True)
class MonthLabel:
    """Метка начала месяца в годовой сетке"""
    month_index: int  # 0-11
    row: int
    column: int

@dataclass(frozen=True)
class YearGrid:
    """Год подряд, построчно в заданное число колонок"""
    kind: ClassVar[ViewMode] = ViewMode.YEAR_GRID
    year: int
    columns: int

@dataclass(frozen=True)
class WeekAlignedYearGrid:
    """Год в 7 строк (дни недели), колонка = неделя"""
    kind: ClassVar[ViewMode] = ViewMode.WEEK_ALIGNED_YEAR_GRID
    year: int

@dataclass(frozen=True)
class MonthGrid:
    kind: ClassVar[ViewMode] = ViewMode.MONTH_GRID
    year: int
    month_index: int  # 0-11

@dataclass(frozen=True)
class YearOverview:
    kind: ClassVar[ViewMode] = ViewMode.YEAR_OVERVIEW
    year: int
    unlocked_months: FrozenSet[int] = frozenset()

@dataclass(frozen=True)
class TodayWeek:
    kind: ClassVar[ViewMode] = ViewMode.TODAY_WEEK
    reference_date: date

@dataclass(frozen=True)
class RollingYearGrid:
    """Скользящее окно последних N дней, заканчивающееся end_date"""
    kind: ClassVar[ViewMode] = ViewMode.ROLLING_YEAR_GRID
    end_date: date
    days: int = 365

@dataclass(frozen=True)
class MonthPanel:
    """Месяц в обзоре года"""
    month_index: int
    locked: bool
    layout: "GridLayout"

@dataclass(frozen=True)
class GridLayout:
    """Результат построения сетки"""
    view: Any
    rows: int
    columns: int
    cells: Tuple[Cell, ...]
    month_labels: Tuple[MonthLabel, ...] = ()
    months: Tuple[MonthPanel, ...] = ()
    completed_count: Optional[int] = None

    @property
    def in_scope_cells(self) -> Tuple[Cell, ...]:
        return tuple(c for c in self.cells if c.in_scope)

    @property
    def leading_padding(self) -> int:
        """Количество пустых ячеек до первого дня периода"""
        count = 0
        for cell in self.cells:
            if cell.in_scope:
                break
            count += 1
        return count
