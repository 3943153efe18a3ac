# core/navigation.py

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Optional, Set

from habitgrid.core.calendar_grid import is_month_locked
from habitgrid.core.models import MonthGrid, WeekAlignedYearGrid, YearGrid, YearOverview
from habitgrid.utils import datetime_utils
from habitgrid.utils.datetime_utils import first_of_month, shift_month

logger = logging.getLogger(__name__)

@dataclass
class NavigationState:
    """
    Состояние навигации по календарю на время сессии

    Не сохраняется: выбранный год, курсор месяца (общий и для отдельных
    привычек), выбранная привычка и разблокированные будущие месяцы.
    """
    selected_year: int
    global_selected_month: date
    selected_habit: Optional[str] = None
    habit_month_cursors: Dict[str, date] = field(default_factory=dict)
    unlocked_months: Set[int] = field(default_factory=set)  # 0-11

    @classmethod
    def create(cls, habits: Iterable[str] = (), today: Optional[date] = None) -> "NavigationState":
        """Новое состояние для сессии"""
        today = today or datetime_utils.today()
        habits = list(habits)
        return cls(
            selected_year=today.year,
            global_selected_month=first_of_month(today),
            selected_habit=habits[0] if habits else None
        )

    # ===== ВЫБОР ПРИВЫЧКИ =====

    def sync_with_habits(self, habits: Iterable[str]) -> Optional[str]:
        """Вернуться к первой привычке, если выбранной больше нет в реестре"""
        habits = list(habits)

        if self.selected_habit not in habits:
            previous = self.selected_habit
            self.selected_habit = habits[0] if habits else None
            if previous is not None:
                logger.debug(f"Выбранная привычка '{previous}' исчезла, выбрана {self.selected_habit!r}")

        for name in [n for n in self.habit_month_cursors if n not in habits]:
            del self.habit_month_cursors[name]

        return self.selected_habit

    def select_habit(self, name: str, habits: Iterable[str]) -> bool:
        if name not in list(habits):
            return False
        self.selected_habit = name
        return True

    # ===== КУРСОРЫ МЕСЯЦА И ГОДА =====

    def month_cursor(self, habit: Optional[str] = None) -> date:
        if habit is not None and habit in self.habit_month_cursors:
            return self.habit_month_cursors[habit]
        return self.global_selected_month

    def shift_month(self, delta: int, habit: Optional[str] = None) -> date:
        """Сдвинуть курсор месяца (для привычки, если указана, иначе общий)"""
        cursor = shift_month(self.month_cursor(habit), delta)
        if habit is None:
            self.global_selected_month = cursor
        else:
            self.habit_month_cursors[habit] = cursor
        return cursor

    def reset_month_cursor(self, habit: str):
        self.habit_month_cursors.pop(habit, None)

    def shift_year(self, delta: int) -> int:
        self.selected_year += delta
        return self.selected_year

    def select_month_from_overview(self, month_index: int, today: Optional[date] = None) -> date:
        """Клик по месяцу в обзоре года; будущий месяц разблокируется"""
        if not 0 <= month_index <= 11:
            raise ValueError(f"month_index must be in 0..11, got {month_index}")

        today = today or datetime_utils.today()
        self.global_selected_month = date(self.selected_year, month_index + 1, 1)
        if self.selected_habit is not None:
            self.habit_month_cursors.pop(self.selected_habit, None)

        if self.global_selected_month > first_of_month(today):
            self.unlocked_months.add(month_index)

        return self.global_selected_month

    def is_month_locked(self, year: int, month_index: int, today: Optional[date] = None) -> bool:
        today = today or datetime_utils.today()
        return is_month_locked(year, month_index, today, self.unlocked_months)

    # ===== ВИДЫ ДЛЯ ПОСТРОИТЕЛЯ СЕТКИ =====

    def year_overview_view(self) -> YearOverview:
        return YearOverview(year=self.selected_year, unlocked_months=frozenset(self.unlocked_months))

    def month_view(self, habit: Optional[str] = None) -> MonthGrid:
        cursor = self.month_cursor(habit)
        return MonthGrid(year=cursor.year, month_index=cursor.month - 1)

    def year_grid_view(self, columns: int) -> YearGrid:
        return YearGrid(year=self.selected_year, columns=columns)

    def week_aligned_view(self) -> WeekAlignedYearGrid:
        return WeekAlignedYearGrid(year=self.selected_year)
