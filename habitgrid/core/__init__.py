#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGrid v1.0 - Core Package
Реестр привычек, календарные сетки и навигация
"""

from .models import (
    ViewMode,
    ValidationError,
    HabitRecord,
    Cell,
    MonthLabel,
    MonthPanel,
    GridLayout,
    YearGrid,
    WeekAlignedYearGrid,
    MonthGrid,
    YearOverview,
    TodayWeek,
    RollingYearGrid
)

from .registry import HabitRegistry

from .calendar_grid import (
    CalendarGridBuilder,
    build_grid,
    is_month_locked
)

from .navigation import NavigationState

__all__ = [
    # Models
    'ViewMode',
    'ValidationError',
    'HabitRecord',
    'Cell',
    'MonthLabel',
    'MonthPanel',
    'GridLayout',

    # Views
    'YearGrid',
    'WeekAlignedYearGrid',
    'MonthGrid',
    'YearOverview',
    'TodayWeek',
    'RollingYearGrid',

    # Components
    'HabitRegistry',
    'CalendarGridBuilder',
    'build_grid',
    'is_month_locked',
    'NavigationState'
]
