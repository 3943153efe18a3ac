# services/tracker_service.py

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

from habitgrid.config import TrackerConfig, config as default_config
from habitgrid.core.calendar_grid import build_grid
from habitgrid.core.models import GridLayout, RollingYearGrid, TodayWeek
from habitgrid.core.navigation import NavigationState
from habitgrid.core.registry import HabitRegistry
from habitgrid.services.data_service import JsonFileGateway, PersistenceGateway, export_history
from habitgrid.services.habit_parser import HabitParser
from habitgrid.ui.render import render_summary
from habitgrid.utils import datetime_utils
from habitgrid.utils.datetime_utils import DateLike

logger = logging.getLogger(__name__)

class HabitTrackerService:
    """
    Сервис трекера привычек

    Обеспечивает:
    - Загрузку реестра из хранилища и первичный импорт из файла привычек
    - Действия пользователя с автоматическим восстановлением навигации
    - Построение сеток для выбранной привычки
    - Экспорт и корректное закрытие хранилища
    """

    def __init__(self, cfg: Optional[TrackerConfig] = None,
                 gateway: Optional[PersistenceGateway] = None,
                 parser: Optional[HabitParser] = None):
        self.config = cfg or default_config
        self.gateway = gateway or JsonFileGateway(
            data_file=self.config.storage.path,
            backup_dir=self.config.storage.backup_dir,
            max_backups=self.config.storage.max_backups
        )
        self.parser = parser or HabitParser()
        self.registry = HabitRegistry(
            gateway=self.gateway,
            streak_horizon=self.config.habits.streak_horizon_days
        )
        self.navigation = NavigationState.create()
        self.initialized = False

    def initialize(self, today: Optional[date] = None) -> bool:
        """Загрузка данных и подготовка навигации"""
        try:
            logger.info("🔧 Инициализация HabitTrackerService...")

            self.registry.load_document(self.gateway.load())
            if len(self.registry) == 0:
                self.bootstrap_from_file()

            self.navigation = NavigationState.create(self.registry.get_habits(), today=today)
            self.initialized = True

            logger.info(f"✅ HabitTrackerService инициализирован. Привычек: {len(self.registry)}")
            return True

        except Exception as e:
            logger.error(f"❌ Ошибка инициализации HabitTrackerService: {e}")
            return False

    def bootstrap_from_file(self, file_path: Optional[Union[str, Path]] = None) -> int:
        """Первичный импорт списка привычек, только для пустого реестра"""
        if len(self.registry) > 0:
            logger.debug("Реестр не пуст, импорт из файла пропущен")
            return 0

        path = file_path or self.config.habits.habits_file_path
        return self.registry.import_habits(self.parser.parse_file(path))

    # ===== ДЕЙСТВИЯ ПОЛЬЗОВАТЕЛЯ =====

    def add_habit(self, name: str) -> bool:
        added = self.registry.add_habit(name)
        self.navigation.sync_with_habits(self.registry.get_habits())
        return added

    def remove_habit(self, name: str) -> bool:
        removed = self.registry.remove_habit(name)
        self.navigation.sync_with_habits(self.registry.get_habits())
        return removed

    def rename_habit(self, old_name: str, new_name: str) -> bool:
        renamed = self.registry.rename_habit(old_name, new_name)
        if renamed and old_name not in self.registry:
            # Выбор и курсор месяца переходят на новое имя
            new_name = new_name.strip()
            if self.navigation.selected_habit == old_name:
                self.navigation.selected_habit = new_name
            cursor = self.navigation.habit_month_cursors.pop(old_name, None)
            if cursor is not None:
                self.navigation.habit_month_cursors[new_name] = cursor
        self.navigation.sync_with_habits(self.registry.get_habits())
        return renamed

    def toggle(self, name: str, date_value: Optional[DateLike] = None) -> bool:
        """Отметить/снять отметку (по умолчанию за сегодня)"""
        if date_value is None:
            date_value = datetime_utils.today()
        return self.registry.toggle_habit(name, date_value)

    def select_habit(self, name: str) -> bool:
        return self.navigation.select_habit(name, self.registry.get_habits())

    # ===== ПОСТРОЕНИЕ СЕТОК =====

    def _habit(self, habit: Optional[str]) -> Optional[str]:
        if habit is not None:
            return habit
        return self.navigation.sync_with_habits(self.registry.get_habits())

    def build_view(self, view, habit: Optional[str] = None,
                   today: Optional[date] = None) -> GridLayout:
        habit = self._habit(habit)
        lookup = self.registry.completion_lookup(habit) if habit else None
        return build_grid(view, lookup, today)

    def month_grid(self, habit: Optional[str] = None, today: Optional[date] = None) -> GridLayout:
        habit = self._habit(habit)
        return self.build_view(self.navigation.month_view(habit), habit, today)

    def year_overview(self, habit: Optional[str] = None, today: Optional[date] = None) -> GridLayout:
        return self.build_view(self.navigation.year_overview_view(), habit, today)

    def year_grid(self, columns: int, habit: Optional[str] = None,
                  today: Optional[date] = None) -> GridLayout:
        return self.build_view(self.navigation.year_grid_view(columns), habit, today)

    def week_aligned_year_grid(self, habit: Optional[str] = None,
                               today: Optional[date] = None) -> GridLayout:
        return self.build_view(self.navigation.week_aligned_view(), habit, today)

    def today_week(self, habit: Optional[str] = None, today: Optional[date] = None) -> GridLayout:
        today = today or datetime_utils.today()
        return self.build_view(TodayWeek(reference_date=today), habit, today)

    def rolling_year(self, habit: Optional[str] = None, today: Optional[date] = None) -> GridLayout:
        today = today or datetime_utils.today()
        view = RollingYearGrid(end_date=today, days=self.config.habits.rolling_window_days)
        return self.build_view(view, habit, today)

    def habit_summary(self, name: str, today: Optional[date] = None) -> Dict[str, Any]:
        """Сводка по привычке для отображения"""
        today = today or datetime_utils.today()
        week = self.today_week(name, today)
        last_30 = sum(
            1 for offset in range(30)
            if self.registry.is_completed(name, today - timedelta(days=offset))
        )
        return {
            "name": name,
            "color": self.registry.get_color(name),
            "streak": self.registry.streak(name, today),
            "longest_streak": self.registry.longest_streak(name),
            "completed_this_week": week.completed_count,
            "completed_last_30_days": last_30
        }

    def summary_card(self, name: str, today: Optional[date] = None) -> str:
        """Текстовая карточка привычки: серия, неделя, 30 дней"""
        return render_summary(self.habit_summary(name, today))

    # ===== СЕРВИСНЫЕ МЕТОДЫ =====

    def export(self, format: str = "json") -> Optional[bytes]:
        return export_history(self.registry, format)

    def health_check(self) -> Dict[str, Any]:
        """Проверка состояния сервиса"""
        health = {
            "status": "healthy" if self.initialized else "warning",
            "habits_count": len(self.registry)
        }
        if isinstance(self.gateway, JsonFileGateway):
            metrics = self.gateway.get_metrics()
            health["storage"] = metrics
            if metrics["failed_commits"]:
                health["status"] = "error"
        return health

    def close(self):
        """Корректное закрытие сервиса"""
        logger.info("🛑 Закрытие HabitTrackerService...")
        close = getattr(self.gateway, "close", None)
        if close is not None:
            close()
        self.initialized = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
