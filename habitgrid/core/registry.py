#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGrid v1.0 - Habit Registry
Хранилище привычек: порядок, история выполнения, цвета, серии

Все операции синхронные. После каждого успешного изменения состояние
отправляется в хранилище (gateway.commit), результат сохранения не
ожидается и ошибки сохранения только логируются.
"""

import logging
from concurrent.futures import Future
from datetime import date, timedelta
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional

from habitgrid.core.models import HabitRecord, ValidationError, validate_habit_name
from habitgrid.shared.models import HabitDocument
from habitgrid.utils.datetime_utils import DateLike, coerce_date, to_date_key, today

logger = logging.getLogger(__name__)

STREAK_HORIZON_DAYS = 365

class HabitRegistry:
    """Упорядоченный реестр привычек с историей выполнения"""

    def __init__(self, gateway=None, streak_horizon: int = STREAK_HORIZON_DAYS):
        # gateway: объект с методом commit(document) -> Future (PersistenceGateway)
        self.gateway = gateway
        self.streak_horizon = streak_horizon
        self.last_commit: Optional[Future] = None
        self._order: List[str] = []
        self._records: Dict[str, HabitRecord] = {}

    # ===== ЗАГРУЗКА И СЕРИАЛИЗАЦИЯ =====

    @classmethod
    def from_document(cls, raw: Optional[Dict[str, Any]], gateway=None, **kwargs) -> "HabitRegistry":
        registry = cls(gateway=gateway, **kwargs)
        registry.load_document(raw)
        return registry

    def load_document(self, raw: Optional[Dict[str, Any]]):
        """Заменить состояние реестра данными документа (без сохранения)"""
        document = HabitDocument.from_raw(raw)
        self._order = list(document.habits)
        self._records = {
            name: HabitRecord(
                name=name,
                completions=dict(document.completions.get(name, {})),
                color=document.colors.get(name)
            )
            for name in document.habits
        }
        logger.info(f"📂 Загружено привычек: {len(self._order)}")

    def to_document(self) -> Dict[str, Any]:
        document = HabitDocument(
            habits=list(self._order),
            colors={name: r.color for name, r in self._records.items() if r.color},
            completions={name: dict(r.completions) for name, r in self._records.items()}
        )
        return document.to_raw()

    def _commit(self) -> Optional[Future]:
        if self.gateway is None:
            return None

        try:
            future = self.gateway.commit(self.to_document())
        except Exception as e:
            logger.error(f"❌ Не удалось запланировать сохранение: {e}")
            return None

        if future is not None:
            future.add_done_callback(self._on_commit_done)
        self.last_commit = future
        return future

    @staticmethod
    def _on_commit_done(future: Future):
        if future.cancelled():
            logger.warning("⚠️ Сохранение отменено")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"❌ Изменения применены в памяти, но не сохранены: {error}")

    # ===== ЧТЕНИЕ =====

    def get_habits(self) -> List[str]:
        return list(self._order)

    def has_habit(self, name: str) -> bool:
        return name in self._records

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._order)

    def is_completed(self, name: str, date_value: DateLike) -> bool:
        """Выполнена ли привычка в дату; False для неизвестных привычек и дат"""
        record = self._records.get(name)
        if record is None:
            return False
        day = coerce_date(date_value)
        if day is None:
            return False
        return record.is_completed_on(to_date_key(day))

    def completion_lookup(self, name: str) -> Callable[[str], bool]:
        """Функция чтения для построителя сетки"""
        return partial(self.is_completed, name)

    def history(self, name: str) -> Dict[str, bool]:
        record = self._records.get(name)
        return dict(record.completions) if record else {}

    def completed_dates(self, name: str) -> List[str]:
        return sorted(k for k, v in self.history(name).items() if v)

    def get_color(self, name: str) -> Optional[str]:
        record = self._records.get(name)
        return record.color if record else None

    def streak(self, name: str, as_of: Optional[DateLike] = None) -> int:
        """Текущая серия: подряд выполненные дни назад от as_of включительно"""
        record = self._records.get(name)
        if record is None:
            return 0

        start = coerce_date(as_of) if as_of is not None else today()
        if start is None:
            return 0

        streak = 0
        for offset in range(self.streak_horizon):
            day = start - timedelta(days=offset)
            if not record.is_completed_on(to_date_key(day)):
                break
            streak += 1
        return streak

    def longest_streak(self, name: str) -> int:
        """Самая длинная серия выполнения за всю историю"""
        days = sorted(date.fromisoformat(k) for k in self.completed_dates(name))
        if not days:
            return 0

        max_streak = current = 1
        for previous, day in zip(days, days[1:]):
            if day == previous + timedelta(days=1):
                current += 1
                max_streak = max(max_streak, current)
            else:
                current = 1
        return max_streak

    # ===== ИЗМЕНЕНИЯ =====

    def _add(self, name: str) -> bool:
        try:
            name = validate_habit_name(name)
        except ValidationError as e:
            logger.warning(f"⚠️ Привычка не добавлена: {e}")
            return False

        if name in self._records:
            logger.warning(f"⚠️ Привычка '{name}' уже существует")
            return False

        self._order.append(name)
        self._records[name] = HabitRecord(name=name)
        return True

    def add_habit(self, name: str) -> bool:
        """Добавить привычку в конец списка"""
        if not self._add(name):
            return False
        logger.info(f"✅ Привычка добавлена: {name.strip()}")
        self._commit()
        return True

    def import_habits(self, names: Iterable[str]) -> int:
        """Добавить несколько привычек с одним сохранением"""
        added = sum(1 for name in names if self._add(name))
        if added:
            logger.info(f"📥 Импортировано привычек: {added}")
            self._commit()
        return added

    def remove_habit(self, name: str) -> bool:
        """Удалить привычку вместе с историей и цветом"""
        if name not in self._records:
            logger.debug(f"Привычка для удаления не найдена: {name}")
            return False

        self._order.remove(name)
        del self._records[name]
        logger.info(f"🗑️ Привычка удалена: {name}")
        self._commit()
        return True

    def rename_habit(self, old_name: str, new_name: str) -> bool:
        """Переименовать привычку с сохранением позиции, истории и цвета"""
        if old_name not in self._records:
            logger.debug(f"Привычка для переименования не найдена: {old_name}")
            return False

        try:
            new_name = validate_habit_name(new_name, field_name="new_name")
        except ValidationError as e:
            logger.warning(f"⚠️ Привычка не переименована: {e}")
            return False

        if new_name == old_name:
            return True

        if new_name in self._records:
            logger.warning(f"⚠️ Привычка '{new_name}' уже существует")
            return False

        index = self._order.index(old_name)
        record = self._records.pop(old_name)
        self._records[new_name] = record.renamed(new_name)
        self._order[index] = new_name

        logger.info(f"✏️ Привычка переименована: {old_name} -> {new_name}")
        self._commit()
        return True

    def toggle_habit(self, name: str, date_value: DateLike) -> bool:
        """Переключить отметку за дату; неизвестные привычки отклоняются"""
        record = self._records.get(name)
        if record is None:
            logger.warning(f"⚠️ Отметка отклонена, привычка не найдена: {name}")
            return False

        day = coerce_date(date_value)
        if day is None:
            logger.warning(f"⚠️ Отметка отклонена, неверная дата: {date_value!r}")
            return False

        value = record.toggle(to_date_key(day))
        self._commit()
        return value

    def set_color(self, name: str, color: Optional[str]) -> bool:
        """Задать цвет привычки (None сбрасывает цвет)"""
        record = self._records.get(name)
        if record is None:
            return False

        if color is not None and not isinstance(color, str):
            logger.warning(f"⚠️ Цвет отклонен, ожидается строка: {color!r}")
            return False

        record.color = color or None
        self._commit()
        return True
