# services/__init__.py

"""
Модуль сервисов HabitGrid

Хранилище, разбор списка привычек и сервис трекера.
"""

import logging
from typing import Optional

from habitgrid.config import TrackerConfig
from .data_service import JsonFileGateway, PersistenceError, PersistenceGateway, export_history
from .habit_parser import HabitParser
from .tracker_service import HabitTrackerService

logger = logging.getLogger(__name__)

# Глобальный экземпляр сервиса
_tracker_service: Optional[HabitTrackerService] = None

def get_tracker_service() -> HabitTrackerService:
    """Получить глобальный сервис трекера (инициализируется при первом вызове)"""
    global _tracker_service
    if _tracker_service is None:
        initialize_tracker_service()
    return _tracker_service

def initialize_tracker_service(cfg: Optional[TrackerConfig] = None) -> HabitTrackerService:
    """Инициализация глобального сервиса трекера"""
    global _tracker_service
    if _tracker_service is not None:
        _tracker_service.close()
    _tracker_service = HabitTrackerService(cfg)
    _tracker_service.initialize()
    return _tracker_service

def close_tracker_service():
    """Закрытие глобального сервиса трекера"""
    global _tracker_service
    if _tracker_service:
        _tracker_service.close()
        _tracker_service = None

__all__ = [
    'PersistenceGateway',
    'PersistenceError',
    'JsonFileGateway',
    'export_history',
    'HabitParser',
    'HabitTrackerService',
    'get_tracker_service',
    'initialize_tracker_service',
    'close_tracker_service'
]
