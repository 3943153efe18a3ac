import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

# Ключи документа, занятые метаданными реестра
RESERVED_KEYS = frozenset({"habits", "colors"})

class HabitDocument(BaseModel):
    """Сохраняемое состояние реестра: метаданные отдельно от карт выполнения"""
    habits: List[str] = Field(default_factory=list)
    colors: Dict[str, str] = Field(default_factory=dict)
    completions: Dict[str, Dict[str, bool]] = Field(default_factory=dict)

    @field_validator('habits')
    @classmethod
    def validate_habits(cls, v):
        names = []
        for name in v:
            name = name.strip()
            if not name or name in RESERVED_KEYS or name in names:
                logger.warning(f"⚠️ Пропущено некорректное имя привычки: {name!r}")
                continue
            names.append(name)
        return names

    @model_validator(mode='after')
    def align_with_habits(self):
        listed = set(self.habits)

        orphans = [name for name in self.completions if name not in listed]
        for name in orphans:
            logger.warning(f"⚠️ Данные привычки '{name}' без записи в списке habits отброшены")
            del self.completions[name]

        for name in self.habits:
            self.completions.setdefault(name, {})

        self.colors = {name: color for name, color in self.colors.items() if name in listed}
        return self

    @classmethod
    def from_raw(cls, raw: Optional[Dict[str, Any]]) -> "HabitDocument":
        """Разбор сохраненного JSON, включая старую схему без ключа habits"""
        raw = raw if isinstance(raw, dict) else {}

        if isinstance(raw.get('habits'), list):
            names = [n for n in raw['habits'] if isinstance(n, str)]
        else:
            # Старая схема: порядок привычек = порядок ключей документа
            names = [k for k in raw.keys() if k not in RESERVED_KEYS]

        colors_raw = raw.get('colors')
        colors = {}
        if isinstance(colors_raw, dict):
            colors = {k: v for k, v in colors_raw.items() if isinstance(v, str)}

        completions = {}
        for key, value in raw.items():
            if key in RESERVED_KEYS:
                continue
            name = key.strip()
            if name in completions:
                # Как и в списке habits, побеждает первое вхождение имени
                logger.warning(f"⚠️ Повторные данные привычки '{key}' пропущены")
                continue
            if not isinstance(value, dict):
                logger.warning(f"⚠️ Неверный формат данных привычки '{key}', используется пустая история")
                value = {}
            completions[name] = {
                date_key: flag for date_key, flag in value.items() if isinstance(flag, bool)
            }

        return cls(habits=names, colors=colors, completions=completions)

    def to_raw(self) -> Dict[str, Any]:
        """Плоская форма для JSON: habits, colors и карта на каждую привычку"""
        document: Dict[str, Any] = {
            'habits': list(self.habits),
            'colors': dict(self.colors)
        }
        for name in self.habits:
            document[name] = dict(self.completions.get(name, {}))
        return document
