# services/habit_parser.py

import logging
import re
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

# - [ ] Habit / - [x] Habit / * [ ] Habit
CHECKBOX_RE = re.compile(r'^[-*]\s*\[[ x]\]\s*(.+)$', re.IGNORECASE)
# - Habit / * Habit
BULLET_RE = re.compile(r'^[-*]\s+(.+)$')
# 1. Habit
NUMBERED_RE = re.compile(r'^\d+\.\s+(.+)$')

class HabitParser:
    """Список привычек из markdown файла (только для первичного импорта)"""

    def parse(self, content: str) -> List[str]:
        """Извлечь названия привычек из строк-списков"""
        habits = []
        for line in content.splitlines():
            line = line.strip()
            match = CHECKBOX_RE.match(line) or BULLET_RE.match(line) or NUMBERED_RE.match(line)
            if match:
                habits.append(match.group(1).strip())
        return habits

    def parse_file(self, file_path: Union[str, Path]) -> List[str]:
        path = Path(file_path)
        if not path.is_file():
            logger.info(f"📂 Файл привычек не найден: {path}")
            return []

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"❌ Ошибка чтения файла привычек {path}: {e}")
            return []

        habits = self.parse(content)
        logger.info(f"📋 Найдено привычек в {path}: {len(habits)}")
        return habits
