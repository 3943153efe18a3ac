# services/data_service.py

import asyncio
import copy
import json
import logging
import shutil
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import pandas as pd

from habitgrid.config import config

logger = logging.getLogger(__name__)

class PersistenceError(Exception):
    """Ошибка сохранения состояния на диск"""
    pass

class PersistenceGateway:
    """
    Контракт сохранения состояния реестра привычек

    commit() вызывается после каждого изменения реестра и не блокирует
    вызывающего: результат возвращается как Future.
    """

    def commit(self, document: Dict[str, Any]) -> Future:
        raise NotImplementedError

    def load(self) -> Dict[str, Any]:
        return {}

class JsonFileGateway(PersistenceGateway):
    """
    Хранилище привычек в JSON файле

    Возможности:
    - Атомарное сохранение через временный файл
    - Ротация бэкапов предыдущих версий
    - Перенос поврежденного файла в директорию бэкапов
    - Метрики сохранений
    """

    def __init__(self, data_file: Optional[Path] = None, backup_dir: Optional[Path] = None,
                 max_backups: Optional[int] = None):
        self.data_file = Path(data_file) if data_file else config.storage.path
        self.backup_dir = Path(backup_dir) if backup_dir else config.storage.backup_dir
        self.max_backups = config.storage.max_backups if max_backups is None else max_backups

        # Один поток: записи применяются в порядке вызовов commit()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="habitgrid-save")
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

        # Метрики
        self.last_save_time: Optional[float] = None
        self.total_commits = 0
        self.failed_commits = 0

    # ===== ЗАГРУЗКА =====

    def load(self) -> Dict[str, Any]:
        """Загрузка документа из файла"""
        if not self.data_file.exists():
            logger.info(f"📂 Файл данных {self.data_file} не найден, начинаем с пустого реестра")
            return {}

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"❌ Ошибка парсинга JSON: {e}")
            self._quarantine_corrupted()
            return {}
        except OSError as e:
            logger.error(f"❌ Ошибка чтения файла данных: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("⚠️ Неверный формат файла данных")
            self._quarantine_corrupted()
            return {}

        logger.info(f"📂 Загружены данные из {self.data_file}")
        return data

    def _quarantine_corrupted(self):
        """Перенос поврежденного файла в бэкапы"""
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            backup_name = f"corrupted_backup_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.json"
            backup_path = self.backup_dir / backup_name
            self.data_file.replace(backup_path)
            logger.warning(f"🔄 Поврежденный файл перемещен в {backup_path}")
        except OSError as e:
            logger.error(f"❌ Ошибка переноса поврежденного файла: {e}")

    # ===== СОХРАНЕНИЕ =====

    def commit(self, document: Dict[str, Any]) -> Future:
        """Запланировать сохранение снимка документа"""
        snapshot = copy.deepcopy(document)
        future = self._executor.submit(self._write, snapshot)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    async def commit_async(self, document: Dict[str, Any]) -> bool:
        """Асинхронное сохранение для asyncio-кода"""
        snapshot = copy.deepcopy(document)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._write, snapshot)

    def _forget(self, future: Future):
        with self._lock:
            self._pending.discard(future)

    def _write(self, document: Dict[str, Any]) -> bool:
        """Синхронная запись документа на диск"""
        start_time = time.time()
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)

            if self.data_file.exists() and self.max_backups > 0:
                self.create_backup()

            # Атомарное сохранение через временный файл
            temp_file = self.data_file.with_suffix('.tmp')
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            temp_file.replace(self.data_file)

            self.last_save_time = time.time()
            self.total_commits += 1
            logger.debug(f"💾 Данные сохранены за {self.last_save_time - start_time:.3f}с")
            return True

        except (OSError, TypeError, ValueError) as e:
            self.failed_commits += 1
            logger.error(f"❌ Ошибка сохранения данных в {self.data_file}: {e}")
            raise PersistenceError(str(e)) from e

    def flush(self, timeout: Optional[float] = None):
        """Дождаться завершения всех запланированных сохранений"""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    # ===== БЭКАПЫ =====

    def create_backup(self) -> Optional[Path]:
        """Копия текущего файла данных в директорию бэкапов"""
        if not self.data_file.exists():
            logger.warning("⚠️ Нет файла данных для создания бэкапа")
            return None

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        backup_name = f"backup_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.json"
        backup_path = self.backup_dir / backup_name
        shutil.copy2(self.data_file, backup_path)
        self.cleanup_old_backups()
        return backup_path

    def cleanup_old_backups(self, keep_count: Optional[int] = None):
        """Удаление старых бэкапов"""
        if keep_count is None:
            keep_count = self.max_backups

        backups = sorted(self.backup_dir.glob("backup_*.json"), key=lambda p: p.name)
        if len(backups) <= keep_count:
            return

        to_delete = backups[:len(backups) - keep_count]
        for backup in to_delete:
            try:
                backup.unlink()
            except OSError as e:
                logger.error(f"❌ Ошибка удаления бэкапа {backup}: {e}")

        logger.debug(f"🗑️ Удалено {len(to_delete)} старых бэкапов")

    def list_backups(self) -> List[Path]:
        """Бэкапы, новые первые"""
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob("*.json"), key=lambda p: p.name, reverse=True)

    # ===== МЕТРИКИ =====

    def get_metrics(self) -> Dict[str, Any]:
        """Получение метрик хранилища"""
        with self._lock:
            pending = len(self._pending)
        return {
            "total_commits": self.total_commits,
            "failed_commits": self.failed_commits,
            "pending_commits": pending,
            "last_save_time": self.last_save_time,
            "data_file_size": self.data_file.stat().st_size if self.data_file.exists() else 0,
            "backups_count": len(self.list_backups())
        }

    def close(self):
        """Корректное закрытие хранилища"""
        self.flush()
        self._executor.shutdown(wait=True)
        logger.info("✅ Хранилище закрыто корректно")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

# ===== ЭКСПОРТ ДАННЫХ =====

EXPORT_COLUMNS = ["habit", "date", "completed", "color"]

def export_history(registry, format: str = "json") -> Optional[bytes]:
    """Экспорт истории привычек в указанном формате"""
    fmt = format.lower()

    if fmt == "json":
        export_data = {
            "export_info": {
                "format": "json",
                "exported_at": datetime.now().isoformat(),
                "habits_count": len(registry)
            },
            "data": registry.to_document()
        }
        json_str = json.dumps(export_data, ensure_ascii=False, indent=2)
        logger.info(f"📤 JSON экспорт подготовлен ({len(registry)} привычек)")
        return json_str.encode('utf-8')

    if fmt == "csv":
        rows = []
        for name in registry.get_habits():
            color = registry.get_color(name)
            for date_key, completed in sorted(registry.history(name).items()):
                rows.append({
                    "habit": name,
                    "date": date_key,
                    "completed": completed,
                    "color": color or ""
                })

        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        logger.info(f"📊 CSV экспорт подготовлен ({len(rows)} записей)")
        return df.to_csv(index=False).encode('utf-8')

    logger.warning(f"⚠️ Неподдерживаемый формат экспорта: {format}")
    return None
