from pathlib import Path

import pytest

from habitgrid.config import Environment, LogLevel, TrackerConfig


def test_defaults(monkeypatch):
    for name in ["ENVIRONMENT", "DATA_DIR", "DATA_FILE", "BACKUP_DIR", "MAX_BACKUPS",
                 "HABITS_FILE_PATH", "TIMEZONE", "LOG_LEVEL", "LOG_TO_FILE"]:
        monkeypatch.delenv(name, raising=False)

    cfg = TrackerConfig()
    assert cfg.environment == Environment.DEVELOPMENT
    assert cfg.storage.path == Path("data") / "habits_data.json"
    assert cfg.storage.max_backups == 10
    assert cfg.habits.habits_file_path == Path("habits.md")
    assert cfg.timezone is None
    assert cfg.log_level == LogLevel.INFO
    assert cfg.is_development()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DATA_FILE", "tracker.json")
    monkeypatch.setenv("MAX_BACKUPS", "3")
    monkeypatch.setenv("TIMEZONE", "Europe/Moscow")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = TrackerConfig()
    assert cfg.environment == Environment.TESTING
    assert cfg.storage.path == tmp_path / "tracker.json"
    assert cfg.storage.max_backups == 3
    assert cfg.timezone == "Europe/Moscow"
    assert cfg.log_level == LogLevel.DEBUG
    assert cfg.to_dict()["timezone"] == "Europe/Moscow"


@pytest.mark.parametrize("name,value", [
    ("TIMEZONE", "Mars/Olympus"),
    ("MAX_BACKUPS", "-1"),
    ("DATA_FILE", "habits.txt"),
])
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match="Ошибки конфигурации"):
        TrackerConfig()


def test_logging_config_file_handler(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_TO_FILE", "true")
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.delenv("ENVIRONMENT", raising=False)

    logging_config = TrackerConfig().get_logging_config()
    assert logging_config["loggers"][""]["handlers"] == ["console", "file"]
    assert logging_config["handlers"]["file"]["filename"] == str(tmp_path / "habitgrid_development.log")


def test_logging_config_console_only(monkeypatch):
    monkeypatch.delenv("LOG_TO_FILE", raising=False)
    logging_config = TrackerConfig().get_logging_config()
    assert "file" not in logging_config["handlers"]


def test_setup_logging_creates_log_dir(monkeypatch, tmp_path):
    from habitgrid.utils.logger import setup_logging

    monkeypatch.setenv("LOG_TO_FILE", "true")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))

    logger = setup_logging(TrackerConfig())
    assert logger.name == "habitgrid"
    assert (tmp_path / "logs").is_dir()

    # Вернуть логирование только в консоль
    monkeypatch.delenv("LOG_TO_FILE")
    setup_logging(TrackerConfig())
