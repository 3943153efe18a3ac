# utils/datetime_utils.py

import calendar
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

import pytz

from habitgrid.config import config

DATE_KEY_FORMAT = "%Y-%m-%d"

DateLike = Union[date, datetime, str]


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Текущее время в поясе из конфигурации (или системное локальное)"""
    tz_name = tz_name if tz_name is not None else config.timezone
    if tz_name:
        return datetime.now(pytz.timezone(tz_name))
    return datetime.now()


def today(tz_name: Optional[str] = None) -> date:
    """Сегодняшняя календарная дата пользователя"""
    return now_local(tz_name).date()


def to_date_key(value: Union[date, datetime]) -> str:
    """Ключ даты YYYY-MM-DD из локальных компонентов (без перевода в UTC)"""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date_key(date_str: str) -> date:
    return datetime.strptime(date_str, DATE_KEY_FORMAT).date()


def coerce_date(value: DateLike) -> Optional[date]:
    """Привести date/datetime/ключ к date; None для неверной строки"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date_key(value.strip())
        except ValueError:
            return None
    return None


def days_in_year(year: int) -> int:
    """Количество дней между 1 января года и 1 января следующего"""
    return (date(year + 1, 1, 1) - date(year, 1, 1)).days


def days_in_month(year: int, month: int) -> int:
    """Количество дней в месяце (month 1-12)"""
    return calendar.monthrange(year, month)[1]


def week_start(d: date) -> date:
    """Понедельник недели, содержащей дату"""
    return d - timedelta(days=d.weekday())


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def prev_month(year: int, month: int) -> Tuple[int, int]:
    """(год, месяц) на месяц раньше"""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> Tuple[int, int]:
    """(год, месяц) на месяц позже"""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def shift_month(d: date, delta: int) -> date:
    """Первое число месяца, сдвинутого на delta месяцев"""
    year, month = d.year, d.month
    step = next_month if delta > 0 else prev_month
    for _ in range(abs(delta)):
        year, month = step(year, month)
    return date(year, month, 1)
