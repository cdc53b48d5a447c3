from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from backend.core import config

PT_MONTHS = (
    'janeiro',
    'fevereiro',
    'março',
    'abril',
    'maio',
    'junho',
    'julho',
    'agosto',
    'setembro',
    'outubro',
    'novembro',
    'dezembro',
)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_hour(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def format_slot(value: datetime, tz_name: str | None = None) -> str:
    """Render a stored UTC slot as e.g. ``dia 01 de março, às 10:00h``."""
    local = value.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz_name or config.APP_TIMEZONE))
    month = PT_MONTHS[local.month - 1]
    return f'dia {local.day:02d} de {month}, às {local.hour}:{local.minute:02d}h'


def local_hour_slots(day: date, hours, tz_name: str | None = None) -> list[datetime]:
    """Start of each given local hour on ``day``, as naive UTC datetimes."""
    tz = ZoneInfo(tz_name or config.APP_TIMEZONE)
    return [to_naive_utc(datetime.combine(day, time(hour), tzinfo=tz)) for hour in hours]


def local_day_bounds(day: date, tz_name: str | None = None) -> tuple[datetime, datetime]:
    tz = ZoneInfo(tz_name or config.APP_TIMEZONE)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return to_naive_utc(start), to_naive_utc(end)
