from datetime import date, datetime, timedelta
from typing import Optional

from config.settings import CURRENCY_SYMBOL


def format_currency(value: int) -> str:
    """
    Formata um valor inteiro como moeda (ex.: ¥12,300).
    """
    return f"{CURRENCY_SYMBOL}{int(value):,}"


def format_date(d: date | datetime) -> str:
    """
    Formata datas no padrão brasileiro (hora local do servidor para datetimes).
    """
    if isinstance(d, datetime):
        return d.astimezone().strftime("%d/%m/%Y %H:%M")
    return d.strftime("%d/%m/%Y")


def format_time(d: Optional[datetime]) -> str:
    if d is None:
        return "-"
    return d.astimezone().strftime("%H:%M")


def format_duration(delta: Optional[timedelta]) -> str:
    """Duração no formato "8h 05min"."""
    if delta is None:
        return "-"
    minutes = int(delta.total_seconds() // 60)
    return f"{minutes // 60}h {minutes % 60:02d}min"
