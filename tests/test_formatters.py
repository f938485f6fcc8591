"""
Testes de formatação
"""
from datetime import timedelta

from utils.formatters import format_currency, format_duration, format_time


def test_format_currency():
    assert format_currency(0) == "¥0"
    assert format_currency(1234567) == "¥1,234,567"


def test_format_duration():
    assert format_duration(timedelta(hours=8, minutes=5)) == "8h 05min"
    assert format_duration(None) == "-"


def test_format_time_absent():
    assert format_time(None) == "-"
