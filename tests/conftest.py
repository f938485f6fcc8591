"""
Configuração pytest - fixtures comuns
"""
import os
import sys
from datetime import datetime, timezone

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config.database import create_db_engine, create_session_factory, init_db
from models.records import SaleRecord, ShiftRecord
from services.shift_repository import ShiftRepository
from services.shift_service import ShiftLifecycle


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_sale(amount, method=1, sale_id=1, shift_id=1, created_at=None) -> SaleRecord:
    return SaleRecord(
        id=sale_id,
        amount=amount,
        payment_method_id=method,
        created_at=created_at or utc(2024, 1, 1, 10, 0),
        shift_id=shift_id,
    )


def make_shift(start, end=None, target=30000, sales=(), shift_id=1) -> ShiftRecord:
    return ShiftRecord(
        id=shift_id,
        start_time=start,
        end_time=end,
        target_amount=target,
        sales=tuple(sales),
    )


class FakeClock:
    """Relógio controlado pelos testes."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        from datetime import timedelta

        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def engine():
    """Banco SQLite em memória com as tabelas e o índice de turno aberto."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    try:
        yield engine
    finally:
        from config.database import Base

        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def repository(engine) -> ShiftRepository:
    return ShiftRepository(create_session_factory(engine))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(utc(2024, 3, 10, 9, 0))


@pytest.fixture
def lifecycle(repository, clock) -> ShiftLifecycle:
    return ShiftLifecycle(repository, clock=clock)
