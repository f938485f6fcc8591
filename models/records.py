"""
Cópias transitórias (somente leitura) das linhas de turnos e corridas.
O repositório devolve estes objetos em vez de instâncias ORM ligadas à sessão.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite devolve datetimes sem fuso; o app trabalha sempre em UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class SaleRecord:
    id: int
    amount: int
    payment_method_id: int
    created_at: datetime
    shift_id: int

    @classmethod
    def from_model(cls, sale) -> "SaleRecord":
        return cls(
            id=sale.id,
            amount=sale.amount,
            payment_method_id=sale.payment_method_id,
            created_at=as_utc(sale.created_at),
            shift_id=sale.shift_id,
        )


@dataclass(frozen=True)
class ShiftRecord:
    id: int
    start_time: datetime
    end_time: Optional[datetime]
    target_amount: int
    sales: Tuple[SaleRecord, ...] = field(default_factory=tuple)

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def with_sales(self, sales) -> "ShiftRecord":
        return replace(self, sales=tuple(sales))

    @classmethod
    def from_model(cls, shift, include_sales: bool = False) -> "ShiftRecord":
        sales: Tuple[SaleRecord, ...] = ()
        if include_sales:
            sales = tuple(SaleRecord.from_model(s) for s in shift.sales)
        return cls(
            id=shift.id,
            start_time=as_utc(shift.start_time),
            end_time=as_utc(shift.end_time),
            target_amount=shift.target_amount,
            sales=sales,
        )
