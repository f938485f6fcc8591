"""
Agregações dos turnos e corridas já carregados do banco.

Funções puras: nenhuma consulta é feita aqui e a entrada nunca é alterada.
Arredondamentos seguem "meio para cima" (1000 / 3 -> 333, 2.5 -> 3).
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from models.records import SaleRecord, ShiftRecord, as_utc
from models.sale import PaymentMethod
from services.errors import MalformedRecordError

# Índice 0 = domingo (mesma convenção de date.isoweekday() % 7)
DAY_OF_WEEK_LABELS = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class PaymentBreakdown:
    method: PaymentMethod
    amount: int

    @property
    def label(self) -> str:
        return self.method.label


@dataclass(frozen=True)
class ShiftSummary:
    total_sales: int
    ride_count: int
    avg_fare: int
    breakdown: Tuple[PaymentBreakdown, ...]


@dataclass(frozen=True)
class DailySummary:
    date: str
    day_of_week: str
    start_time: datetime
    end_time: Optional[datetime]
    ride_count: int
    total_sales: int
    shift_count: int


@dataclass(frozen=True)
class PeriodSummary:
    total_sales: int
    ride_count: int
    achievement: int


@dataclass(frozen=True)
class MonthlyPeriod:
    start: datetime
    end: datetime
    label: str


def round_half_up(value: float) -> int:
    """Arredonda para o inteiro mais próximo (0.5 sobe), como Math.round."""
    return math.floor(value + 0.5)


def achievement_percentage(total: int, target: int) -> int:
    """
    Percentual da meta atingido, limitado a 100.
    Meta zero (ou negativa) -> 0.
    """
    if not target or target <= 0:
        return 0
    return round_half_up(min(100.0, total / target * 100))


def compute_shift_summary(sales: Iterable[SaleRecord]) -> ShiftSummary:
    """
    Totais de um turno: soma, número de corridas, valor médio e
    soma por forma de pagamento (formas com total zero são omitidas).
    """
    sales = list(sales)
    for sale in sales:
        _check_amount(sale)

    total_sales = sum(s.amount for s in sales)
    ride_count = len(sales)
    avg_fare = round_half_up(total_sales / ride_count) if ride_count > 0 else 0
    return ShiftSummary(
        total_sales=total_sales,
        ride_count=ride_count,
        avg_fare=avg_fare,
        breakdown=tuple(_breakdown(sales)),
    )


def summarize_by_day(shifts: Iterable[ShiftRecord]) -> List[DailySummary]:
    """
    Agrupa os turnos pela data (UTC) de start_time.
    Resultado ordenado do dia mais recente para o mais antigo.
    """
    groups = {}
    for shift in shifts:
        start = _check_start(shift)
        key = start.date().isoformat()
        group = groups.get(key)
        if group is None:
            group = groups[key] = {
                "date": key,
                "day_of_week": DAY_OF_WEEK_LABELS[start.date().isoweekday() % 7],
                "start_time": start,
                "end_time": None,
                "ride_count": 0,
                "total_sales": 0,
                "shift_count": 0,
            }

        group["ride_count"] += len(shift.sales)
        group["total_sales"] += _sales_total(shift)
        group["shift_count"] += 1
        group["start_time"] = min(group["start_time"], start)
        end = _check_end(shift)
        if end is not None and (group["end_time"] is None or end > group["end_time"]):
            group["end_time"] = end

    return [DailySummary(**groups[key]) for key in sorted(groups, reverse=True)]


def summarize_period(
    shifts: Iterable[ShiftRecord],
    period_start: datetime,
    period_end: datetime,
    target: int = 0,
) -> PeriodSummary:
    """
    Totais dos turnos iniciados em [period_start, period_end).
    """
    period_start = as_utc(period_start)
    period_end = as_utc(period_end)
    total_sales = 0
    ride_count = 0
    for shift in shifts:
        start = _check_start(shift)
        if not (period_start <= start < period_end):
            continue
        total_sales += _sales_total(shift)
        ride_count += len(shift.sales)
    return PeriodSummary(
        total_sales=total_sales,
        ride_count=ride_count,
        achievement=achievement_percentage(total_sales, target),
    )


def calculate_monthly_period(closing_day: Optional[int], now: datetime) -> MonthlyPeriod:
    """
    Período mensal a partir do dia de fechamento.
    Se hoje já passou do fechamento, o período começa no dia seguinte ao
    fechamento deste mês; senão, no dia seguinte ao fechamento do mês anterior.
    Dias inexistentes avançam para o mês seguinte (31/4 vira 1/5).
    """
    if not closing_day:
        return MonthlyPeriod(start=EPOCH, end=now, label="Período não definido")

    month_start = date(now.year, now.month, 1)
    if now.day <= closing_day:
        month_start = month_start - relativedelta(months=1)

    start_date = month_start + timedelta(days=closing_day)
    closing_date = date(start_date.year, start_date.month, 1) + relativedelta(months=1) + timedelta(days=closing_day - 1)

    start = datetime(start_date.year, start_date.month, start_date.day, tzinfo=timezone.utc)
    label = f"{start_date.month}/{start_date.day} ~ {closing_date.month}/{closing_date.day}"
    return MonthlyPeriod(start=start, end=now, label=label)


def recent_shift_series(shifts: Sequence[ShiftRecord], limit: int = 7) -> List[dict]:
    """
    Dados do gráfico "últimos turnos": apenas turnos encerrados, os `limit`
    mais recentes, do mais antigo para o mais novo.
    """
    closed = [s for s in shifts if s.end_time is not None]
    closed.sort(key=_check_start, reverse=True)
    series = []
    for shift in reversed(closed[:limit]):
        series.append(
            {
                "label": _check_start(shift).strftime("%m/%d"),
                "total_sales": _sales_total(shift),
                "target_amount": shift.target_amount,
            }
        )
    return series


def payment_breakdown(shifts: Iterable[ShiftRecord]) -> List[PaymentBreakdown]:
    """Soma por forma de pagamento de todas as corridas de todos os turnos."""
    sales = [sale for shift in shifts for sale in shift.sales]
    for sale in sales:
        _check_amount(sale)
    return _breakdown(sales)


def shift_duration(shift: ShiftRecord) -> Optional[timedelta]:
    """Duração de um turno encerrado; None se ainda estiver aberto."""
    start = _check_start(shift)
    end = _check_end(shift)
    if end is None:
        return None
    return end - start


def _breakdown(sales: List[SaleRecord]) -> List[PaymentBreakdown]:
    out = []
    for method in PaymentMethod:
        amount = sum(s.amount for s in sales if s.payment_method_id == method.value)
        if amount > 0:
            out.append(PaymentBreakdown(method=method, amount=amount))
    return out


def _sales_total(shift: ShiftRecord) -> int:
    total = 0
    for sale in shift.sales:
        _check_amount(sale)
        total += sale.amount
    return total


def _check_start(shift: ShiftRecord) -> datetime:
    start = getattr(shift, "start_time", None)
    if not isinstance(start, datetime):
        raise MalformedRecordError(f"Turno {getattr(shift, 'id', '?')} sem start_time válido: {start!r}")
    return as_utc(start)


def _check_end(shift: ShiftRecord) -> Optional[datetime]:
    end = getattr(shift, "end_time", None)
    if end is None:
        return None
    if not isinstance(end, datetime):
        raise MalformedRecordError(f"Turno {getattr(shift, 'id', '?')} com end_time inválido: {end!r}")
    return as_utc(end)


def _check_amount(sale: SaleRecord) -> None:
    amount = getattr(sale, "amount", None)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise MalformedRecordError(f"Corrida {getattr(sale, 'id', '?')} com valor inválido: {amount!r}")
