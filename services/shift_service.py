"""
Ciclo de vida do turno: NO_ACTIVE_SHIFT <-> SHIFT_OPEN.

O turno atual nunca fica em cache: cada chamada pergunta ao banco qual turno
está com end_time nulo. As escritas terminam antes da tela recarregar os dados
(st.rerun), sem alteração otimista do estado local.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from config.settings import DEFAULT_CLOSING_DAY, DEFAULT_MONTHLY_TARGET, MAX_FARE, get_logger
from models.records import SaleRecord, ShiftRecord
from models.sale import PaymentMethod
from services.aggregation import (
    MonthlyPeriod,
    PeriodSummary,
    ShiftSummary,
    achievement_percentage,
    calculate_monthly_period,
    compute_shift_summary,
    summarize_period,
)
from services.errors import InvalidSaleError, ShiftStateError, StoreError, StoreUnavailableError
from services.shift_repository import ShiftRepository
from utils.preferences import CLOSING_DAY_KEY, MONTHLY_TARGET_KEY

logger = get_logger("shift")


class ShiftState(str, Enum):
    NO_ACTIVE_SHIFT = "no_active_shift"
    SHIFT_OPEN = "shift_open"


@dataclass(frozen=True)
class DashboardState:
    """Tudo que a tela inicial mostra, lido do banco em uma única passada."""

    current_shift: Optional[ShiftRecord] = None
    sales: List[SaleRecord] = field(default_factory=list)
    shift_summary: ShiftSummary = field(default_factory=lambda: compute_shift_summary([]))
    shift_achievement: int = 0
    period: Optional[MonthlyPeriod] = None
    period_summary: PeriodSummary = field(default_factory=lambda: PeriodSummary(0, 0, 0))
    monthly_target: int = DEFAULT_MONTHLY_TARGET
    available: bool = True

    @property
    def state(self) -> ShiftState:
        return ShiftState.SHIFT_OPEN if self.current_shift else ShiftState.NO_ACTIVE_SHIFT


def validate_sale(amount, payment_method) -> tuple[int, PaymentMethod]:
    """
    Validação feita antes de enviar ao banco: valor inteiro entre 1 e 9.999.999
    e forma de pagamento conhecida.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidSaleError("Informe o valor da corrida.")
    if amount <= 0:
        raise InvalidSaleError("O valor da corrida deve ser maior que zero.")
    if amount > MAX_FARE:
        raise InvalidSaleError("Valor acima do limite permitido.")
    try:
        method = PaymentMethod(int(payment_method))
    except (TypeError, ValueError):
        raise InvalidSaleError("Forma de pagamento não selecionada.") from None
    return amount, method


class ShiftLifecycle:
    """
    Abre/encerra turnos e registra corridas no turno aberto.
    repository=None significa banco indisponível: leituras devolvem estado
    vazio e escritas levantam StoreUnavailableError.
    """

    def __init__(self, repository: Optional[ShiftRepository], clock: Callable[[], datetime] | None = None):
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        return self._clock()

    def _require_repository(self) -> ShiftRepository:
        if self.repository is None:
            logger.error("Banco de dados indisponível (verifique DATABASE_URL)")
            raise StoreUnavailableError("Erro de conexão com o banco de dados.")
        return self.repository

    # ----- Estado -----

    def current_shift(self) -> Optional[ShiftRecord]:
        return self._require_repository().get_open_shift()

    def state(self) -> ShiftState:
        return ShiftState.SHIFT_OPEN if self.current_shift() else ShiftState.NO_ACTIVE_SHIFT

    def _require_open_shift(self) -> ShiftRecord:
        shift = self.current_shift()
        if shift is None:
            raise ShiftStateError("Nenhum turno aberto. Inicie um turno para registrar corridas.")
        return shift

    # ----- Transições -----

    def start(self, target_amount: int) -> ShiftRecord:
        """
        Abre um turno com start_time = agora.
        Se já houver turno aberto, nada é criado e o turno existente é devolvido.
        """
        repo = self._require_repository()
        if isinstance(target_amount, bool) or not isinstance(target_amount, int) or target_amount < 0:
            raise ValueError("A meta do turno deve ser um inteiro maior ou igual a zero.")
        existing = repo.get_open_shift()
        if existing is not None:
            logger.info("Turno %s já está aberto; início ignorado", existing.id)
            return existing
        return repo.create_shift(target_amount, start_time=self.now())

    def end(self, confirmed: bool = False) -> ShiftRecord:
        """
        Encerra o turno aberto (end_time = agora). Exige confirmação explícita.
        """
        repo = self._require_repository()
        if not confirmed:
            raise ShiftStateError("Confirme o encerramento do turno.")
        shift = self._require_open_shift()
        return repo.close_shift(shift.id, end_time=self.now())

    def add_sale(self, amount, payment_method) -> SaleRecord:
        amount, method = validate_sale(amount, payment_method)
        repo = self._require_repository()
        shift = self._require_open_shift()
        return repo.insert_sale(shift.id, amount, method.value)

    def edit_sale(self, sale_id: int, amount, payment_method) -> SaleRecord:
        amount, method = validate_sale(amount, payment_method)
        repo = self._require_repository()
        self._require_open_shift()
        return repo.update_sale(sale_id, amount, method.value)

    def delete_sale(self, sale_id: int) -> None:
        repo = self._require_repository()
        self._require_open_shift()
        repo.delete_sale(sale_id)

    # ----- Leitura para a tela inicial -----

    def dashboard(self, preferences: dict | None = None) -> DashboardState:
        """
        Turno aberto, corridas e resumo do período mensal.
        Erros de leitura são registrados e devolvem o estado vazio.
        """
        preferences = preferences or {}
        closing_day = preferences.get(CLOSING_DAY_KEY, DEFAULT_CLOSING_DAY)
        monthly_target = preferences.get(MONTHLY_TARGET_KEY, DEFAULT_MONTHLY_TARGET)
        period = calculate_monthly_period(closing_day, self.now())

        if self.repository is None:
            logger.error("Banco de dados indisponível; exibindo tela vazia")
            return DashboardState(period=period, monthly_target=monthly_target, available=False)

        try:
            shift = self.repository.get_open_shift()
            sales = self.repository.list_sales_for_shift(shift.id) if shift else []

            period_shifts = self.repository.list_shifts_started_between(period.start, period.end)
            period_sales = self.repository.list_sales_for_shifts(s.id for s in period_shifts)
        except StoreError:
            return DashboardState(period=period, monthly_target=monthly_target, available=False)

        by_shift = {}
        for sale in period_sales:
            by_shift.setdefault(sale.shift_id, []).append(sale)
        period_shifts = [s.with_sales(by_shift.get(s.id, ())) for s in period_shifts]

        summary = compute_shift_summary(sales)
        return DashboardState(
            current_shift=shift,
            sales=sales,
            shift_summary=summary,
            shift_achievement=achievement_percentage(summary.total_sales, shift.target_amount) if shift else 0,
            period=period,
            period_summary=summarize_period(period_shifts, period.start, period.end, monthly_target),
            monthly_target=monthly_target,
        )
