"""
Acesso a turnos e corridas no banco remoto (Supabase/Postgres ou SQLite local).
Cada método abre sua própria sessão, faz commit quando escreve e devolve
cópias transitórias (ShiftRecord / SaleRecord).
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from config.settings import get_logger
from models.records import SaleRecord, ShiftRecord, as_utc
from models.sale import Sale
from models.shift import Shift
from services.errors import ShiftStateError, StoreError

logger = get_logger("repository")


class ShiftRepository:
    """
    Leituras filtradas e escritas nas tabelas shifts e sales.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str):
        db: Session = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Erro no banco ao %s", action)
            raise StoreError(f"Falha ao {action}: {e.__class__.__name__}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ----- Turnos -----

    def get_open_shift(self) -> Optional[ShiftRecord]:
        """O turno com end_time nulo (no máximo um), ou None."""
        with self._session("buscar o turno aberto") as db:
            shift = (
                db.query(Shift)
                .filter(Shift.end_time.is_(None))
                .order_by(Shift.start_time.desc())
                .limit(1)
                .first()
            )
            return ShiftRecord.from_model(shift) if shift else None

    def get_shift(self, shift_id: int) -> Optional[ShiftRecord]:
        with self._session("buscar o turno") as db:
            shift = db.query(Shift).filter(Shift.id == shift_id).first()
            return ShiftRecord.from_model(shift) if shift else None

    def list_shifts_started_between(self, start: datetime, end: datetime) -> List[ShiftRecord]:
        """Turnos com start <= start_time < end (sem as corridas)."""
        with self._session("buscar turnos do período") as db:
            shifts = (
                db.query(Shift)
                .filter(Shift.start_time >= as_utc(start))
                .filter(Shift.start_time < as_utc(end))
                .order_by(Shift.start_time.desc())
                .all()
            )
            return [ShiftRecord.from_model(s) for s in shifts]

    def list_shifts_with_sales(
        self,
        closed_only: bool = True,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[ShiftRecord]:
        """
        Turnos com as corridas aninhadas, do mais recente para o mais antigo.
        """
        with self._session("buscar o histórico de turnos") as db:
            query = db.query(Shift).options(selectinload(Shift.sales))
            if closed_only:
                query = query.filter(Shift.end_time.isnot(None))
            if start is not None:
                query = query.filter(Shift.start_time >= as_utc(start))
            if end is not None:
                query = query.filter(Shift.start_time < as_utc(end))
            shifts = query.order_by(Shift.start_time.desc()).all()
            return [ShiftRecord.from_model(s, include_sales=True) for s in shifts]

    def create_shift(self, target_amount: int, start_time: Optional[datetime] = None) -> ShiftRecord:
        with self._session("abrir o turno") as db:
            shift = Shift(
                target_amount=target_amount,
                start_time=as_utc(start_time or datetime.now(timezone.utc)),
            )
            db.add(shift)
            db.flush()
            record = ShiftRecord.from_model(shift)
        logger.info("Turno %s aberto (meta %s)", record.id, record.target_amount)
        return record

    def close_shift(self, shift_id: int, end_time: Optional[datetime] = None) -> ShiftRecord:
        end_time = as_utc(end_time or datetime.now(timezone.utc))
        with self._session("encerrar o turno") as db:
            shift = db.query(Shift).filter(Shift.id == shift_id).first()
            if shift is None:
                raise ShiftStateError(f"Turno {shift_id} não encontrado.")
            if shift.end_time is not None:
                raise ShiftStateError(f"Turno {shift_id} já foi encerrado.")
            if end_time < as_utc(shift.start_time):
                raise ValueError("O fim do turno não pode ser anterior ao início.")
            shift.end_time = end_time
            db.flush()
            record = ShiftRecord.from_model(shift)
        logger.info("Turno %s encerrado", shift_id)
        return record

    # ----- Corridas -----

    def list_sales_for_shift(self, shift_id: int) -> List[SaleRecord]:
        """Corridas do turno, da mais recente para a mais antiga."""
        with self._session("buscar as corridas do turno") as db:
            sales = (
                db.query(Sale)
                .filter(Sale.shift_id == shift_id)
                .order_by(Sale.created_at.desc(), Sale.id.desc())
                .all()
            )
            return [SaleRecord.from_model(s) for s in sales]

    def list_sales_for_shifts(self, shift_ids: Iterable[int]) -> List[SaleRecord]:
        shift_ids = list(shift_ids)
        if not shift_ids:
            return []
        with self._session("buscar as corridas do período") as db:
            sales = (
                db.query(Sale)
                .filter(Sale.shift_id.in_(shift_ids))
                .order_by(Sale.created_at.asc(), Sale.id.asc())
                .all()
            )
            return [SaleRecord.from_model(s) for s in sales]

    def insert_sale(self, shift_id: int, amount: int, payment_method_id: int) -> SaleRecord:
        with self._session("registrar a corrida") as db:
            sale = Sale(shift_id=shift_id, amount=amount, payment_method_id=payment_method_id)
            db.add(sale)
            db.flush()
            record = SaleRecord.from_model(sale)
        logger.info("Corrida %s registrada no turno %s", record.id, shift_id)
        return record

    def update_sale(self, sale_id: int, amount: int, payment_method_id: int) -> SaleRecord:
        with self._session("corrigir a corrida") as db:
            sale = db.query(Sale).filter(Sale.id == sale_id).first()
            if sale is None:
                raise StoreError(f"Corrida {sale_id} não encontrada.")
            sale.amount = amount
            sale.payment_method_id = payment_method_id
            db.flush()
            return SaleRecord.from_model(sale)

    def delete_sale(self, sale_id: int) -> None:
        with self._session("excluir a corrida") as db:
            deleted = db.query(Sale).filter(Sale.id == sale_id).delete(synchronize_session=False)
            if not deleted:
                raise StoreError(f"Corrida {sale_id} não encontrada.")
        logger.info("Corrida %s excluída", sale_id)
