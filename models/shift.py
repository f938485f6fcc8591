from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer
from sqlalchemy.orm import relationship

from config.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Shift(Base):
    """
    Turno de trabalho do motorista (início/fim e meta de vendas).
    Apenas um turno com end_time nulo deve existir por vez
    (garantido pelo índice parcial uq_shifts_single_open).
    """

    __tablename__ = "shifts"
    __table_args__ = (
        CheckConstraint("target_amount >= 0", name="ck_shifts_target_non_negative"),
        CheckConstraint("end_time IS NULL OR end_time >= start_time", name="ck_shifts_end_after_start"),
    )

    id = Column(Integer, primary_key=True, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)  # nulo = turno aberto
    target_amount = Column(Integer, nullable=False, default=0)

    sales = relationship("Sale", back_populates="shift", order_by="Sale.created_at")
