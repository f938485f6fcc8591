from enum import IntEnum

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from config.database import Base
from models.shift import utcnow


class PaymentMethod(IntEnum):
    """
    Formas de pagamento de uma corrida (payment_method_id).
    """

    CASH = 1
    APP_QR = 2
    CARD = 3
    TICKET = 4

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]

    @property
    def key(self) -> str:
        return PAYMENT_METHOD_KEYS[self]


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Dinheiro",
    PaymentMethod.APP_QR: "App/QR",
    PaymentMethod.CARD: "Cartão",
    PaymentMethod.TICKET: "Ticket",
}

PAYMENT_METHOD_KEYS = {
    PaymentMethod.CASH: "cash",
    PaymentMethod.APP_QR: "qr/other",
    PaymentMethod.CARD: "card",
    PaymentMethod.TICKET: "ticket",
}

PAYMENT_METHOD_ICONS = {
    PaymentMethod.CASH: "💴",
    PaymentMethod.APP_QR: "📱",
    PaymentMethod.CARD: "💳",
    PaymentMethod.TICKET: "🎫",
}


class Sale(Base):
    """
    Corrida (venda) vinculada a um turno.
    """

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    payment_method_id = Column(Integer, nullable=False, default=PaymentMethod.CASH.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    shift = relationship("Shift", back_populates="sales")
