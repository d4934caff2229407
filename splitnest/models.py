import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, String, Integer, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from splitnest.database import Base

OBLIGATION_ORDINARY = "ordinary"
OBLIGATION_OVERPAYMENT_RETURN = "overpayment_return"


def new_uuid():
    return str(uuid.uuid4())


class Participant(Base):
    __tablename__ = "participants"

    id = Column(String, primary_key=True, default=new_uuid)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=new_uuid)
    title = Column(String(500), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    payer_id = Column(String, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False)
    note = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    debtors = relationship(
        "ExpenseDebtor",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseDebtor.position",
    )
    obligations = relationship(
        "Obligation",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by=lambda: [Obligation.created_at, Obligation.position, Obligation.id],
    )


class ExpenseDebtor(Base):
    __tablename__ = "expense_debtors"

    id = Column(String, primary_key=True, default=new_uuid)
    expense_id = Column(String, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False)
    participant_id = Column(String, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("expense_id", "participant_id"),)

    expense = relationship("Expense", back_populates="debtors")


class Obligation(Base):
    __tablename__ = "obligations"

    id = Column(String, primary_key=True, default=new_uuid)
    expense_id = Column(String, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    debtor_id = Column(String, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False)
    creditor_id = Column(String, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    kind = Column(String(32), nullable=False, default=OBLIGATION_ORDINARY)
    origin_obligation_id = Column(String, ForeignKey("obligations.id", ondelete="SET NULL"), nullable=True)
    note = Column(Text, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_obligations_amount_positive"),)

    expense = relationship("Expense", back_populates="obligations")
    payments = relationship(
        "Payment",
        back_populates="obligation",
        cascade="all, delete-orphan",
        order_by=lambda: [Payment.created_at, Payment.id],
    )


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, default=new_uuid)
    obligation_id = Column(String, ForeignKey("obligations.id", ondelete="CASCADE"), nullable=False, index=True)
    from_id = Column(String, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False)
    to_id = Column(String, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    note = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    obligation = relationship("Obligation", back_populates="payments")
