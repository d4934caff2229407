"""Persistence collaborator for the ledger.

The ledger only talks to a LedgerStore. Snapshots come back as plain dicts
(see serializers.py) with all amounts in cents.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import ContextManager, Iterator, Protocol

from sqlalchemy.orm import Session, selectinload

from splitnest.models import (
    Participant, Expense, ExpenseDebtor, Obligation, Payment, OBLIGATION_ORDINARY,
)
from splitnest.serializers import serialize_participant, serialize_expense, serialize_obligation


class LedgerStore(Protocol):
    def transaction(self) -> ContextManager[None]: ...

    def list_participants(self) -> list[dict]: ...

    def participant_ids(self) -> set[str]: ...

    def list_expenses_with_obligations_and_payments(self) -> list[dict]: ...

    def get_expense(self, expense_id: str) -> dict | None: ...

    def get_obligation(self, obligation_id: str) -> dict | None: ...

    def insert_participants(self, names: list[str]) -> list[dict]: ...

    def delete_participant(self, participant_id: str) -> None: ...

    def insert_expense(self, fields: dict) -> str: ...

    def update_expense_fields(self, expense_id: str, fields: dict) -> None: ...

    def delete_expense(self, expense_id: str) -> None: ...

    def replace_expense_obligations(self, expense_id: str, obligations: list[dict]) -> None: ...

    def insert_obligation(self, fields: dict) -> str: ...

    def insert_payment(self, fields: dict) -> str: ...


class SqlAlchemyLedgerStore:
    """LedgerStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # --- Reads ---

    def list_participants(self) -> list[dict]:
        participants = (
            self.db.query(Participant)
            .order_by(Participant.created_at.asc(), Participant.id)
            .all()
        )
        return [serialize_participant(p) for p in participants]

    def participant_ids(self) -> set[str]:
        return {row.id for row in self.db.query(Participant.id).all()}

    def _expense_query(self):
        return self.db.query(Expense).options(
            selectinload(Expense.debtors),
            selectinload(Expense.obligations).selectinload(Obligation.payments),
        )

    def list_expenses_with_obligations_and_payments(self) -> list[dict]:
        expenses = self._expense_query().order_by(Expense.created_at.desc(), Expense.id).all()
        return [serialize_expense(e) for e in expenses]

    def get_expense(self, expense_id: str) -> dict | None:
        expense = self._expense_query().filter(Expense.id == expense_id).first()
        return serialize_expense(expense) if expense else None

    def get_obligation(self, obligation_id: str) -> dict | None:
        obligation = self.db.query(Obligation).filter(Obligation.id == obligation_id).first()
        return serialize_obligation(obligation) if obligation else None

    # --- Participants ---

    def insert_participants(self, names: list[str]) -> list[dict]:
        now = datetime.utcnow()
        # Offset by position so a batch lists back in the order given.
        participants = [
            Participant(name=name, created_at=now + timedelta(microseconds=i))
            for i, name in enumerate(names)
        ]
        self.db.add_all(participants)
        self.db.flush()
        return [serialize_participant(p) for p in participants]

    def delete_participant(self, participant_id: str) -> None:
        """Delete a participant with everything that references them."""
        for expense in self.db.query(Expense).filter(Expense.payer_id == participant_id).all():
            self.db.delete(expense)
        self.db.flush()

        obligations = self.db.query(Obligation).filter(
            (Obligation.debtor_id == participant_id) | (Obligation.creditor_id == participant_id)
        ).all()
        for obligation in obligations:
            self.db.delete(obligation)
        self.db.query(ExpenseDebtor).filter(
            ExpenseDebtor.participant_id == participant_id
        ).delete(synchronize_session="fetch")

        participant = self.db.query(Participant).filter(Participant.id == participant_id).first()
        if participant:
            self.db.delete(participant)
        self.db.flush()

    # --- Expenses ---

    def _sync_debtors(self, expense: Expense, debtor_ids: list[str]) -> None:
        """Replace expense_debtors rows, keeping selection order in position."""
        self.db.query(ExpenseDebtor).filter(ExpenseDebtor.expense_id == expense.id).delete()
        for position, participant_id in enumerate(debtor_ids):
            self.db.add(ExpenseDebtor(
                expense_id=expense.id,
                participant_id=participant_id,
                position=position,
            ))

    def insert_expense(self, fields: dict) -> str:
        expense = Expense(
            title=fields["title"],
            amount=fields["amount"],
            payer_id=fields["payerId"],
            note=fields.get("note", ""),
        )
        self.db.add(expense)
        self.db.flush()  # get expense.id before dependent rows

        self._sync_debtors(expense, fields["debtorIds"])
        self.db.flush()
        return expense.id

    def update_expense_fields(self, expense_id: str, fields: dict) -> None:
        expense = self.db.query(Expense).filter(Expense.id == expense_id).one()
        if "title" in fields:
            expense.title = fields["title"]
        if "note" in fields:
            expense.note = fields["note"]
        if "amount" in fields:
            expense.amount = fields["amount"]
        if "payerId" in fields:
            expense.payer_id = fields["payerId"]
        if "debtorIds" in fields:
            self._sync_debtors(expense, fields["debtorIds"])
        self.db.flush()
        self.db.expire(expense)

    def delete_expense(self, expense_id: str) -> None:
        expense = self.db.query(Expense).filter(Expense.id == expense_id).first()
        if expense:
            self.db.delete(expense)
            self.db.flush()

    # --- Obligations & payments ---

    def replace_expense_obligations(self, expense_id: str, obligations: list[dict]) -> None:
        """Delete the expense's obligations (and their payments), then insert the new ones."""
        for existing in self.db.query(Obligation).filter(Obligation.expense_id == expense_id).all():
            self.db.delete(existing)
        self.db.flush()

        now = datetime.utcnow()
        for position, fields in enumerate(obligations):
            self.db.add(Obligation(
                expense_id=expense_id,
                debtor_id=fields["debtorId"],
                creditor_id=fields["creditorId"],
                amount=fields["amount"],
                kind=fields.get("kind", OBLIGATION_ORDINARY),
                note=fields.get("note", ""),
                position=position,
                created_at=now,
            ))
        self.db.flush()
        expense = self.db.get(Expense, expense_id)
        if expense is not None:
            self.db.expire(expense, ["obligations"])

    def insert_obligation(self, fields: dict) -> str:
        obligation = Obligation(
            expense_id=fields["expenseId"],
            debtor_id=fields["debtorId"],
            creditor_id=fields["creditorId"],
            amount=fields["amount"],
            kind=fields.get("kind", OBLIGATION_ORDINARY),
            origin_obligation_id=fields.get("originObligationId"),
            note=fields.get("note", ""),
        )
        self.db.add(obligation)
        self.db.flush()
        expense = self.db.get(Expense, fields["expenseId"])
        if expense is not None:
            self.db.expire(expense, ["obligations"])
        return obligation.id

    def insert_payment(self, fields: dict) -> str:
        payment = Payment(
            obligation_id=fields["obligationId"],
            from_id=fields["fromId"],
            to_id=fields["toId"],
            amount=fields["amount"],
            note=fields.get("note", ""),
        )
        self.db.add(payment)
        self.db.flush()
        obligation = self.db.get(Obligation, fields["obligationId"])
        if obligation is not None:
            self.db.expire(obligation, ["payments"])
        return payment.id
