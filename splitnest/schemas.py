from decimal import Decimal

from pydantic import BaseModel, Field


# --- Participants ---

class AddParticipantsIn(BaseModel):
    names: list[str]


# --- Expenses ---

class ExpenseIn(BaseModel):
    title: str
    amount: Decimal
    payer_id: str
    debtor_ids: list[str]  # selection order decides who absorbs remainder cents
    note: str = ""


# --- Payments ---

class PaymentIn(BaseModel):
    from_id: str = Field(alias="from")
    to: str
    amount: Decimal
    note: str = ""

    model_config = {"populate_by_name": True}
