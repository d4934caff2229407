from fastapi import APIRouter, Depends, Request

from splitnest import ledger
from splitnest.deps import get_store, require_admin
from splitnest.ratelimit import limiter
from splitnest.schemas import ExpenseIn
from splitnest.serializers import to_display
from splitnest.store import SqlAlchemyLedgerStore

router = APIRouter()


@router.get("/expenses")
def list_expenses(store: SqlAlchemyLedgerStore = Depends(get_store)):
    return to_display(store.list_expenses_with_obligations_and_payments())


@router.post("/expenses", status_code=201, dependencies=[Depends(require_admin)])
@limiter.limit("60/minute")
def add_expense(
    request: Request,
    data: ExpenseIn,
    store: SqlAlchemyLedgerStore = Depends(get_store),
):
    expense = ledger.create_expense(
        store,
        title=data.title,
        amount=data.amount,
        payer_id=data.payer_id,
        debtor_ids=data.debtor_ids,
        note=data.note,
    )
    return to_display(expense)


@router.put("/expenses/{expense_id}", dependencies=[Depends(require_admin)])
def update_expense(
    expense_id: str,
    data: ExpenseIn,
    store: SqlAlchemyLedgerStore = Depends(get_store),
):
    expense = ledger.update_expense(
        store,
        expense_id,
        title=data.title,
        amount=data.amount,
        payer_id=data.payer_id,
        debtor_ids=data.debtor_ids,
        note=data.note,
    )
    return to_display(expense)


@router.delete("/expenses/{expense_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_expense(expense_id: str, store: SqlAlchemyLedgerStore = Depends(get_store)):
    ledger.delete_expense(store, expense_id)
    return None
