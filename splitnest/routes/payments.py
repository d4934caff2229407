from fastapi import APIRouter, Depends, Request

from splitnest import ledger
from splitnest.deps import get_store, require_admin
from splitnest.ratelimit import limiter
from splitnest.schemas import PaymentIn
from splitnest.serializers import to_display
from splitnest.store import SqlAlchemyLedgerStore

router = APIRouter()


@router.post("/obligations/{obligation_id}/payments", status_code=201, dependencies=[Depends(require_admin)])
@limiter.limit("60/minute")
def record_payment(
    request: Request,
    obligation_id: str,
    data: PaymentIn,
    store: SqlAlchemyLedgerStore = Depends(get_store),
):
    result = ledger.apply_payment(
        store,
        obligation_id,
        from_id=data.from_id,
        to_id=data.to,
        amount=data.amount,
        note=data.note,
    )
    return to_display(result)
