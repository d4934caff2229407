from fastapi import APIRouter, Depends

from splitnest.deps import get_store
from splitnest.errors import NotFoundError
from splitnest.netting import compute_netted_view, summarize_participant
from splitnest.serializers import to_display
from splitnest.store import SqlAlchemyLedgerStore

router = APIRouter()


@router.get("/balances")
def get_balances(store: SqlAlchemyLedgerStore = Depends(get_store)):
    """Netted view across the whole ledger (every open item and pair adjustment)."""
    view = compute_netted_view(store.list_expenses_with_obligations_and_payments())
    return to_display(view)


@router.get("/participants/{participant_id}/balances")
def get_participant_balances(participant_id: str, store: SqlAlchemyLedgerStore = Depends(get_store)):
    if participant_id not in store.participant_ids():
        raise NotFoundError("Participant not found")

    view = compute_netted_view(store.list_expenses_with_obligations_and_payments())
    return to_display(summarize_participant(view, participant_id))
