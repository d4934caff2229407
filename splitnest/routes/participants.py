from fastapi import APIRouter, Depends

from splitnest import ledger
from splitnest.deps import get_store, require_admin
from splitnest.schemas import AddParticipantsIn
from splitnest.store import SqlAlchemyLedgerStore

router = APIRouter()


@router.get("/participants")
def list_participants(store: SqlAlchemyLedgerStore = Depends(get_store)):
    return store.list_participants()


@router.post("/participants", status_code=201, dependencies=[Depends(require_admin)])
def add_participants(data: AddParticipantsIn, store: SqlAlchemyLedgerStore = Depends(get_store)):
    return ledger.add_participants(store, data.names)


@router.delete("/participants/{participant_id}", status_code=204, dependencies=[Depends(require_admin)])
def remove_participant(participant_id: str, store: SqlAlchemyLedgerStore = Depends(get_store)):
    ledger.remove_participant(store, participant_id)
    return None
