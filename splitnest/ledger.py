"""Ledger mutations: expenses, their obligations, and payments against them.

Every operation validates first, then performs all of its writes inside one
store transaction, so a failure leaves the ledger untouched.
"""

import logging

from splitnest.errors import LockedSplitError, MismatchError, NotFoundError, ValidationError
from splitnest.models import OBLIGATION_ORDINARY, OBLIGATION_OVERPAYMENT_RETURN
from splitnest.money import sum_minor_units, to_minor_units
from splitnest.splits import split_expense, unique_ids
from splitnest.store import LedgerStore

logger = logging.getLogger("splitnest")


def _parse_amount(value, message: str = "Amount must be greater than zero") -> int:
    try:
        cents = to_minor_units(value)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number") from None
    if cents <= 0:
        raise ValidationError(message)
    return cents


def _clean_expense_fields(
    store: LedgerStore,
    title: str,
    amount,
    payer_id: str,
    debtor_ids: list[str],
    note: str | None,
) -> dict:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    cents = _parse_amount(amount)

    debtors = unique_ids(list(debtor_ids or []))
    if not debtors:
        raise ValidationError("At least one participant must owe this expense")
    if payer_id in debtors:
        raise ValidationError("The payer cannot also owe this expense")

    known = store.participant_ids()
    if payer_id not in known:
        raise ValidationError("Payer is not a participant")
    for debtor_id in debtors:
        if debtor_id not in known:
            raise ValidationError(f"Participant {debtor_id} does not exist")

    return {
        "title": title,
        "amount": cents,
        "payerId": payer_id,
        "debtorIds": debtors,
        "note": (note or "").strip(),
    }


def _ordinary_obligations(fields: dict) -> list[dict]:
    shares = split_expense(fields["amount"], fields["payerId"], fields["debtorIds"])
    # A debtor whose share rounds to 0 cents owes nothing.
    return [
        {
            "debtorId": share["debtorId"],
            "creditorId": fields["payerId"],
            "amount": share["amount"],
            "kind": OBLIGATION_ORDINARY,
        }
        for share in shares
        if share["amount"] > 0
    ]


def is_split_locked(expense: dict) -> bool:
    """True once money has moved on the expense.

    Spillover obligations carry their origin's expense id, so a payment on
    one of them locks the expense too. apply_payment only creates a spillover
    after recording a payment on its origin, or when the origin was already
    settled by earlier payments, so through this module the payment check
    always fires first. The kind check covers snapshots written by anything
    else, where a spillover may exist without a payment beside it.
    """
    for obligation in expense.get("obligations") or []:
        if obligation.get("payments"):
            return True
        if obligation.get("kind") == OBLIGATION_OVERPAYMENT_RETURN:
            return True
    return False


# --- Participants ---

def add_participants(store: LedgerStore, names: list[str]) -> list[dict]:
    clean_names = [name.strip() for name in names if name and name.strip()]
    if not clean_names:
        raise ValidationError("At least one participant name is required")

    with store.transaction():
        participants = store.insert_participants(clean_names)
    logger.info("Participants added", extra={"extra_data": {"count": len(participants)}})
    return participants


def remove_participant(store: LedgerStore, participant_id: str) -> None:
    if participant_id not in store.participant_ids():
        raise NotFoundError("Participant not found")

    with store.transaction():
        store.delete_participant(participant_id)
    logger.info("Participant removed", extra={"extra_data": {"participant_id": participant_id}})


# --- Expenses ---

def create_expense(
    store: LedgerStore,
    title: str,
    amount,
    payer_id: str,
    debtor_ids: list[str],
    note: str | None = "",
) -> dict:
    fields = _clean_expense_fields(store, title, amount, payer_id, debtor_ids, note)
    obligations = _ordinary_obligations(fields)

    with store.transaction():
        expense_id = store.insert_expense(fields)
        store.replace_expense_obligations(expense_id, obligations)

    logger.info(
        "Expense created",
        extra={"extra_data": {
            "expense_id": expense_id,
            "amount": fields["amount"],
            "debtors": len(fields["debtorIds"]),
        }},
    )
    return store.get_expense(expense_id)


def update_expense(
    store: LedgerStore,
    expense_id: str,
    title: str,
    amount,
    payer_id: str,
    debtor_ids: list[str],
    note: str | None = "",
) -> dict:
    """Edit an expense, regenerating its obligations when the split changes.

    Amount, payer and debtor set are frozen once any payment exists; such an
    update is rejected whole, title/note included.
    """
    existing = store.get_expense(expense_id)
    if existing is None:
        raise NotFoundError("Expense not found")

    fields = _clean_expense_fields(store, title, amount, payer_id, debtor_ids, note)
    split_changed = (
        fields["amount"] != existing["amount"]
        or fields["payerId"] != existing["payerId"]
        or set(fields["debtorIds"]) != set(existing["debtorIds"])
    )

    if split_changed and is_split_locked(existing):
        logger.warning("Locked split update rejected", extra={"extra_data": {"expense_id": expense_id}})
        raise LockedSplitError(
            "Payments are already recorded for this expense, so its amount, payer and "
            "participants can no longer change. Record a correcting expense instead."
        )

    with store.transaction():
        if split_changed:
            store.update_expense_fields(expense_id, fields)
            store.replace_expense_obligations(expense_id, _ordinary_obligations(fields))
        else:
            store.update_expense_fields(expense_id, {"title": fields["title"], "note": fields["note"]})

    logger.info(
        "Expense updated",
        extra={"extra_data": {"expense_id": expense_id, "split_changed": split_changed}},
    )
    return store.get_expense(expense_id)


def delete_expense(store: LedgerStore, expense_id: str) -> None:
    if store.get_expense(expense_id) is None:
        raise NotFoundError("Expense not found")

    with store.transaction():
        store.delete_expense(expense_id)
    logger.info("Expense deleted", extra={"extra_data": {"expense_id": expense_id}})


# --- Payments ---

def apply_payment(
    store: LedgerStore,
    obligation_id: str,
    from_id: str,
    to_id: str,
    amount,
    note: str | None = "",
) -> dict:
    """Pay against one obligation.

    The payment is clamped to the obligation's remaining balance; any excess
    becomes a new overpayment_return obligation in the opposite direction.
    """
    cents = _parse_amount(amount, "Payment amount must be greater than zero")

    obligation = store.get_obligation(obligation_id)
    if obligation is None:
        raise NotFoundError("Obligation not found")
    if from_id != obligation["debtorId"] or to_id != obligation["creditorId"]:
        logger.warning("Payment direction mismatch", extra={"extra_data": {"obligation_id": obligation_id}})
        raise MismatchError("Payment must go from the obligation's debtor to its creditor")

    paid_so_far = sum_minor_units(obligation["payments"])
    remaining = max(obligation["amount"] - paid_so_far, 0)
    applied = min(cents, remaining)
    extra = cents - applied
    note = (note or "").strip()

    payment_id = None
    spillover_id = None
    with store.transaction():
        if applied > 0:
            payment_id = store.insert_payment({
                "obligationId": obligation["id"],
                "fromId": from_id,
                "toId": to_id,
                "amount": applied,
                "note": note,
            })
        if extra > 0:
            spillover_id = store.insert_obligation({
                "expenseId": obligation["expenseId"],
                "debtorId": obligation["creditorId"],
                "creditorId": obligation["debtorId"],
                "amount": extra,
                "kind": OBLIGATION_OVERPAYMENT_RETURN,
                "originObligationId": obligation["id"],
                "note": note or "Overpayment return",
            })

    logger.info(
        "Payment applied",
        extra={"extra_data": {
            "obligation_id": obligation_id,
            "applied": applied,
            "extra": extra,
        }},
    )
    return {
        "obligationId": obligation["id"],
        "appliedAmount": applied,
        "extraAmount": extra,
        "paymentId": payment_id,
        "spilloverObligationId": spillover_id,
    }
