from splitnest.models import Participant, Expense, Obligation, Payment
from splitnest.money import from_minor_units

# Keys holding cents in snapshot and netted-view dicts.
AMOUNT_KEYS = {
    "amount",
    "rawAmount",
    "fullAmount",
    "paidAmount",
    "remainingAmount",
    "autoSettled",
    "autoSettledTotal",
    "totalPending",
    "totalOwe",
    "totalOwed",
    "net",
    "appliedAmount",
    "extraAmount",
}


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_participant(participant: Participant) -> dict:
    return {
        "id": str(participant.id),
        "name": participant.name,
        "createdAt": _iso(participant.created_at),
    }


def serialize_payment(payment: Payment) -> dict:
    return {
        "id": str(payment.id),
        "obligationId": str(payment.obligation_id),
        "fromId": str(payment.from_id),
        "toId": str(payment.to_id),
        "amount": payment.amount,
        "note": payment.note or "",
        "createdAt": _iso(payment.created_at),
    }


def serialize_obligation(obligation: Obligation) -> dict:
    payments = [serialize_payment(p) for p in obligation.payments]
    paid = sum(p["amount"] for p in payments)
    return {
        "id": str(obligation.id),
        "expenseId": str(obligation.expense_id),
        "debtorId": str(obligation.debtor_id),
        "creditorId": str(obligation.creditor_id),
        "amount": obligation.amount,
        "paidAmount": paid,
        "remainingAmount": max(obligation.amount - paid, 0),
        "kind": obligation.kind,
        "originObligationId": (
            str(obligation.origin_obligation_id) if obligation.origin_obligation_id is not None else None
        ),
        "note": obligation.note or "",
        "position": obligation.position,
        "createdAt": _iso(obligation.created_at),
        "payments": payments,
    }


def serialize_expense(expense: Expense) -> dict:
    obligations = [serialize_obligation(o) for o in expense.obligations]
    return {
        "id": str(expense.id),
        "title": expense.title,
        "amount": expense.amount,
        "payerId": str(expense.payer_id),
        "debtorIds": [str(d.participant_id) for d in expense.debtors],
        "note": expense.note or "",
        "createdAt": _iso(expense.created_at),
        "hasPayments": any(o["payments"] for o in obligations),
        "obligations": obligations,
    }


def to_display(value):
    """Recursively convert cent amounts to 2-dp decimals for API responses."""
    if isinstance(value, list):
        return [to_display(v) for v in value]
    if isinstance(value, dict):
        return {
            k: from_minor_units(v) if k in AMOUNT_KEYS and isinstance(v, int) else to_display(v)
            for k, v in value.items()
        }
    return value
