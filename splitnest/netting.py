"""Read-only "who owes whom" view over a ledger snapshot.

Input is the snapshot from LedgerStore.list_expenses_with_obligations_and_payments()
(amounts in cents). Nothing here writes to the ledger, and the same snapshot
always produces the same view.
"""

from splitnest.money import coerce_minor_units, sum_minor_units

OUTGOING = "outgoing"
INCOMING = "incoming"


def _ordered_expenses(expenses: list[dict]) -> list[dict]:
    """Newest first; ties keep snapshot order."""
    return sorted(expenses, key=lambda e: str(e.get("createdAt") or ""), reverse=True)


def _ordered_obligations(obligations: list[dict]) -> list[dict]:
    """Oldest first, then by position; ties keep snapshot order."""
    return sorted(
        obligations,
        key=lambda o: (str(o.get("createdAt") or ""), coerce_minor_units(o.get("position"))),
    )


def build_expense_balance_groups(expenses: list[dict]) -> list[dict]:
    """Collect each expense's open obligations into a display group.

    Expenses without any open obligation are dropped.
    """
    groups = []
    for expense in _ordered_expenses(expenses or []):
        items = []
        for obligation in _ordered_obligations(expense.get("obligations") or []):
            full_amount = coerce_minor_units(obligation.get("amount"))
            paid = sum_minor_units(obligation.get("payments") or [])
            remaining = max(full_amount - paid, 0)
            if remaining <= 0:
                continue
            items.append({
                "obligationId": obligation.get("id"),
                "from": obligation.get("debtorId"),
                "to": obligation.get("creditorId"),
                "amount": remaining,
                "fullAmount": full_amount,
                "paidAmount": paid,
                "kind": obligation.get("kind"),
                "note": obligation.get("note") or "",
            })

        if not items:
            continue

        groups.append({
            "expenseId": expense.get("id"),
            "title": expense.get("title"),
            "note": expense.get("note") or "",
            "amount": coerce_minor_units(expense.get("amount")),
            "payer": expense.get("payerId"),
            "items": items,
            "totalPending": sum_minor_units(items),
        })
    return groups


def _waterfall(items: list[dict], budget: int) -> None:
    """Extinguish items strictly in order until the budget runs out."""
    remaining = budget
    for item in items:
        if remaining <= 0:
            return
        deduct = min(item["amount"], remaining)
        if deduct <= 0:
            continue
        item["amount"] -= deduct
        item["autoSettled"] += deduct
        remaining -= deduct


def apply_pairwise_auto_settlement(groups: list[dict]) -> dict:
    """Cancel opposite obligations between every pair of participants.

    For each unordered pair, min(total one way, total the other way) is
    deducted from both directions, oldest-collected items first. Returns
    {"expenseBalances": [...], "pairAdjustments": [...]}; the input groups
    are not modified.
    """
    cloned = [
        {
            **group,
            "items": [{**item, "rawAmount": item["amount"], "autoSettled": 0} for item in group["items"]],
            "autoSettledTotal": 0,
        }
        for group in groups
    ]

    buckets: dict[tuple[str, str], dict] = {}
    for group in cloned:
        for item in group["items"]:
            a, b = str(item["from"]), str(item["to"])
            left, right = (a, b) if a < b else (b, a)
            bucket = buckets.setdefault(
                (left, right), {"left": left, "right": right, "forward": [], "reverse": []}
            )
            if a == left:
                bucket["forward"].append(item)
            else:
                bucket["reverse"].append(item)

    pair_adjustments = []
    for bucket in buckets.values():
        total_forward = sum_minor_units(bucket["forward"])
        total_reverse = sum_minor_units(bucket["reverse"])
        settle = min(total_forward, total_reverse)
        if settle <= 0:
            continue

        _waterfall(bucket["forward"], settle)
        _waterfall(bucket["reverse"], settle)
        pair_adjustments.append({"from": bucket["left"], "to": bucket["right"], "amount": settle})

    expense_balances = []
    for group in cloned:
        items = [item for item in group["items"] if item["amount"] > 0]
        if not items:
            continue
        expense_balances.append({
            **group,
            "items": items,
            "totalPending": sum_minor_units(items),
            "autoSettledTotal": sum_minor_units(group["items"], "autoSettled"),
        })

    return {"expenseBalances": expense_balances, "pairAdjustments": pair_adjustments}


def compute_netted_view(expenses: list[dict]) -> dict:
    return apply_pairwise_auto_settlement(build_expense_balance_groups(expenses))


def group_balances_for_participant(groups: list[dict], participant_id: str, direction: str) -> list[dict]:
    """Items where the participant is the debtor (outgoing) or creditor (incoming).

    Each item gains a counterpartyId; each group's amount is re-summed.
    """
    is_outgoing = direction == OUTGOING
    result = []
    for group in groups:
        items = [
            {**item, "counterpartyId": item["to"] if is_outgoing else item["from"]}
            for item in group["items"]
            if (item["from"] if is_outgoing else item["to"]) == participant_id
        ]
        if not items:
            continue
        result.append({
            **group,
            "items": items,
            "amount": sum_minor_units(items),
            "autoSettledTotal": sum_minor_units(items, "autoSettled"),
        })
    return result


def summarize_participant(view: dict, participant_id: str) -> dict:
    """You-owe / owed-to-you totals for one participant."""
    outgoing = group_balances_for_participant(view["expenseBalances"], participant_id, OUTGOING)
    incoming = group_balances_for_participant(view["expenseBalances"], participant_id, INCOMING)
    adjustments = [
        {**adj, "counterpartyId": adj["to"] if adj["from"] == participant_id else adj["from"]}
        for adj in view["pairAdjustments"]
        if participant_id in (adj["from"], adj["to"])
    ]

    total_owe = sum_minor_units(outgoing)
    total_owed = sum_minor_units(incoming)
    return {
        "participantId": participant_id,
        "outgoing": outgoing,
        "incoming": incoming,
        "adjustments": adjustments,
        "autoSettled": sum_minor_units(adjustments),
        "totalOwe": total_owe,
        "totalOwed": total_owed,
        "net": total_owed - total_owe,
    }
