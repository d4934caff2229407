"""Equal splitting of an expense between the payer and its debtors."""

from splitnest.errors import ValidationError


def unique_ids(ids: list[str]) -> list[str]:
    """De-duplicate ids, keeping first-occurrence order."""
    seen: set[str] = set()
    result: list[str] = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def payer_share(total: int, debtor_count: int) -> int:
    """The payer's implicit (never stored) share in cents."""
    return total // (debtor_count + 1)


def split_expense(total: int, payer_id: str, debtor_ids: list[str]) -> list[dict]:
    """Split `total` cents into one share per debtor.

    The payer counts as one of n + 1 equal shares but gets no stored share.
    Remainder cents go one each to the first debtors in input order, so the
    payer's implicit share is always the floor.

    Returns [{"debtorId": str, "amount": int}] in debtor input order.
    """
    if total <= 0:
        raise ValidationError("Amount must be greater than zero")

    debtors = unique_ids(debtor_ids)
    if not debtors:
        raise ValidationError("At least one participant must owe this expense")
    if payer_id in debtors:
        raise ValidationError("The payer cannot also owe this expense")

    divisor = len(debtors) + 1
    base = total // divisor
    remainder = total - base * divisor

    return [
        {"debtorId": debtor_id, "amount": base + (1 if i < remainder else 0)}
        for i, debtor_id in enumerate(debtors)
    ]
