"""Tests for equal expense splitting."""

import pytest

from splitnest.errors import ValidationError
from splitnest.splits import payer_share, split_expense, unique_ids


class TestSplitExpense:
    """split_expense() amounts and remainder placement."""

    def test_even_split(self):
        """10.00 across payer + 3 debtors is 2.50 each."""
        shares = split_expense(1000, "payer", ["a", "b", "c"])
        assert shares == [
            {"debtorId": "a", "amount": 250},
            {"debtorId": "b", "amount": 250},
            {"debtorId": "c", "amount": 250},
        ]
        assert payer_share(1000, 3) == 250

    def test_remainder_goes_to_debtors_not_payer(self):
        """10.01 across payer + 2 debtors: debtors 3.34 each, payer 3.33."""
        shares = split_expense(1001, "payer", ["a", "b"])
        assert [s["amount"] for s in shares] == [334, 334]
        assert payer_share(1001, 2) == 333
        assert sum(s["amount"] for s in shares) == 668

    def test_remainder_front_loaded_in_input_order(self):
        shares = split_expense(1002, "payer", ["c", "a", "b"])
        assert shares == [
            {"debtorId": "c", "amount": 251},
            {"debtorId": "a", "amount": 251},
            {"debtorId": "b", "amount": 250},
        ]

    @pytest.mark.parametrize("total", [1, 99, 1000, 1001, 7201, 12345, 99999])
    @pytest.mark.parametrize("debtor_count", [1, 2, 3, 6])
    def test_conservation(self, total, debtor_count):
        """Debtor shares plus the payer's implicit share always equal the total."""
        debtors = [f"p{i}" for i in range(debtor_count)]
        shares = split_expense(total, "payer", debtors)
        assert sum(s["amount"] for s in shares) + payer_share(total, debtor_count) == total
        assert max(s["amount"] for s in shares) - payer_share(total, debtor_count) <= 1

    def test_duplicates_are_ignored(self):
        shares = split_expense(900, "payer", ["a", "b", "a"])
        assert [s["debtorId"] for s in shares] == ["a", "b"]
        assert [s["amount"] for s in shares] == [300, 300]

    def test_empty_debtors_rejected(self):
        with pytest.raises(ValidationError, match="At least one participant"):
            split_expense(1000, "payer", [])

    def test_payer_as_debtor_rejected(self):
        with pytest.raises(ValidationError):
            split_expense(1000, "payer", ["a", "payer"])

    def test_non_positive_total_rejected(self):
        with pytest.raises(ValidationError):
            split_expense(0, "payer", ["a"])
        with pytest.raises(ValidationError):
            split_expense(-500, "payer", ["a"])


def test_unique_ids_keeps_first_occurrence():
    assert unique_ids(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
