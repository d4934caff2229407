class LedgerError(Exception):
    """Base class for failures surfaced to API callers as-is."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Bad input: non-positive amount, empty or invalid debtor set, unknown participant."""


class MismatchError(LedgerError):
    """A payment's from/to does not match the obligation's debtor/creditor."""


class LockedSplitError(LedgerError):
    """Amount, payer or debtors changed on an expense that already has payments."""

    status_code = 409


class NotFoundError(LedgerError):
    status_code = 404
