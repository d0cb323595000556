"""Ledger error taxonomy.

Every error carries the HTTP status it is rendered with, so the API layer
and the ledger client agree on one mapping.
"""


class LedgerError(Exception):
    """Base class for ledger business errors."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Input rejected before touching any ledger state."""
    status_code = 400


class AuthorizationError(LedgerError):
    """Caller or counterparty is not allowed to perform the action."""
    status_code = 403


class NotFoundError(LedgerError):
    """Person, entry or group does not exist for the caller."""
    status_code = 404


class InvariantViolation(LedgerError):
    """Operation would break a ledger invariant."""
    status_code = 409


class InvalidTransition(InvariantViolation):
    """Entry status cannot move from its current state to the requested one."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move entry from '{current}' to '{target}'")
        self.current = current
        self.target = target


ERRORS_BY_NAME = {
    cls.__name__: cls
    for cls in (
        LedgerError,
        ValidationError,
        AuthorizationError,
        NotFoundError,
        InvariantViolation,
    )
}
