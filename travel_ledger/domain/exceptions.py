class TravelLedgerError(Exception):
    """
    Base exception for all domain-level errors
    inside the travel ledger.
    """


class ValidationError(TravelLedgerError):
    """Raised when input is missing, malformed or out of range."""


class NotFoundError(TravelLedgerError):
    """Raised when a referenced entity is absent from the ledger."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} does not exist")


class StateConflictError(TravelLedgerError):
    """Raised when an operation is invalid for the current entity state."""


class InvalidStateTransitionError(StateConflictError):
    """
    Raised when an illegal booking state transition is attempted.
    """

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state}"
        )
        super().__init__(message)


class DuplicateEntityError(StateConflictError):
    """Raised when an entity id is already taken."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} already exists")


class InactiveEntityError(StateConflictError):
    """Raised when a deregistered provider or customer is used."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} is not active")


class SeatUnavailableError(StateConflictError):
    """Raised when a ticket or one of its seats cannot be reserved."""


class PriceMismatchError(StateConflictError):
    """Raised when the ticket price drifted between booking and payment."""

    def __init__(self, expected: float, actual: float):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"payment amount mismatch: expected {expected:.2f}, got {actual:.2f}"
        )


class SerializationError(TravelLedgerError):
    """Raised when stored bytes cannot be decoded into an entity."""


class LedgerQueryError(TravelLedgerError):
    """Raised when a rich-query selector is malformed."""
