"""
Exception types.

Every error a service raises on purpose derives from MinefundError, so
callers can tell a refused business operation from an infrastructure
failure (SQLAlchemyError and friends propagate unchanged).
"""


class MinefundError(Exception):
    """Base class for domain errors."""


# Not found

class NotFoundError(MinefundError):
    """Raised when a referenced entity does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when a user does not exist."""


class BeneficiaryNotFoundError(UserNotFoundError):
    """Raised when the user who triggered a commission event does not exist."""


class DepositNotFoundError(NotFoundError):
    """Raised when a deposit does not exist."""


class PlanNotFoundError(NotFoundError):
    """Raised when a plan does not exist."""


class InvestmentNotFoundError(NotFoundError):
    """Raised when an investment does not exist or belongs to another user."""


class WithdrawalNotFoundError(NotFoundError):
    """Raised when a withdrawal does not exist."""


class SettingsNotFoundError(NotFoundError):
    """Raised when the admin_settings row has not been created."""


class ReferralCodeNotFoundError(NotFoundError):
    """Raised when a referral code matches no user."""


# Validation

class InvalidAmountError(MinefundError, ValueError):
    """Raised when an amount is non-positive or outside configured limits."""


class InvalidStatusTransitionError(MinefundError):
    """Raised when an entity is not in a status that allows the operation."""

    def __init__(self, entity: str, entity_id: int, status: str, action: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.status = status
        self.action = action
        super().__init__(
            f"Cannot {action} {entity} {entity_id} in status '{status}'"
        )


class InsufficientBalanceError(MinefundError):
    """Raised when a debit would take a balance below zero."""

    def __init__(self, user_id: int, requested: object) -> None:
        self.user_id = user_id
        self.requested = requested
        super().__init__(
            f"Insufficient balance for user {user_id}: requested {requested}"
        )


class ReferralLoopError(MinefundError):
    """Raised when a referrer link would refer a user to itself or close a cycle."""


class NothingToCollectError(MinefundError):
    """Raised when an investment has no collectable days."""


class WithdrawalWindowClosedError(MinefundError):
    """Raised when a withdrawal is requested outside the configured window."""


# Commissions

class CommissionError(MinefundError):
    """Base class for commission engine errors."""


class RatePolicyUnavailableError(CommissionError):
    """Raised when commission rates cannot be loaded or are invalid."""


class DuplicateCommissionEventError(CommissionError):
    """Raised when commissions were already paid for a triggering event."""

    def __init__(self, event_type: str, source_id: int) -> None:
        self.event_type = event_type
        self.source_id = source_id
        super().__init__(
            f"Commissions already applied for {event_type} event {source_id}"
        )


class CommissionWalkError(CommissionError):
    """Raised when a commission walk fails; no level of the walk was applied."""

    def __init__(self, event_type: str, source_id: int, level: int) -> None:
        self.event_type = event_type
        self.source_id = source_id
        self.level = level
        super().__init__(
            f"Commission walk for {event_type} event {source_id} "
            f"failed at level {level}; all levels rolled back"
        )


class UserAlreadyExistsError(MinefundError):
    """Raised when registering an email that is already taken."""
