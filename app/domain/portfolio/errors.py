"""
Domain-specific errors for the portfolio bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class PortfolioDomainError(Exception):
    """Base error for all portfolio domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(PortfolioDomainError):
    """Raised when an order carries a malformed or non-positive value."""

    def __init__(self, field_name: str, reason: str) -> None:
        super().__init__(f"Invalid {field_name}: {reason}")
        self.field_name = field_name
        self.reason = reason


class InsufficientFundsError(PortfolioDomainError):
    """Raised when the balance cannot cover the cost of a purchase."""

    def __init__(self, required: str, available: str) -> None:
        super().__init__(
            f"Insufficient funds: required {required}, available {available}"
        )
        self.required = required
        self.available = available


class InsufficientSharesError(PortfolioDomainError):
    """Raised when selling more shares than the position holds."""

    def __init__(self, symbol: str, requested: int, held: int) -> None:
        super().__init__(
            f"Insufficient shares of {symbol}: requested {requested}, held {held}"
        )
        self.symbol = symbol
        self.requested = requested
        self.held = held


class NoPositionError(PortfolioDomainError):
    """Raised when selling a symbol the portfolio does not hold."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"No position held for symbol: {symbol}")
        self.symbol = symbol


class AccountNotFoundError(PortfolioDomainError):
    """Raised when no account exists for a user."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Account not found: {user_id}")
        self.user_id = user_id


class AccountAlreadyExistsError(PortfolioDomainError):
    """Raised when opening an account for a user that already has one."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Account already exists: {user_id}")
        self.user_id = user_id


class StaleAccountError(PortfolioDomainError):
    """Raised by a repository when a write is based on an outdated version."""

    def __init__(self, user_id: str, expected_version: int) -> None:
        super().__init__(
            f"Account {user_id} changed since version {expected_version}"
        )
        self.user_id = user_id
        self.expected_version = expected_version


class ConcurrentUpdateError(PortfolioDomainError):
    """Raised when an order keeps losing the race against concurrent writes."""

    def __init__(self, user_id: str, attempts: int) -> None:
        super().__init__(
            f"Account {user_id} was modified concurrently; "
            f"gave up after {attempts} attempts"
        )
        self.user_id = user_id
        self.attempts = attempts


class UsernameTakenError(PortfolioDomainError):
    """Raised when a profile claims a username another account holds."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username already taken: {username}")
        self.username = username
