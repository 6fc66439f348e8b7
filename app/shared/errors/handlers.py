"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.portfolio.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    ConcurrentUpdateError,
    InsufficientFundsError,
    InsufficientSharesError,
    NoPositionError,
    PortfolioDomainError,
    UsernameTakenError,
    ValidationError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_409 = 409
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle malformed order or profile values."""
        logger.warning("Rejected input: %s", exc.message)
        return _error_response(HTTP_400, f"Invalid {exc.field_name}", exc.reason)

    @app.exception_handler(InsufficientFundsError)
    async def handle_insufficient_funds(
        _request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        """Handle insufficient funds errors."""
        logger.warning("Insufficient funds")
        return _error_response(HTTP_400, "Insufficient funds", exc.message)

    @app.exception_handler(InsufficientSharesError)
    async def handle_insufficient_shares(
        _request: Request, exc: InsufficientSharesError
    ) -> JSONResponse:
        """Handle sells larger than the held position."""
        logger.warning("Insufficient shares: %s", exc.symbol)
        return _error_response(HTTP_400, "Insufficient shares", exc.message)

    @app.exception_handler(NoPositionError)
    async def handle_no_position(
        _request: Request, exc: NoPositionError
    ) -> JSONResponse:
        """Handle sells of symbols that are not held."""
        logger.warning("No position: %s", exc.symbol)
        return _error_response(HTTP_400, "No position", exc.message)

    @app.exception_handler(AccountNotFoundError)
    async def handle_account_not_found(
        _request: Request, exc: AccountNotFoundError
    ) -> JSONResponse:
        """Handle missing account errors."""
        logger.warning("Account not found: %s", exc.user_id)
        return _error_response(HTTP_404, "Account not found")

    @app.exception_handler(AccountAlreadyExistsError)
    async def handle_account_exists(
        _request: Request, exc: AccountAlreadyExistsError
    ) -> JSONResponse:
        """Handle duplicate account creation."""
        logger.warning("Account already exists: %s", exc.user_id)
        return _error_response(HTTP_409, "Account already exists")

    @app.exception_handler(UsernameTakenError)
    async def handle_username_taken(
        _request: Request, exc: UsernameTakenError
    ) -> JSONResponse:
        """Handle a profile claiming another account's username."""
        logger.warning("Username already taken: %s", exc.username)
        return _error_response(HTTP_409, "Username already taken")

    @app.exception_handler(ConcurrentUpdateError)
    async def handle_concurrent_update(
        _request: Request, exc: ConcurrentUpdateError
    ) -> JSONResponse:
        """Handle orders that kept losing to concurrent writes."""
        logger.warning("Concurrent update for %s after %d attempts", exc.user_id, exc.attempts)
        return _error_response(HTTP_409, "Concurrent update, please retry")

    @app.exception_handler(PortfolioDomainError)
    async def handle_portfolio_domain(
        _request: Request, exc: PortfolioDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled portfolio domain errors."""
        logger.error("Unhandled portfolio domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
