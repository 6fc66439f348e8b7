"""
Domain service: Portfolio ledger.

Pure business logic for applying orders to an account's cash balance
and holdings. No framework imports. No IO. No side effects.

Operations:
    - Buy: debit cost, merge into position at weighted average cost
    - Sell: credit proceeds, reduce position, drop it at zero
    - Deposit: credit cash

Precision model:
    All money is Decimal. Balance arithmetic is exact: cost, proceeds
    and balances are computed in a context wide enough that no digit is
    ever rounded away, and any operation that would still round raises
    instead of silently losing cash. A position's average cost is the
    only rounded value; it is kept to ``average_cost_places`` decimals
    (ROUND_HALF_EVEN) after each buy into an existing position, and
    sells never touch it.
"""

import math
from dataclasses import replace
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    Inexact,
    InvalidOperation,
    Rounded,
    localcontext,
)
from fractions import Fraction

from app.domain.portfolio.entities import Account, Position
from app.domain.portfolio.errors import (
    InsufficientFundsError,
    InsufficientSharesError,
    NoPositionError,
    ValidationError,
)
from app.domain.portfolio.symbols import normalize_symbol

DEFAULT_AVERAGE_COST_PLACES = 8
MAX_POSITION_SHARES = 10**15  # fits a signed 64-bit column with room to spare

# Never rounds: only additions, subtractions and multiplications run here,
# and their exact results are always representable.
_EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    rounding=ROUND_HALF_EVEN,
    traps=[Inexact, Rounded, InvalidOperation],
)


def _to_decimal(field_name: str, value: object) -> Decimal:
    """Convert a numeric input to a finite, strictly positive Decimal."""
    # bool is an int subclass; True must not buy one share
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(field_name, "must be finite")
        amount = Decimal(str(value))
    else:
        raise ValidationError(field_name, "must be a number")

    if not amount.is_finite():
        raise ValidationError(field_name, "must be finite")
    if amount <= 0:
        raise ValidationError(field_name, "must be positive")
    return amount


def _to_quantity(value: object) -> int:
    """Convert a share count to a strictly positive, bounded int."""
    amount = _to_decimal("quantity", value)
    if amount != amount.to_integral_value():
        raise ValidationError("quantity", "must be a whole number of shares")
    if amount > MAX_POSITION_SHARES:
        raise ValidationError("quantity", f"must not exceed {MAX_POSITION_SHARES}")
    return int(amount)


def _exact(field_name: str, operation):
    """Run a money computation in the exact context.

    A result that cannot be represented without rounding is reported
    against the input that produced it.
    """
    try:
        with localcontext(_EXACT_CONTEXT):
            return operation()
    except (Inexact, Rounded, InvalidOperation) as exc:
        raise ValidationError(field_name, "is out of the supported range") from exc


class PortfolioLedger:
    """Domain service applying buy, sell and deposit orders to an account.

    Every operation takes an Account and returns a new Account. The input
    is never modified, so a rejected order leaves the caller's state
    exactly as it was.
    """

    def __init__(
        self, average_cost_places: int = DEFAULT_AVERAGE_COST_PLACES
    ) -> None:
        """Initialize the ledger.

        Args:
            average_cost_places: Decimal places kept on recomputed average costs.
        """
        self._average_cost_places = average_cost_places

    def _average_cost(self, total_cost: Decimal, quantity: int) -> Decimal:
        """Weighted average cost per share, rounded to the configured places."""
        scaled = Fraction(total_cost) * 10**self._average_cost_places / quantity
        # round() on a Fraction is exact and rounds half to even
        return Decimal(round(scaled)).scaleb(
            -self._average_cost_places, context=_EXACT_CONTEXT
        )

    def apply_buy(
        self, state: Account, symbol: object, quantity: object, price: object
    ) -> Account:
        """Buy shares, debiting their cost from the balance.

        Args:
            state: Current account state.
            symbol: Ticker symbol, any case, surrounding whitespace allowed.
            quantity: Whole number of shares, > 0.
            price: Price per share, > 0.

        Returns:
            The updated account.

        Raises:
            ValidationError: If symbol, quantity or price is invalid, or the
                resulting position would exceed the share limit.
            InsufficientFundsError: If the cost exceeds the balance.
        """
        canonical = normalize_symbol(symbol)
        shares = _to_quantity(quantity)
        unit_price = _to_decimal("price", price)

        cost = _exact("price", lambda: unit_price * shares)
        if cost > state.balance:
            raise InsufficientFundsError(required=str(cost), available=str(state.balance))

        existing = state.find_position(canonical)
        if existing is None:
            positions = state.positions + (
                Position(symbol=canonical, quantity=shares, average_cost=unit_price),
            )
        else:
            new_quantity = existing.quantity + shares
            if new_quantity > MAX_POSITION_SHARES:
                raise ValidationError(
                    "quantity", f"position would exceed {MAX_POSITION_SHARES} shares"
                )
            total_cost = _exact("price", lambda: existing.cost_basis + cost)
            updated = Position(
                symbol=canonical,
                quantity=new_quantity,
                average_cost=self._average_cost(total_cost, new_quantity),
            )
            positions = tuple(
                updated if p.symbol == canonical else p for p in state.positions
            )

        balance = _exact("price", lambda: state.balance - cost)
        return replace(state, balance=balance, positions=positions)

    def apply_sell(
        self, state: Account, symbol: object, quantity: object, price: object
    ) -> Account:
        """Sell shares, crediting the proceeds to the balance.

        The average cost of the remaining shares is unchanged. A position
        sold down to zero is removed from the portfolio.

        Raises:
            ValidationError: If symbol, quantity or price is invalid.
            NoPositionError: If the symbol is not held.
            InsufficientSharesError: If more shares are sold than held.
        """
        canonical = normalize_symbol(symbol)
        shares = _to_quantity(quantity)
        unit_price = _to_decimal("price", price)

        existing = state.find_position(canonical)
        if existing is None:
            raise NoPositionError(canonical)
        if shares > existing.quantity:
            raise InsufficientSharesError(canonical, shares, existing.quantity)

        balance = _exact("price", lambda: state.balance + unit_price * shares)
        remaining = existing.quantity - shares
        if remaining == 0:
            positions = tuple(p for p in state.positions if p.symbol != canonical)
        else:
            reduced = replace(existing, quantity=remaining)
            positions = tuple(
                reduced if p.symbol == canonical else p for p in state.positions
            )

        return replace(state, balance=balance, positions=positions)

    def apply_deposit(self, state: Account, amount: object) -> Account:
        """Credit cash to the balance. No upper bound is enforced.

        Raises:
            ValidationError: If amount is not a finite positive number.
        """
        credit = _to_decimal("amount", amount)
        return replace(state, balance=_exact("amount", lambda: state.balance + credit))
