"""
Ticker symbol normalization.

Symbols are matched case-insensitively and stored in canonical uppercase.
"""

from app.domain.portfolio.errors import ValidationError


def normalize_symbol(symbol: object) -> str:
    """Return the canonical form of a ticker symbol.

    Args:
        symbol: Raw symbol as received from the caller.

    Returns:
        The trimmed, uppercased symbol.

    Raises:
        ValidationError: If the symbol is not a string, is blank,
            or contains inner whitespace.
    """
    if not isinstance(symbol, str):
        raise ValidationError("symbol", "must be a string")
    canonical = symbol.strip().upper()
    if not canonical:
        raise ValidationError("symbol", "must not be blank")
    if any(ch.isspace() for ch in canonical):
        raise ValidationError("symbol", "must not contain whitespace")
    return canonical
