"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation


def normalize_decimal_input(value: str) -> str:
    """
    Normalize an amount typed by a user: comma decimal separator becomes a dot

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.strip().replace(",", ".")


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Validate a money amount given as text

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, "At most 2 decimal places")
    """
    normalized = normalize_decimal_input(value)

    try:
        Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Invalid amount"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"At most {max_decimal_places} decimal places"

    return True, None


def to_positive_amount(value, max_decimal_places: int = 2) -> Decimal:
    """
    Convert int / float / str / Decimal into a positive, finite Decimal

    Raises:
        ValueError: not a number, not finite, too many decimals or <= 0
    """
    if isinstance(value, bool):
        raise ValueError("Invalid amount")
    if isinstance(value, str):
        is_valid, error = validate_decimal_amount(value, max_decimal_places)
        if not is_valid:
            raise ValueError(error)
        amount = Decimal(normalize_decimal_input(value))
    else:
        try:
            amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise ValueError("Invalid amount") from None

    if not amount.is_finite():
        raise ValueError("Amount must be a finite number")
    if amount <= 0:
        raise ValueError("Amount must be greater than zero")
    if amount.as_tuple().exponent < -max_decimal_places:
        raise ValueError(f"At most {max_decimal_places} decimal places")
    return amount
