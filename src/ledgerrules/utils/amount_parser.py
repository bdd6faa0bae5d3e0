"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Union

AmountValue = Union[str, int, float, Decimal, None]


def parse_amount(value: AmountValue) -> Decimal:
    """Parse an entry amount into a Decimal.

    Handles various formats:
    - 123.45 (JSON number)
    - "123.45"
    - "€123.45"
    - "-123.45"
    - "1,234.56"
    - "1 234,56" (comma as decimal separator)
    - "(123.45)" (negative in parentheses)
    - None or "" (zero)

    Args:
        value: Raw amount from an entry file

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount '{value}'")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    amount_str = str(value).strip()
    if not amount_str:
        return Decimal("0")

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and inner spaces
    amount_str = re.sub(r"[$€£¥\s]", "", amount_str)

    if "," in amount_str and "." not in amount_str:
        amount_str = amount_str.replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{value}'") from e

    if is_negative:
        amount = -amount
    return amount
