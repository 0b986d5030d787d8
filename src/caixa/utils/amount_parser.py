"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENTS = Decimal("0.01")

THOUSANDS_ONLY = re.compile(r"^[1-9]\d{0,2}([.,])\d{3}(?:\1\d{3})*$")


def to_cents(value: Decimal | int | str) -> Decimal:
    """Quantize a value to two decimal places (centavos), rounding half up."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "R$ 123,45"
    - "-123.45"
    - "1.234,56" (Brazilian grouping)
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "1.234" (thousands only, a lone comma stays a decimal separator)

    More than two decimal places is rejected rather than rounded.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount quantized to centavos

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str).strip()

    amount_str = amount_str.replace(" ", "")
    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]

    grouping = THOUSANDS_ONLY.match(amount_str)
    if grouping and not (grouping.group(1) == "," and amount_str.count(",") == 1):
        # "1.234" or "1,234,567": separators only group thousands
        integer, fraction = amount_str.replace(grouping.group(1), ""), ""
    else:
        # Whichever separator comes last is the decimal separator
        decimal_sep = "," if amount_str.rfind(",") > amount_str.rfind(".") else "."
        group_sep = "." if decimal_sep == "," else ","
        if decimal_sep in amount_str:
            integer, _, fraction = amount_str.rpartition(decimal_sep)
            if decimal_sep in integer or not fraction:
                raise ValueError(f"Could not parse amount '{amount_str}'")
        else:
            integer, fraction = amount_str, ""
        integer = integer.replace(group_sep, "")

    if not (integer or fraction) or not (integer + fraction).isdigit():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if len(fraction) > 2:
        raise ValueError(f"Amount '{amount_str}' has more than two decimal places")

    try:
        amount = to_cents(Decimal(f"{integer or '0'}.{fraction or '0'}"))
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}") from e
    return -amount if is_negative else amount


def format_brl(amount: Decimal | int) -> str:
    """Format an amount as Brazilian reais, e.g. ``R$ 1.234,56``."""
    value = to_cents(amount)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}"
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {grouped}"
