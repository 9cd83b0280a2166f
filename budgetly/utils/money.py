"""
Money formatting shared by the dashboard and API responses.

Usage:
    from budgetly.utils.money import format_money

    format_money(150000)          -> "₹1,50,000"
    format_money(1200.5, "$")     -> "$1,200.50"  (western grouping for non-rupee symbols)
"""
from decimal import Decimal, ROUND_HALF_UP


def _group_indian(digits: str) -> str:
    # 12345678 -> 1,23,45,678
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_money(amount, symbol: str = "₹") -> str:
    """
    Format an amount with thousands separators and a currency symbol.

    Rupee amounts use lakh/crore grouping. Fractions are shown only when
    non-zero (two places).
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    value = abs(value)
    whole, frac = f"{value:.2f}".split(".")
    grouped = _group_indian(whole) if symbol == "₹" else f"{int(whole):,}"
    text = grouped if frac == "00" else f"{grouped}.{frac}"
    return f"{sign}{symbol}{text}"


def calculate_percentage(value, total) -> int:
    """Rounded percentage of value in total; 0 when total is 0."""
    total = Decimal(str(total))
    if total == 0:
        return 0
    ratio = Decimal(str(value)) / total * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
