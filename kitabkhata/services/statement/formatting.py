"""Rupee formatting used on screen and on printed statements."""

from decimal import ROUND_HALF_UP, Decimal


def group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Decimal, symbol: str = "₹") -> str:
    """
    ₹1,500 / ₹1,00,250.50 / -₹20

    Paise are shown only when there are any.
    """
    value = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, paise = f"{abs(value):.2f}".partition(".")
    text = group_indian(whole)
    if paise != "00":
        text = f"{text}.{paise}"
    return f"{sign}{symbol}{text}"
