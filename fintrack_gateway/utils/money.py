"""Rupee amount formatting"""

from decimal import Decimal, ROUND_HALF_UP


def format_inr(amount: float) -> str:
    """
    Format as whole rupees with Indian digit grouping.

    Example:
        150000.4 -> "1,50,000"
        -1234567 -> "-12,34,567"
    """
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))

    if len(digits) <= 3:
        return sign + digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups + [tail])


def format_pct(value: float, places: int = 0) -> str:
    """
    Fixed-point percentage text with ties rounded away from zero.

    Example:
        82.5 -> "83" (places=0)
        0.25 -> "0.3" (places=1)
    """
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
