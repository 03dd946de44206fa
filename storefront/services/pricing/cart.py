from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

CENT = Decimal("0.01")


class CartLineMismatch(ValueError):
    """raised when a client-sent line total disagrees with its prices."""


def money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def addons_unit_total(addons: Iterable) -> Decimal:
    return sum((money(a.unit_price) * a.quantity for a in addons), Decimal("0"))


def line_total(line) -> Decimal:
    """(unit price + addons) * quantity"""
    return money((money(line.unit_price) + addons_unit_total(line.addons)) * line.quantity)


def check_line(line) -> Decimal:
    total = line_total(line)
    sent = getattr(line, "line_total", None)
    if sent is not None and abs(money(sent) - total) > CENT:
        raise CartLineMismatch(f"Line total for {line.product_name} should be {total}, got {money(sent)}")
    return total


def subtotal(lines: Iterable) -> Decimal:
    return money(sum((check_line(line) for line in lines), Decimal("0")))


def item_count(lines: Iterable) -> int:
    return sum(line.quantity for line in lines)


def side_names(line) -> List[str]:
    return [a.name for a in line.addons if a.is_side]


def extras_description(line) -> Optional[str]:
    """legacy comma-joined sides string stored on order items."""
    return ", ".join(side_names(line)) or None
