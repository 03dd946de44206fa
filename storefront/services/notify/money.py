from decimal import Decimal, ROUND_HALF_UP


def format_brl(amount) -> str:
    """format money the pt-BR way: 1234.5 -> 'R$ 1.234,50'"""
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    # 1,234.50 -> 1.234,50
    body = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {body}"
