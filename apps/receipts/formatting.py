"""Money and quantity formatting used at the presentation/persistence boundary."""

from decimal import Decimal, ROUND_HALF_UP

MONEY_QUANTUM = Decimal('0.01')
DEFAULT_CURRENCY_SYMBOL = '$'


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, half away from zero. Never returns ``-0.00``."""
    value = Decimal(amount).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
    if value.is_zero():
        return value.copy_abs()
    return value


def format_money(amount: Decimal, show_symbol: bool = False, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Format an amount with two decimals.

    >>> format_money(Decimal('74.05125'), show_symbol=True)
    '$74.05'
    """
    value = quantize_money(amount)
    if value < 0:
        return f"-{symbol if show_symbol else ''}{-value}"
    return f"{symbol if show_symbol else ''}{value}"


def format_discount(amount: Decimal, show_symbol: bool = False, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Discounts are displayed as a deduction: ``-$5.00``."""
    return '-' + format_money(abs(amount), show_symbol, symbol)


def format_signed_money(amount: Decimal, show_symbol: bool = False, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Explicit sign before the symbol: ``+$0.05`` / ``-$0.05``."""
    sign = '-' if quantize_money(amount) < 0 else '+'
    return sign + format_money(abs(amount), show_symbol, symbol)


def format_quantity(quantity: int) -> str:
    return str(int(quantity))


def format_percent(rate: Decimal) -> str:
    """``Decimal('8.50')`` -> ``'8.5%'``"""
    text = format(Decimal(rate).normalize(), 'f')
    return f"{text}%"
