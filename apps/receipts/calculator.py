"""
Charge calculation for receipts.

This module turns a list of line items plus a charge configuration into the
ordered breakdown of monetary amounts shown on a receipt, stored on the
record and drawn on the exported image.

The order of operations is fixed::

    subtotal        = sum(quantity * unit_price)
    discount        = discount_amount if discount_enabled else 0
    after_discount  = max(0, subtotal - discount)
    service_charge  = after_discount * service_rate / 100 if enabled else 0
    before_tax      = after_discount + service_charge
    tax             = before_tax * tax_rate / 100 if enabled else 0
    rounding        = rounding_amount if rounding_enabled else 0  (signed)
    total           = before_tax + tax + rounding

All arithmetic uses ``Decimal`` at full precision. Amounts are quantized to
cents only at the presentation/persistence boundary (see
:meth:`Breakdown.quantized` and :mod:`apps.receipts.formatting`).

Example::

    >>> items = [LineItem(id='1', description='Latte', quantity=2, unit_price=Decimal('25.00')),
    ...          LineItem(id='2', description='Bagel', quantity=1, unit_price=Decimal('15.00'))]
    >>> compute(items, DEFAULT_CHARGE_CONFIG).total
    Decimal('65.00')
"""

from dataclasses import dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence

from .formatting import quantize_money

ZERO = Decimal('0')
HUNDRED = Decimal('100')

DEFAULT_TAX_RATE = Decimal('8.5')
DEFAULT_SERVICE_CHARGE_RATE = Decimal('5.0')

# Largest amount a receipt stores (DecimalField max_digits=12, decimal_places=2).
MAX_AMOUNT = Decimal('9999999999.99')
MAX_QUANTITY = 1_000_000


def to_decimal(value: Any) -> Decimal:
    """Convert a number or numeric string to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")


@dataclass(frozen=True)
class LineItem:
    """A single receipt row. ``id`` is unique within its receipt only."""

    id: str
    description: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LineItem':
        """Build a line item from its stored JSON form."""
        return cls(
            id=str(data['id']),
            description=str(data.get('description', '')),
            quantity=int(data.get('quantity', 0)),
            unit_price=to_decimal(data.get('unit_price', '0')),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'description': self.description,
            'quantity': self.quantity,
            'unit_price': str(self.unit_price),
        }


@dataclass(frozen=True)
class ChargeConfig:
    """Charge toggles and their rates/amounts for one receipt."""

    tax_enabled: bool = False
    tax_rate_percent: Decimal = DEFAULT_TAX_RATE
    service_charge_enabled: bool = False
    service_charge_rate_percent: Decimal = DEFAULT_SERVICE_CHARGE_RATE
    discount_enabled: bool = False
    discount_amount: Decimal = ZERO
    rounding_enabled: bool = False
    rounding_amount: Decimal = ZERO

    def with_changes(self, **changes) -> 'ChargeConfig':
        return replace(self, **changes)


# Single source for default rates/flags. Template model defaults and template
# seeding both read from here.
DEFAULT_CHARGE_CONFIG = ChargeConfig()


@dataclass(frozen=True)
class Breakdown:
    """Full-precision result of :func:`compute`."""

    subtotal: Decimal
    discount: Decimal
    after_discount: Decimal
    service_charge: Decimal
    before_tax: Decimal
    tax: Decimal
    rounding: Decimal
    total: Decimal

    def quantized(self) -> dict[str, Decimal]:
        """
        Return every amount rounded to cents, keyed by field name.

        Amounts beyond the decimal context's precision cannot be rounded;
        check :meth:`fits` first for unvalidated input.
        """
        return {
            'subtotal': quantize_money(self.subtotal),
            'discount': quantize_money(self.discount),
            'after_discount': quantize_money(self.after_discount),
            'service_charge': quantize_money(self.service_charge),
            'before_tax': quantize_money(self.before_tax),
            'tax': quantize_money(self.tax),
            'rounding': quantize_money(self.rounding),
            'total': quantize_money(self.total),
        }

    def fits(self, max_amount: Decimal = MAX_AMOUNT) -> bool:
        """
        True when every amount, rounded to cents, is within ``max_amount``.

        Amounts too large to round are rejected before rounding, so this
        never raises.
        """
        for f in fields(self):
            amount = abs(getattr(self, f.name))
            if amount > max_amount + 1:
                return False
            if quantize_money(amount) > max_amount:
                return False
        return True


def compute(items: Sequence[LineItem], config: ChargeConfig) -> Breakdown:
    """
    Compute the receipt breakdown.

    Inputs are expected to be validated already (non-negative quantities and
    prices); this function never raises for such inputs and has no side
    effects.

    Args:
        items: Line items in display order. Order does not affect the result.
        config: Charge toggles and rates.

    Returns:
        Breakdown with full-precision Decimal amounts.
    """
    subtotal = sum((item.quantity * item.unit_price for item in items), ZERO)

    discount = config.discount_amount if config.discount_enabled else ZERO
    after_discount = max(ZERO, subtotal - discount)

    if config.service_charge_enabled:
        service_charge = after_discount * config.service_charge_rate_percent / HUNDRED
    else:
        service_charge = ZERO

    before_tax = after_discount + service_charge

    if config.tax_enabled:
        tax = before_tax * config.tax_rate_percent / HUNDRED
    else:
        tax = ZERO

    rounding = config.rounding_amount if config.rounding_enabled else ZERO
    total = before_tax + tax + rounding

    return Breakdown(
        subtotal=subtotal,
        discount=discount,
        after_discount=after_discount,
        service_charge=service_charge,
        before_tax=before_tax,
        tax=tax,
        rounding=rounding,
        total=total,
    )
