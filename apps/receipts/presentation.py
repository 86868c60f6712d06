"""
Compose the full receipt layout from a breakdown and a template layout.

The result is plain data (dataclasses, convertible with :func:`as_dict`)
shared by the preview endpoint and the image renderer.
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Optional, Sequence

from apps.designs.layout import (
    RowSlot,
    Separator,
    resolve_items_count_row,
    resolve_separator,
    resolve_summary_row,
    visible_item_columns,
)
from apps.designs.layout_config import TemplateLayout

from .calculator import Breakdown, LineItem
from .formatting import (
    DEFAULT_CURRENCY_SYMBOL,
    format_discount,
    format_money,
    format_quantity,
    format_signed_money,
)

ZERO = Decimal('0')


@dataclass(frozen=True)
class ItemCell:
    key: str
    content: str
    width_percent: float
    alignment: str


@dataclass(frozen=True)
class ItemRow:
    item_id: Optional[str]
    cells: list[ItemCell]


@dataclass(frozen=True)
class SummaryLine:
    key: str
    label: str
    value: str
    slots: list[RowSlot]
    emphasis: bool = False
    separator: Optional[Separator] = None


@dataclass(frozen=True)
class ReceiptLayout:
    header: Optional[ItemRow]
    items: list[ItemRow] = field(default_factory=list)
    summary: list[SummaryLine] = field(default_factory=list)


def _item_row(item: LineItem, layout: TemplateLayout, symbol: str) -> ItemRow:
    contents = {
        'description': item.description,
        'quantity': format_quantity(item.quantity),
        'price': format_money(item.unit_price, layout.show_currency_symbol, symbol),
        'total': format_money(item.line_total, layout.show_currency_symbol, symbol),
    }
    return ItemRow(
        item_id=item.id,
        cells=[
            ItemCell(column.key, contents[column.key], column.width_percent, column.alignment)
            for column in visible_item_columns(layout)
        ],
    )


def _header_row(layout: TemplateLayout) -> ItemRow:
    return ItemRow(
        item_id=None,
        cells=[
            ItemCell(column.key, column.label, column.width_percent, column.alignment)
            for column in visible_item_columns(layout)
        ],
    )


def compose_receipt_layout(
    items: Sequence[LineItem],
    breakdown: Breakdown,
    layout: TemplateLayout,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> ReceiptLayout:
    """
    Build the ordered rows of a receipt.

    Summary lines appear in a fixed order. Discount, service charge and tax
    lines are only shown when their amount is positive, rounding only when
    non-zero. A separator follows a line when that line's toggle is set and
    the line itself is shown.
    """
    show_symbol = layout.show_currency_symbol

    def money(amount):
        return format_money(amount, show_symbol, currency_symbol)

    lines: list[SummaryLine] = []

    def add(key, label, value, emphasis=False, slots=None):
        separator = None
        if layout.separator_after(key):
            separator = resolve_separator(layout, double=(key == 'total'))
        lines.append(SummaryLine(
            key=key,
            label=label,
            value=value,
            slots=slots if slots is not None else resolve_summary_row(label, value, layout),
            emphasis=emphasis,
            separator=separator,
        ))

    if layout.show_items_count:
        count = str(len(items))
        add('items_count', 'Items:', count, slots=resolve_items_count_row('Items:', count, layout))

    add('subtotal', 'Subtotal:', money(breakdown.subtotal))

    if breakdown.discount > ZERO:
        add('discount', 'Discount:', format_discount(breakdown.discount, show_symbol, currency_symbol))

    if breakdown.service_charge > ZERO:
        add('service_charge', 'Service Charge:', money(breakdown.service_charge))

    add('before_tax', 'Before Tax:', money(breakdown.before_tax))

    if breakdown.tax > ZERO:
        add('tax', 'Tax:', money(breakdown.tax))

    if breakdown.rounding != ZERO:
        add('rounding', 'Rounding:', format_signed_money(breakdown.rounding, show_symbol, currency_symbol))

    add('total', 'Total:', money(breakdown.total), emphasis=True)

    return ReceiptLayout(
        header=_header_row(layout) if layout.show_item_labels else None,
        items=[_item_row(item, layout, currency_symbol) for item in items],
        summary=lines,
    )


def as_dict(receipt_layout: ReceiptLayout) -> dict:
    """JSON-ready representation."""
    return asdict(receipt_layout)
