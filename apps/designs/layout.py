"""
Layout resolution for receipt templates.

Pure functions that turn a normalized :class:`TemplateLayout` into ordered,
renderable columns and slots. The JSON preview endpoint and the PNG
rasterizer both consume these results, so on-screen and exported receipts
stay identical.

Functions:
    resolve_item_columns: Item table columns in configured order.
    visible_item_columns: Same, restricted to visible columns.
    resolve_row: Label/value slots for a row layout.
    resolve_summary_row: ``resolve_row`` over the summary sub-layout.
    resolve_items_count_row: ``resolve_row`` over the items-count sub-layout.
    resolve_separator: Geometry of a separator under the value columns.
"""

from dataclasses import dataclass

from .layout_config import COLUMN_POSITIONS, RowLayout, TemplateLayout

ITEM_COLUMN_LABELS = {
    'description': 'Item',
    'quantity': 'Qty',
    'price': 'Price',
    'total': 'Total',
}

ITEM_COLUMN_ALIGNMENTS = {
    'description': 'left',
    'quantity': 'center',
    'price': 'right',
    'total': 'right',
}

SEPARATOR_DASHED = 'dashed'
SEPARATOR_DOUBLE = 'double'


@dataclass(frozen=True)
class ItemColumn:
    key: str
    label: str
    visible: bool
    width_percent: float
    alignment: str


@dataclass(frozen=True)
class RowSlot:
    column: str
    content: str
    width_percent: float
    alignment: str


@dataclass(frozen=True)
class Separator:
    width_percent: float
    margin_left_percent: float
    style: str


def resolve_item_columns(layout: TemplateLayout) -> list[ItemColumn]:
    """Return all four item columns in the layout's column order."""
    return [
        ItemColumn(
            key=key,
            label=ITEM_COLUMN_LABELS[key],
            visible=layout.column_visibility[key],
            width_percent=layout.column_widths[key],
            alignment=ITEM_COLUMN_ALIGNMENTS[key],
        )
        for key in layout.column_order
    ]


def visible_item_columns(layout: TemplateLayout) -> list[ItemColumn]:
    return [column for column in resolve_item_columns(layout) if column.visible]


def resolve_row(label: str, value: str, row_layout: RowLayout) -> list[RowSlot]:
    """
    Build exactly ``row_layout.layout_columns`` slots for one label/value row.

    A slot holds the label if it is the labels position, the value if it is
    the values position, and nothing otherwise. When both positions point at
    the same slot the label and value share it, joined by a space, and take
    the labels alignment. That case is kept as-is pending product review.

    Example::

        >>> resolve_row('Total:', '$65.00', RowLayout())
        [RowSlot(column='column1', content='Total:', width_percent=50.0, alignment='left'),
         RowSlot(column='column2', content='$65.00', width_percent=50.0, alignment='right')]
    """
    slots = []
    for column in COLUMN_POSITIONS[:row_layout.layout_columns]:
        is_label = column == row_layout.labels_position
        is_value = column == row_layout.values_position

        if is_label and is_value:
            content = f"{label} {value}"
            alignment = row_layout.labels_alignment
        elif is_label:
            content = label
            alignment = row_layout.labels_alignment
        elif is_value:
            content = value
            alignment = row_layout.values_alignment
        else:
            content = ''
            alignment = 'left'

        slots.append(RowSlot(
            column=column,
            content=content,
            width_percent=row_layout.width_of(column),
            alignment=alignment,
        ))
    return slots


def resolve_summary_row(label: str, value: str, layout: TemplateLayout) -> list[RowSlot]:
    return resolve_row(label, value, layout.summary)


def resolve_items_count_row(label: str, value: str, layout: TemplateLayout) -> list[RowSlot]:
    return resolve_row(label, value, layout.items_count)


def resolve_separator(layout: TemplateLayout, double: bool = False) -> Separator:
    """
    Separator geometry for summary lines.

    Separators span only the value-bearing columns of the summary layout
    (column2, or column2 + column3 in a 3-column layout) and are right
    aligned, so they end under the numbers instead of crossing the row.
    """
    summary = layout.summary
    width = summary.width_of('column2')
    if summary.layout_columns == 3:
        width += summary.width_of('column3')

    return Separator(
        width_percent=width,
        margin_left_percent=100 - width,
        style=SEPARATOR_DOUBLE if double else SEPARATOR_DASHED,
    )
