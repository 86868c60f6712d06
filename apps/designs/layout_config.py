"""
Typed layout configuration for receipt templates.

Templates store their layout as loosely-typed columns (column order may
arrive as a list or as JSON text, positions as free strings). This module
parses and normalizes that data exactly once, at the persistence/load
boundary, into frozen dataclasses. The resolvers in
:mod:`apps.designs.layout` only ever see these normalized structures.

Normalization never raises: malformed values silently fall back to the
defaults defined here.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

ITEM_COLUMN_KEYS = ('description', 'quantity', 'price', 'total')
DEFAULT_COLUMN_ORDER = ITEM_COLUMN_KEYS

DEFAULT_ITEM_COLUMN_WIDTHS = {
    'description': 50.0,
    'quantity': 15.0,
    'price': 17.5,
    'total': 17.5,
}

COLUMN_POSITIONS = ('column1', 'column2', 'column3')
LAYOUT_COLUMN_CHOICES = (2, 3)
ALIGNMENTS = ('left', 'center', 'right')

DEFAULT_LAYOUT_COLUMNS = 2
DEFAULT_ROW_WIDTHS = (50.0, 50.0, 0.0)
DEFAULT_LABELS_POSITION = 'column1'
DEFAULT_VALUES_POSITION = 'column2'
DEFAULT_LABELS_ALIGNMENT = 'left'
DEFAULT_VALUES_ALIGNMENT = 'right'

SEPARATOR_KEYS = (
    'items_count',
    'subtotal',
    'service_charge',
    'before_tax',
    'tax',
    'total',
)
# Matches the stored column defaults: only the final total has a rule.
DEFAULT_SEPARATORS = {key: key == 'total' for key in SEPARATOR_KEYS}


def normalize_column_order(raw: Any) -> tuple[str, ...]:
    """
    Return ``raw`` as a column order tuple, or the canonical default.

    Accepts a list/tuple of keys or a JSON array string. Anything that is not
    an exact permutation of the four item column keys (missing or duplicate
    entries, unknown keys, wrong type, unparseable text) yields
    ``('description', 'quantity', 'price', 'total')``.
    """
    value = raw
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except ValueError:
            logger.debug("Unparseable column order %r, using default", raw)
            return DEFAULT_COLUMN_ORDER

    if not isinstance(value, (list, tuple)):
        return DEFAULT_COLUMN_ORDER

    if len(value) != len(ITEM_COLUMN_KEYS) or sorted(map(str, value)) != sorted(ITEM_COLUMN_KEYS):
        logger.debug("Invalid column order %r, using default", raw)
        return DEFAULT_COLUMN_ORDER

    return tuple(str(key) for key in value)


def _as_float(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _choice(value: Any, choices: tuple, default):
    return value if value in choices else default


@dataclass(frozen=True)
class RowLayout:
    """Slot layout for a label/value row (summary lines or items count)."""

    layout_columns: int = DEFAULT_LAYOUT_COLUMNS
    column_widths: tuple[float, float, float] = DEFAULT_ROW_WIDTHS
    labels_position: str = DEFAULT_LABELS_POSITION
    values_position: str = DEFAULT_VALUES_POSITION
    labels_alignment: str = DEFAULT_LABELS_ALIGNMENT
    values_alignment: str = DEFAULT_VALUES_ALIGNMENT

    def width_of(self, position: str) -> float:
        return self.column_widths[COLUMN_POSITIONS.index(position)]

    @classmethod
    def from_getter(cls, get: Callable[[str], Any], prefix: str) -> 'RowLayout':
        """
        Build a row layout from ``<prefix>_*`` attributes.

        ``get`` returns ``None`` for missing keys.
        """
        layout_columns = get(f'{prefix}_layout_columns')
        try:
            layout_columns = int(layout_columns)
        except (TypeError, ValueError):
            layout_columns = DEFAULT_LAYOUT_COLUMNS
        if layout_columns not in LAYOUT_COLUMN_CHOICES:
            layout_columns = DEFAULT_LAYOUT_COLUMNS

        widths = tuple(
            _as_float(get(f'{prefix}_column{i}_width'), DEFAULT_ROW_WIDTHS[i - 1])
            for i in (1, 2, 3)
        )

        allowed_positions = COLUMN_POSITIONS[:layout_columns]
        labels_position = _choice(get(f'{prefix}_labels_position'), allowed_positions, DEFAULT_LABELS_POSITION)
        values_position = _choice(get(f'{prefix}_values_position'), allowed_positions, DEFAULT_VALUES_POSITION)

        return cls(
            layout_columns=layout_columns,
            column_widths=widths,
            labels_position=labels_position,
            values_position=values_position,
            labels_alignment=_choice(get(f'{prefix}_labels_alignment'), ALIGNMENTS, DEFAULT_LABELS_ALIGNMENT),
            values_alignment=_choice(get(f'{prefix}_values_alignment'), ALIGNMENTS, DEFAULT_VALUES_ALIGNMENT),
        )


@dataclass(frozen=True)
class TemplateLayout:
    """Normalized layout intent of a template. Carries no monetary logic."""

    column_order: tuple[str, ...] = DEFAULT_COLUMN_ORDER
    column_visibility: Mapping[str, bool] = field(
        default_factory=lambda: {key: True for key in ITEM_COLUMN_KEYS}
    )
    column_widths: Mapping[str, float] = field(
        default_factory=lambda: dict(DEFAULT_ITEM_COLUMN_WIDTHS)
    )
    show_item_labels: bool = True
    show_currency_symbol: bool = False
    summary: RowLayout = field(default_factory=RowLayout)
    show_items_count: bool = True
    items_count: RowLayout = field(default_factory=RowLayout)
    separators: Mapping[str, bool] = field(default_factory=lambda: dict(DEFAULT_SEPARATORS))

    def separator_after(self, line_key: str) -> bool:
        return self.separators.get(line_key, False)

    @classmethod
    def from_getter(cls, get: Callable[[str], Any]) -> 'TemplateLayout':
        return cls(
            column_order=normalize_column_order(get('column_order')),
            column_visibility={
                key: _as_bool(get(f'show_{key}_column'), True)
                for key in ITEM_COLUMN_KEYS
            },
            column_widths={
                key: _as_float(get(f'item_{key}_width'), DEFAULT_ITEM_COLUMN_WIDTHS[key])
                for key in ITEM_COLUMN_KEYS
            },
            show_item_labels=_as_bool(get('show_item_labels'), True),
            show_currency_symbol=_as_bool(get('show_currency_symbol'), False),
            summary=RowLayout.from_getter(get, 'summary'),
            show_items_count=_as_bool(get('show_items_count'), True),
            items_count=RowLayout.from_getter(get, 'items_count'),
            separators={
                key: _as_bool(get(f'show_separator_after_{key}'), DEFAULT_SEPARATORS[key])
                for key in SEPARATOR_KEYS
            },
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'TemplateLayout':
        """Build from a raw dict using the template field names."""
        return cls.from_getter(data.get)

    @classmethod
    def from_template(cls, template) -> 'TemplateLayout':
        """Build from a ``ReceiptTemplate`` instance (or any object with the same attributes)."""
        return cls.from_getter(lambda name: getattr(template, name, None))
