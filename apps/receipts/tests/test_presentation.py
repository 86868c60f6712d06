"""
Receipt layout composition tests.

Pure functions only, no database.
"""

import pytest
from decimal import Decimal

from apps.designs.layout_config import TemplateLayout
from apps.receipts.calculator import ChargeConfig, DEFAULT_CHARGE_CONFIG, LineItem, compute
from apps.receipts.presentation import as_dict, compose_receipt_layout


@pytest.fixture
def items():
    return [
        LineItem(id='1', description='Latte', quantity=2, unit_price=Decimal('25.00')),
        LineItem(id='2', description='Bagel', quantity=1, unit_price=Decimal('15.00')),
    ]


def summary_keys(receipt_layout):
    return [line.key for line in receipt_layout.summary]


class TestComposeReceiptLayout:

    def test_default_lines(self, items):
        result = compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), TemplateLayout())

        assert summary_keys(result) == ['items_count', 'subtotal', 'before_tax', 'total']
        total = result.summary[-1]
        assert total.value == '65.00'
        assert total.emphasis is True
        assert [slot.content for slot in total.slots] == ['Total:', '65.00']

    def test_all_charges_in_fixed_order(self, items):
        config = ChargeConfig(
            tax_enabled=True,
            service_charge_enabled=True,
            discount_enabled=True,
            discount_amount=Decimal('5'),
            rounding_enabled=True,
            rounding_amount=Decimal('-0.02'),
        )
        layout = TemplateLayout.from_mapping({'show_currency_symbol': True})

        result = compose_receipt_layout(items, compute(items, config), layout)

        assert summary_keys(result) == [
            'items_count', 'subtotal', 'discount', 'service_charge',
            'before_tax', 'tax', 'rounding', 'total',
        ]
        values = {line.key: line.value for line in result.summary}
        assert values['discount'] == '-$5.00'
        assert values['service_charge'] == '$3.00'
        assert values['rounding'] == '-$0.02'

    def test_items_count_uses_its_own_layout(self, items):
        layout = TemplateLayout.from_mapping({
            'items_count_layout_columns': 3,
            'items_count_labels_position': 'column2',
            'items_count_values_position': 'column3',
            'items_count_column1_width': 20,
            'items_count_column2_width': 40,
            'items_count_column3_width': 40,
        })

        result = compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), layout)

        count = result.summary[0]
        assert count.key == 'items_count'
        assert [slot.content for slot in count.slots] == ['', 'Items:', '2']
        assert len(result.summary[1].slots) == 2

    def test_hidden_items_count(self, items):
        layout = TemplateLayout.from_mapping({'show_items_count': False})

        result = compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), layout)

        assert 'items_count' not in summary_keys(result)

    def test_separator_only_on_shown_lines(self, items):
        layout = TemplateLayout.from_mapping({
            'show_separator_after_tax': True,
            'show_separator_after_subtotal': True,
        })

        result = compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), layout)

        separators = {line.key: line.separator for line in result.summary}
        assert 'tax' not in separators
        assert separators['subtotal'].style == 'dashed'
        assert separators['before_tax'] is None
        assert separators['total'].style == 'double'

    def test_item_rows_follow_column_order_and_visibility(self, items):
        layout = TemplateLayout.from_mapping({
            'column_order': ['total', 'description', 'quantity', 'price'],
            'show_price_column': False,
        })

        result = compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), layout)

        assert [cell.content for cell in result.header.cells] == ['Total', 'Item', 'Qty']
        assert [cell.content for cell in result.items[0].cells] == ['50.00', 'Latte', '2']
        assert result.items[0].item_id == '1'

    def test_header_hidden_without_item_labels(self, items):
        layout = TemplateLayout.from_mapping({'show_item_labels': False})

        result = compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), layout)

        assert result.header is None

    def test_as_dict_is_plain_data(self, items):
        result = as_dict(compose_receipt_layout(items, compute(items, DEFAULT_CHARGE_CONFIG), TemplateLayout()))

        assert result['summary'][-1]['slots'][1]['content'] == '65.00'
        assert result['items'][1]['cells'][0]['content'] == 'Bagel'
