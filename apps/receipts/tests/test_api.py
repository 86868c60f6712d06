import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.receipts.models import Receipt


PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


# =============================================================================
# Receipt CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestReceiptList:
    """Tests for GET /api/receipts/"""

    def test_owner_sees_private_and_public(self, owner_client, receipt, public_receipt):
        url = reverse('receipts:receipt-list')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2

    def test_other_user_sees_only_public(self, other_client, receipt, public_receipt):
        url = reverse('receipts:receipt-list')
        response = other_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [r['id'] for r in response.data['results']] == [str(public_receipt.id)]

    def test_anonymous_sees_only_public(self, api_client, receipt, public_receipt):
        url = reverse('receipts:receipt-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_scope_mine(self, other_client, public_receipt):
        url = reverse('receipts:receipt-list')
        response = other_client.get(url, {'scope': 'mine'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 0

    def test_invalid_scope(self, owner_client):
        url = reverse('receipts:receipt-list')
        response = owner_client.get(url, {'scope': 'everything'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_includes_item_count(self, owner_client, receipt):
        url = reverse('receipts:receipt-list')
        response = owner_client.get(url)

        assert response.data['results'][0]['item_count'] == 2


@pytest.mark.django_db
class TestReceiptCreate:
    """Tests for POST /api/receipts/"""

    def test_create_with_template_seeds_charges(self, owner_client, template, items_payload):
        url = reverse('receipts:receipt-list')
        data = {'template': str(template.id), 'items': items_payload, 'customer_name': 'Ada'}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['tax_enabled'] is True
        assert response.data['total'] == '74.05'
        assert response.data['template_name'] == 'Cafe'
        assert response.data['created_by']['username'] == 'cashier'
        assert all(item['id'] for item in response.data['items'])

    def test_create_with_explicit_charges(self, owner_client, items_payload):
        url = reverse('receipts:receipt-list')
        data = {
            'items': items_payload,
            'discount_enabled': True,
            'discount_amount': '100.00',
            'rounding_enabled': True,
            'rounding_amount': '0.05',
        }
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total'] == '0.05'

    def test_create_requires_items(self, owner_client):
        url = reverse('receipts:receipt-list')
        response = owner_client.post(url, {'items': []}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'items' in response.data

    @pytest.mark.parametrize('bad_item', [
        {'description': '', 'quantity': 1, 'unit_price': '1.00'},
        {'description': 'Tea', 'quantity': -1, 'unit_price': '1.00'},
        {'description': 'Tea', 'quantity': 1, 'unit_price': '-1.00'},
        {'description': 'Tea', 'quantity': 1},
        {'description': 'Tea', 'quantity': 10 ** 13, 'unit_price': '1.00'},
        {'description': 'Tea', 'quantity': 1, 'unit_price': '100000000000.00'},
    ])
    def test_invalid_line_items(self, owner_client, bad_item):
        url = reverse('receipts:receipt-list')
        response = owner_client.post(url, {'items': [bad_item]}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_total_beyond_storage_rejected(self, owner_client):
        url = reverse('receipts:receipt-list')
        data = {'items': [{'description': 'Gold bar', 'quantity': 1000000, 'unit_price': '9999999999.99'}]}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'items' in response.data
        assert Receipt.objects.count() == 0

    def test_template_charges_beyond_storage_rejected(self, owner_client, template):
        url = reverse('receipts:receipt-list')
        data = {
            'template': str(template.id),
            'items': [{'description': 'Gold bar', 'quantity': 1, 'unit_price': '9999999999.99'}],
        }
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Receipt.objects.count() == 0

    def test_invalid_tax_rate(self, owner_client, items_payload):
        url = reverse('receipts:receipt-list')
        data = {'items': items_payload, 'tax_rate': '150'}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_private_template_of_other_user(self, other_client, template, items_payload):
        url = reverse('receipts:receipt-list')
        data = {'template': str(template.id), 'items': items_payload}
        response = other_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_create_unauthenticated(self, api_client, items_payload):
        url = reverse('receipts:receipt-list')
        response = api_client.post(url, {'items': items_payload}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestReceiptDetail:
    """Tests for GET/PATCH/DELETE /api/receipts/{id}/"""

    def test_owner_retrieves_private(self, owner_client, receipt):
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['subtotal'] == '65.00'
        assert response.data['service_charge_amount'] == '3.25'
        assert response.data['tax_amount'] == '5.80'

    def test_private_hidden_from_other_user(self, other_client, receipt):
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_public_readable_anonymously(self, api_client, public_receipt):
        url = reverse('receipts:receipt-detail', args=[public_receipt.id])
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK

    def test_patch_recalculates(self, owner_client, receipt):
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = owner_client.patch(url, {'tax_enabled': False}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == '68.25'

    def test_patch_items_beyond_storage_rejected(self, owner_client, receipt):
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        data = {'items': [{'description': 'Gold bar', 'quantity': 1, 'unit_price': '9999999999.99'}]}
        response = owner_client.patch(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        receipt.refresh_from_db()
        assert receipt.total == Decimal('74.05')

    def test_patch_charges_beyond_storage_rejected(self, owner_client, receipt_owner):
        receipt = Receipt.objects.create(
            created_by=receipt_owner,
            items=[{'id': 'a', 'description': 'Gold bar', 'quantity': 1, 'unit_price': '9999999999.99'}],
        )
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = owner_client.patch(url, {'tax_enabled': True}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data
        receipt.refresh_from_db()
        assert receipt.tax_enabled is False

    def test_computed_fields_are_ignored(self, owner_client, receipt):
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = owner_client.patch(url, {'total': '1.00'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == '74.05'

    def test_other_user_cannot_change_public(self, other_client, public_receipt):
        url = reverse('receipts:receipt-detail', args=[public_receipt.id])
        response = other_client.patch(url, {'notes': 'hi'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete(self, owner_client, receipt):
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Receipt.objects.filter(id=receipt.id).exists()


# =============================================================================
# Calculation and Preview Tests
# =============================================================================

@pytest.mark.django_db
class TestCalculate:
    """Tests for POST /api/receipts/calculate/"""

    def test_anonymous_calculation(self, api_client, items_payload):
        url = reverse('receipts:receipt-calculate')
        data = {
            'items': items_payload,
            'tax_enabled': True,
            'service_charge_enabled': True,
        }
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        breakdown = response.data['breakdown']
        assert breakdown['subtotal'] == '65.00'
        assert breakdown['service_charge'] == '3.25'
        assert breakdown['before_tax'] == '68.25'
        assert breakdown['tax'] == '5.80'
        assert breakdown['total'] == '74.05'
        assert 'layout' not in response.data
        assert Receipt.objects.count() == 0

    def test_template_defaults_then_overrides(self, owner_client, template, items_payload):
        url = reverse('receipts:receipt-calculate')
        data = {'items': items_payload, 'template': str(template.id), 'tax_enabled': False}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['breakdown']['total'] == '68.25'

    def test_include_layout(self, owner_client, template, items_payload):
        url = reverse('receipts:receipt-calculate')
        data = {'items': items_payload, 'template': str(template.id), 'include_layout': True}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        summary = response.data['layout']['summary']
        assert summary[-1]['key'] == 'total'
        assert summary[-1]['value'] == '$74.05'

    def test_private_template_not_usable_by_others(self, other_client, template, items_payload):
        url = reverse('receipts:receipt-calculate')
        data = {'items': items_payload, 'template': str(template.id)}
        response = other_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_items(self, api_client):
        url = reverse('receipts:receipt-calculate')
        response = api_client.post(url, {'items': []}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_oversized_quantity_rejected(self, api_client):
        url = reverse('receipts:receipt-calculate')
        data = {'items': [{'description': 'x', 'quantity': 10 ** 13, 'unit_price': '1000.00'}]}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_total_beyond_storage_rejected(self, api_client):
        url = reverse('receipts:receipt-calculate')
        data = {'items': [{'description': 'x', 'quantity': 1000000, 'unit_price': '9999999999.99'}]}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'items' in response.data

    def test_tax_beyond_storage_rejected(self, api_client):
        url = reverse('receipts:receipt-calculate')
        data = {
            'items': [{'description': 'x', 'quantity': 1, 'unit_price': '9999999999.99'}],
            'tax_enabled': True,
        }
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_largest_total(self, api_client):
        url = reverse('receipts:receipt-calculate')
        data = {'items': [{'description': 'x', 'quantity': 1, 'unit_price': '9999999999.99'}]}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['breakdown']['total'] == '9999999999.99'


@pytest.mark.django_db
class TestPreview:
    """Tests for GET /api/receipts/{id}/preview/"""

    def test_preview(self, owner_client, receipt):
        url = reverse('receipts:receipt-preview', args=[receipt.id])
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['breakdown']['total'] == '74.05'
        keys = [line['key'] for line in response.data['layout']['summary']]
        assert keys == ['items_count', 'subtotal', 'service_charge', 'before_tax', 'tax', 'total']

    def test_preview_private_hidden(self, other_client, receipt):
        url = reverse('receipts:receipt-preview', args=[receipt.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Image and QR Code Tests
# =============================================================================

@pytest.mark.django_db
class TestImageExport:
    """Tests for GET /api/receipts/{id}/image/"""

    def test_png(self, owner_client, receipt):
        url = reverse('receipts:receipt-image', args=[receipt.id])
        response = owner_client.get(url, {'scale': 1})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/png'
        assert response.content.startswith(PNG_SIGNATURE)

    def test_receipt_without_template(self, api_client, public_receipt):
        url = reverse('receipts:receipt-image', args=[public_receipt.id])
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.content.startswith(PNG_SIGNATURE)

    def test_invalid_scale(self, owner_client, receipt):
        url = reverse('receipts:receipt-image', args=[receipt.id])
        response = owner_client.get(url, {'scale': 9})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestQRCode:
    """Tests for GET /api/receipts/{id}/qr_code/"""

    def test_png(self, api_client, public_receipt):
        url = reverse('receipts:receipt-qr-code', args=[public_receipt.id])
        response = api_client.get(url, {'size': 128})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/png'
        assert response.content.startswith(PNG_SIGNATURE)

    def test_size_out_of_range(self, api_client, public_receipt):
        url = reverse('receipts:receipt-qr-code', args=[public_receipt.id])
        response = api_client.get(url, {'size': 10})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Line Item Tests
# =============================================================================

@pytest.mark.django_db
class TestLineItemEndpoints:
    """Tests for /api/receipts/{id}/items/"""

    def test_add_item(self, owner_client, receipt):
        url = reverse('receipts:receipt-add-item', args=[receipt.id])
        data = {'description': 'Cookie', 'quantity': 2, 'unit_price': '1.50'}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['items']) == 3
        assert response.data['subtotal'] == '68.00'

    def test_add_item_validation(self, owner_client, receipt):
        url = reverse('receipts:receipt-add-item', args=[receipt.id])
        response = owner_client.post(url, {'description': 'Cookie'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_edit_item(self, owner_client, receipt):
        url = reverse('receipts:receipt-item', args=[receipt.id, 'b'])
        response = owner_client.patch(url, {'unit_price': '5.00'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['subtotal'] == '55.00'

    def test_add_item_beyond_storage_rejected(self, owner_client, receipt):
        url = reverse('receipts:receipt-add-item', args=[receipt.id])
        data = {'description': 'Gold bar', 'quantity': 1000000, 'unit_price': '9999999999.99'}
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data
        receipt.refresh_from_db()
        assert len(receipt.items) == 2

    def test_edit_item_beyond_storage_rejected(self, owner_client, receipt):
        url = reverse('receipts:receipt-item', args=[receipt.id, 'b'])
        data = {'quantity': 1000000, 'unit_price': '9999999999.99'}
        response = owner_client.patch(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        receipt.refresh_from_db()
        assert receipt.subtotal == Decimal('65.00')

    def test_edit_item_requires_a_field(self, owner_client, receipt):
        url = reverse('receipts:receipt-item', args=[receipt.id, 'b'])
        response = owner_client.patch(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_edit_unknown_item(self, owner_client, receipt):
        url = reverse('receipts:receipt-item', args=[receipt.id, 'nope'])
        response = owner_client.patch(url, {'quantity': 1}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_remove_item(self, owner_client, receipt):
        url = reverse('receipts:receipt-item', args=[receipt.id, 'a'])
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        receipt.refresh_from_db()
        assert receipt.subtotal == Decimal('15.00')

    def test_remove_last_item_rejected(self, owner_client, public_receipt):
        url = reverse('receipts:receipt-item', args=[public_receipt.id, 'a'])
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_other_user_cannot_add_to_public(self, other_client, public_receipt):
        url = reverse('receipts:receipt-add-item', args=[public_receipt.id])
        data = {'description': 'Cookie', 'quantity': 1, 'unit_price': '1.00'}
        response = other_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAddMenuItemEndpoint:
    """Tests for POST /api/receipts/{id}/add_menu_item/"""

    def test_add_menu_item(self, owner_client, receipt, menu_item):
        url = reverse('receipts:receipt-add-menu-item', args=[receipt.id])
        response = owner_client.post(url, {'menu_item': str(menu_item.id), 'quantity': 2}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['items'][-1]['description'] == 'Espresso'
        assert response.data['subtotal'] == '72.00'

    def test_inactive_menu_item(self, owner_client, receipt, menu_item):
        menu_item.is_active = False
        menu_item.save()

        url = reverse('receipts:receipt-add-menu-item', args=[receipt.id])
        response = owner_client.post(url, {'menu_item': str(menu_item.id)}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_menu_item(self, owner_client, receipt):
        url = reverse('receipts:receipt-add-menu-item', args=[receipt.id])
        response = owner_client.post(
            url, {'menu_item': '00000000-0000-0000-0000-000000000000'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
