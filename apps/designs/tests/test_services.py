import pytest
from decimal import Decimal
from django.contrib.auth.models import AnonymousUser

from apps.designs.models import ReceiptTemplate
from apps.designs.services import (
    InsufficientPermissionsError,
    InvalidScopeError,
    TemplateNotFoundError,
    create_template,
    delete_template,
    get_template_by_id,
    list_visible_templates,
    update_template,
    visibility_filter,
)
from apps.menus.models import MenuItem
from apps.receipts.models import Receipt


@pytest.mark.django_db
class TestCreateTemplate:

    def test_create_sets_owner(self, user):
        template = create_template(user=user, name='Deli', business_name='Deli Corner')

        assert template.created_by == user
        assert template.column_order == ['description', 'quantity', 'price', 'total']

    def test_protected_fields_ignored(self, user, other_user):
        template = create_template(
            user=user,
            name='Deli',
            business_name='Deli Corner',
            created_by=other_user,
        )

        assert template.created_by == user

    def test_invalid_layout_normalized_on_save(self, user):
        template = create_template(
            user=user,
            name='Deli',
            business_name='Deli Corner',
            column_order=['price', 'price'],
            summary_layout_columns=2,
            summary_values_position='column3',
        )

        template.refresh_from_db()
        assert template.column_order == ['description', 'quantity', 'price', 'total']
        assert template.summary_values_position == 'column2'


@pytest.mark.django_db
class TestTemplateVisibility:

    def test_owner_gets_private(self, user, template):
        assert get_template_by_id(template_id=template.id, user=user) == template

    def test_private_hidden_from_others(self, other_user, template):
        with pytest.raises(TemplateNotFoundError):
            get_template_by_id(template_id=template.id, user=other_user)

    def test_public_visible_anonymously(self, public_template):
        assert get_template_by_id(template_id=public_template.id, user=AnonymousUser()) == public_template

    def test_list_scopes(self, user, other_user, template, public_template):
        assert set(list_visible_templates(user=user, scope='mine')) == {template, public_template}
        assert list(list_visible_templates(user=other_user, scope='all')) == [public_template]
        assert list(list_visible_templates(user=other_user, scope='mine')) == []
        assert list(list_visible_templates(user=AnonymousUser(), scope='public')) == [public_template]

    def test_anonymous_mine_is_empty(self, public_template):
        assert list(list_visible_templates(user=AnonymousUser(), scope='mine')) == []

    def test_unknown_scope(self, user):
        with pytest.raises(InvalidScopeError):
            visibility_filter(user, 'everything')


@pytest.mark.django_db
class TestUpdateTemplate:

    def test_owner_updates(self, user, template):
        updated = update_template(template_id=template.id, user=user, footer_text='Come again')

        assert updated.footer_text == 'Come again'

    def test_non_owner_rejected(self, other_user, public_template):
        with pytest.raises(InsufficientPermissionsError):
            update_template(template_id=public_template.id, user=other_user, name='Taken')

    def test_existing_receipts_keep_charges(self, user, template):
        receipt = Receipt.objects.create(
            created_by=user,
            template=template,
            items=[{'id': 'a', 'description': 'Bun', 'quantity': 1, 'unit_price': '10.00'}],
        )

        update_template(
            template_id=template.id,
            user=user,
            enable_tax_by_default=True,
            default_tax_rate=Decimal('20'),
        )

        receipt.refresh_from_db()
        assert receipt.tax_enabled is False
        assert receipt.total == Decimal('10.00')


@pytest.mark.django_db
class TestDeleteTemplate:

    def test_delete_cascades_menu_and_detaches_receipts(self, user, template):
        MenuItem.objects.create(template=template, name='Bun', price=Decimal('1.00'))
        receipt = Receipt.objects.create(
            created_by=user,
            template=template,
            items=[{'id': 'a', 'description': 'Bun', 'quantity': 1, 'unit_price': '1.00'}],
        )

        delete_template(template_id=template.id, user=user)

        assert not ReceiptTemplate.objects.filter(id=template.id).exists()
        assert MenuItem.objects.count() == 0
        receipt.refresh_from_db()
        assert receipt.template is None
        assert receipt.total == Decimal('1.00')

    def test_non_owner_rejected(self, other_user, template):
        with pytest.raises(InsufficientPermissionsError):
            delete_template(template_id=template.id, user=other_user)

    def test_missing(self, user):
        with pytest.raises(TemplateNotFoundError):
            delete_template(template_id='00000000-0000-0000-0000-000000000000', user=user)
