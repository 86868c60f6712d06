"""
Menu item management service.

Handles menu item CRUD, filtering and the conversion of menu entries into
receipt line items.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Max, Q

from apps.designs.models import ReceiptTemplate
from apps.menus.models import MenuItem
from apps.receipts.calculator import LineItem, to_decimal

from .exceptions import (
    InactiveMenuItemError,
    InsufficientPermissionsError,
    MenuItemNotFoundError,
)

logger = logging.getLogger(__name__)

# Category filter value selecting items without a category.
UNCATEGORIZED = 'uncategorized'


def _check_owner(template: ReceiptTemplate, user) -> None:
    if template.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the template owner can change its menu")


@transaction.atomic
def create_menu_item(
    *,
    template: ReceiptTemplate,
    user,
    name: str,
    price: Decimal,
    description: str = '',
    category: str = '',
    is_active: bool = True
) -> MenuItem:
    """
    Add an item to the end of a template's menu.

    The template row is locked while the next ``sort_order`` is computed so
    two concurrent creates cannot get the same position.

    Raises:
        InsufficientPermissionsError: If user does not own the template
    """
    template = ReceiptTemplate.objects.select_for_update().get(id=template.id)
    _check_owner(template, user)

    last = template.menu_items.aggregate(last=Max('sort_order'))['last']
    sort_order = 0 if last is None else last + 1

    item = MenuItem.objects.create(
        template=template,
        name=name,
        description=description,
        price=price,
        category=category.strip(),
        is_active=is_active,
        sort_order=sort_order,
    )
    logger.info("Created menu item %s on template %s", item.id, template.id)
    return item


def get_menu_item_by_id(*, item_id: UUID) -> MenuItem:
    """
    Raises:
        MenuItemNotFoundError: If the item doesn't exist
    """
    try:
        return MenuItem.objects.select_related('template').get(id=item_id)
    except MenuItem.DoesNotExist:
        raise MenuItemNotFoundError(f"Menu item with ID {item_id} not found")


@transaction.atomic
def update_menu_item(
    *,
    item_id: UUID,
    user,
    name: Optional[str] = None,
    description: Optional[str] = None,
    price: Optional[Decimal] = None,
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    sort_order: Optional[int] = None
) -> MenuItem:
    """
    Update menu item fields that are not None.

    Raises:
        MenuItemNotFoundError: If the item doesn't exist
        InsufficientPermissionsError: If user does not own the template
    """
    try:
        item = (
            MenuItem.objects
            .select_for_update()
            .select_related('template')
            .get(id=item_id)
        )
    except MenuItem.DoesNotExist:
        raise MenuItemNotFoundError(f"Menu item with ID {item_id} not found")

    _check_owner(item.template, user)

    update_fields = ['updated_at']
    changes = {
        'name': name,
        'description': description,
        'price': price,
        'category': category.strip() if category is not None else None,
        'is_active': is_active,
        'sort_order': sort_order,
    }
    for field, value in changes.items():
        if value is not None:
            setattr(item, field, value)
            update_fields.append(field)

    item.save(update_fields=update_fields)
    return item


@transaction.atomic
def delete_menu_item(*, item_id: UUID, user) -> None:
    """
    Delete a menu item. Receipts that already used it keep their line items.

    Raises:
        MenuItemNotFoundError: If the item doesn't exist
        InsufficientPermissionsError: If user does not own the template
    """
    try:
        item = (
            MenuItem.objects
            .select_for_update()
            .select_related('template')
            .get(id=item_id)
        )
    except MenuItem.DoesNotExist:
        raise MenuItemNotFoundError(f"Menu item with ID {item_id} not found")

    _check_owner(item.template, user)
    item.delete()
    logger.info("Deleted menu item %s", item_id)


def list_menu_items(
    *,
    template: ReceiptTemplate,
    active_only: bool = False,
    search: Optional[str] = None,
    category: Optional[str] = None
):
    """
    Return a template's menu in display order.

    Args:
        template: Template whose menu is listed
        active_only: Skip inactive items
        search: Case-insensitive match on name or description
        category: Exact category, or ``'uncategorized'`` for blank ones
    """
    queryset = MenuItem.objects.filter(template=template)

    if active_only:
        queryset = queryset.filter(is_active=True)

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) | Q(description__icontains=search)
        )

    if category:
        if category == UNCATEGORIZED:
            queryset = queryset.filter(category='')
        else:
            queryset = queryset.filter(category=category)

    return queryset.order_by('sort_order', 'name')


def get_menu_categories(*, template: ReceiptTemplate) -> list[str]:
    """Distinct non-blank categories of a template's menu, sorted."""
    categories = (
        MenuItem.objects
        .filter(template=template)
        .exclude(category='')
        .order_by('category')
        .values_list('category', flat=True)
        .distinct()
    )
    return sorted(categories)


def menu_item_to_line_item(
    menu_item: MenuItem,
    quantity: int = 1,
    item_id: Optional[str] = None
) -> LineItem:
    """
    Pre-fill a line item from a menu entry.

    Raises:
        InactiveMenuItemError: If the menu item is not active
    """
    if not menu_item.is_active:
        raise InactiveMenuItemError(f"Menu item '{menu_item.name}' is not active")

    return LineItem(
        id=item_id or uuid.uuid4().hex,
        description=menu_item.name,
        quantity=quantity,
        unit_price=to_decimal(menu_item.price),
    )
