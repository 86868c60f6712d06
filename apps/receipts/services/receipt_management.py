"""
Receipt management service.

Handles receipt CRUD and line item editing. Every write ends in
``Receipt.save()``, which recomputes the stored amounts, so totals stay in
step with the calculator whichever path changed the receipt. Writes whose
amounts would not fit the stored columns raise ``AmountOutOfRangeError``
inside the transaction, so nothing is persisted.
"""

import logging
import uuid
from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from django.db import transaction

from apps.designs.models import ReceiptTemplate
from apps.designs.services import SCOPE_ALL, visibility_filter
from apps.menus.services import get_menu_item_by_id, menu_item_to_line_item
from apps.receipts.calculator import (
    ChargeConfig,
    DEFAULT_CHARGE_CONFIG,
    LineItem,
    MAX_AMOUNT,
    to_decimal,
)
from apps.receipts.models import Receipt

from .exceptions import (
    AmountOutOfRangeError,
    EmptyReceiptError,
    InsufficientPermissionsError,
    LastLineItemError,
    LineItemNotFoundError,
    ReceiptNotFoundError,
    TemplateNotAvailableError,
)

logger = logging.getLogger(__name__)

# Fields that are never set from caller data.
PROTECTED_FIELDS = {'id', 'items', 'created_by', 'created_by_id', 'created_at', 'updated_at'}


def seed_charge_config(template: Optional[ReceiptTemplate]) -> ChargeConfig:
    """Charge settings a new receipt starts with for ``template``."""
    if template is None:
        return DEFAULT_CHARGE_CONFIG
    return template.default_charge_config()


def build_line_items(raw_items: Iterable[Any]) -> list[LineItem]:
    """
    Turn validated item data into line items with receipt-unique IDs.

    Items without an ID, or repeating an ID already used, get a new one.
    """
    line_items = []
    seen = set()
    for raw in raw_items:
        if isinstance(raw, LineItem):
            data = raw.to_dict()
        else:
            data = dict(raw)

        item_id = str(data.get('id') or '')
        if not item_id or item_id in seen:
            item_id = uuid.uuid4().hex
        seen.add(item_id)

        line_items.append(LineItem(
            id=item_id,
            description=str(data['description']),
            quantity=int(data['quantity']),
            unit_price=to_decimal(data['unit_price']),
        ))
    return line_items


def _check_template(template: Optional[ReceiptTemplate], user) -> None:
    if template is not None and not template.is_visible_to(user):
        raise TemplateNotAvailableError(f"Template with ID {template.id} is not available")


def _apply_fields(receipt: Receipt, fields: Mapping[str, Any]) -> None:
    for name, value in fields.items():
        if name in PROTECTED_FIELDS:
            continue
        setattr(receipt, name, value)


def _get_for_update(receipt_id: UUID, user) -> Receipt:
    try:
        receipt = Receipt.objects.select_for_update().get(id=receipt_id)
    except Receipt.DoesNotExist:
        raise ReceiptNotFoundError(f"Receipt with ID {receipt_id} not found")

    if receipt.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the receipt owner can change the receipt")

    return receipt


def _save(receipt: Receipt) -> None:
    if not receipt.calculate().fits():
        raise AmountOutOfRangeError(f"Receipt amounts must not exceed {MAX_AMOUNT}")
    receipt.save()


@transaction.atomic
def create_receipt(
    *,
    user,
    items: Iterable[Any],
    template: Optional[ReceiptTemplate] = None,
    **fields
) -> Receipt:
    """
    Create a receipt owned by ``user``.

    Charge settings start from the template's defaults (or the global
    defaults without a template). Charge fields passed explicitly win over
    the seeded values.

    Args:
        user: Owner of the new receipt
        items: Line item data (at least one)
        template: Optional template to render with and seed charges from
        **fields: Other receipt fields (customer, charges, date, notes...)

    Returns:
        Created Receipt instance with computed amounts

    Raises:
        EmptyReceiptError: If no items are given
        TemplateNotAvailableError: If the template is private to someone else
        AmountOutOfRangeError: If an amount is too large to store
    """
    line_items = build_line_items(items)
    if not line_items:
        raise EmptyReceiptError("A receipt needs at least one line item")

    _check_template(template, user)

    receipt = Receipt(created_by=user, template=template)
    receipt.apply_charge_config(seed_charge_config(template))
    _apply_fields(receipt, fields)
    receipt.set_line_items(line_items)
    _save(receipt)

    logger.info("Created receipt %s (%s) total=%s", receipt.id, receipt.receipt_number, receipt.total)
    return receipt


def get_receipt_by_id(*, receipt_id: UUID, user=None) -> Receipt:
    """
    Get a receipt visible to ``user``.

    Raises:
        ReceiptNotFoundError: If the receipt doesn't exist or is private to
            someone else
    """
    try:
        receipt = Receipt.objects.select_related('template', 'created_by').get(id=receipt_id)
    except Receipt.DoesNotExist:
        raise ReceiptNotFoundError(f"Receipt with ID {receipt_id} not found")

    if not receipt.is_visible_to(user):
        raise ReceiptNotFoundError(f"Receipt with ID {receipt_id} not found")

    return receipt


@transaction.atomic
def update_receipt(
    *,
    receipt_id: UUID,
    user,
    items: Optional[Iterable[Any]] = None,
    **fields
) -> Receipt:
    """
    Update a receipt (owner only).

    Changing the template does not reseed charge settings: once a receipt
    exists its stored charges are kept.

    Raises:
        ReceiptNotFoundError: If receipt doesn't exist
        InsufficientPermissionsError: If user is not the owner
        EmptyReceiptError: If ``items`` is given but empty
        TemplateNotAvailableError: If the new template is not visible
        AmountOutOfRangeError: If an amount is too large to store
    """
    receipt = _get_for_update(receipt_id, user)

    if 'template' in fields:
        _check_template(fields['template'], user)

    if items is not None:
        line_items = build_line_items(items)
        if not line_items:
            raise EmptyReceiptError("A receipt needs at least one line item")
        receipt.set_line_items(line_items)

    _apply_fields(receipt, fields)
    _save(receipt)
    return receipt


@transaction.atomic
def delete_receipt(*, receipt_id: UUID, user) -> None:
    """
    Raises:
        ReceiptNotFoundError: If receipt doesn't exist
        InsufficientPermissionsError: If user is not the owner
    """
    receipt = _get_for_update(receipt_id, user)
    receipt.delete()
    logger.info("Deleted receipt %s", receipt_id)


@transaction.atomic
def add_line_item(
    *,
    receipt_id: UUID,
    user,
    description: str,
    quantity: int,
    unit_price,
    item_id: Optional[str] = None
) -> tuple[Receipt, LineItem]:
    """
    Append a line item.

    Returns:
        Tuple of (updated receipt, new line item)
    """
    receipt = _get_for_update(receipt_id, user)
    line_items = receipt.get_line_items()

    existing_ids = {item.id for item in line_items}
    if not item_id or item_id in existing_ids:
        item_id = uuid.uuid4().hex

    new_item = LineItem(
        id=item_id,
        description=description,
        quantity=int(quantity),
        unit_price=to_decimal(unit_price),
    )
    receipt.set_line_items(line_items + [new_item])
    _save(receipt)
    return receipt, new_item


@transaction.atomic
def update_line_item(
    *,
    receipt_id: UUID,
    user,
    item_id: str,
    description: Optional[str] = None,
    quantity: Optional[int] = None,
    unit_price=None
) -> tuple[Receipt, LineItem]:
    """
    Replace a line item with an edited copy, keeping its position.

    Raises:
        LineItemNotFoundError: If item_id is not on the receipt
    """
    receipt = _get_for_update(receipt_id, user)
    line_items = receipt.get_line_items()

    for index, item in enumerate(line_items):
        if item.id == item_id:
            break
    else:
        raise LineItemNotFoundError(f"Line item {item_id} not found on receipt {receipt_id}")

    updated = LineItem(
        id=item.id,
        description=item.description if description is None else description,
        quantity=item.quantity if quantity is None else int(quantity),
        unit_price=item.unit_price if unit_price is None else to_decimal(unit_price),
    )
    line_items[index] = updated
    receipt.set_line_items(line_items)
    _save(receipt)
    return receipt, updated


@transaction.atomic
def remove_line_item(*, receipt_id: UUID, user, item_id: str) -> Receipt:
    """
    Remove a line item.

    Raises:
        LineItemNotFoundError: If item_id is not on the receipt
        LastLineItemError: If it is the only item left
    """
    receipt = _get_for_update(receipt_id, user)
    line_items = receipt.get_line_items()

    remaining = [item for item in line_items if item.id != item_id]
    if len(remaining) == len(line_items):
        raise LineItemNotFoundError(f"Line item {item_id} not found on receipt {receipt_id}")
    if not remaining:
        raise LastLineItemError("Cannot remove the last line item of a receipt")

    receipt.set_line_items(remaining)
    _save(receipt)
    return receipt


@transaction.atomic
def add_menu_item_to_receipt(
    *,
    receipt_id: UUID,
    user,
    menu_item_id: UUID,
    quantity: int = 1
) -> tuple[Receipt, LineItem]:
    """
    Append a line item pre-filled from a menu entry.

    Raises:
        MenuItemNotFoundError: If the menu item doesn't exist
        InactiveMenuItemError: If the menu item is not active
        TemplateNotAvailableError: If its template is not visible to the user
    """
    receipt = _get_for_update(receipt_id, user)
    menu_item = get_menu_item_by_id(item_id=menu_item_id)
    _check_template(menu_item.template, user)

    line_items = receipt.get_line_items()
    new_item = menu_item_to_line_item(menu_item, quantity=quantity)

    receipt.set_line_items(line_items + [new_item])
    _save(receipt)
    return receipt, new_item


def list_visible_receipts(*, user, scope: str = SCOPE_ALL):
    """Receipts visible to ``user`` in the given scope, newest first."""
    return (
        Receipt.objects
        .filter(visibility_filter(user, scope))
        .select_related('template', 'created_by')
        .order_by('-created_at')
    )
