"""
Template management service.

Handles template CRUD and visibility-scoped listing.
"""

import logging
from typing import Any
from uuid import UUID

from django.db import transaction
from django.db.models import Q

from apps.designs.models import ReceiptTemplate

from .exceptions import (
    InsufficientPermissionsError,
    InvalidScopeError,
    TemplateNotFoundError,
)

logger = logging.getLogger(__name__)

SCOPE_MINE = 'mine'
SCOPE_PUBLIC = 'public'
SCOPE_ALL = 'all'
SCOPES = (SCOPE_MINE, SCOPE_PUBLIC, SCOPE_ALL)

# Fields that are never set from caller data.
PROTECTED_FIELDS = {'id', 'created_by', 'created_by_id', 'created_at', 'updated_at'}


def visibility_filter(user, scope: str = SCOPE_ALL) -> Q:
    """
    Build the filter for records with ``created_by`` / ``is_public`` fields.

    ``mine`` is the user's own records, ``public`` every public record and
    ``all`` the union. Anonymous users only ever see public records.

    Raises:
        InvalidScopeError: If scope is unknown
    """
    if scope not in SCOPES:
        raise InvalidScopeError(f"Unknown scope '{scope}'. Use one of: {', '.join(SCOPES)}")

    authenticated = user is not None and user.is_authenticated

    if scope == SCOPE_PUBLIC or not authenticated:
        if scope == SCOPE_MINE:
            return Q(pk__in=[])
        return Q(is_public=True)

    if scope == SCOPE_MINE:
        return Q(created_by=user)

    return Q(is_public=True) | Q(created_by=user)


def _apply_fields(template: ReceiptTemplate, fields: dict[str, Any]) -> list[str]:
    changed = []
    for name, value in fields.items():
        if name in PROTECTED_FIELDS:
            continue
        setattr(template, name, value)
        changed.append(name)
    return changed


@transaction.atomic
def create_template(*, user, **fields) -> ReceiptTemplate:
    """
    Create a template owned by ``user``.

    Args:
        user: Owner of the new template
        **fields: Template model fields (``name`` and ``business_name`` required)

    Returns:
        Created ReceiptTemplate instance
    """
    template = ReceiptTemplate(created_by=user)
    _apply_fields(template, fields)
    template.save()

    logger.info("Created template %s for user %s", template.id, user.id)
    return template


def get_template_by_id(*, template_id: UUID, user=None) -> ReceiptTemplate:
    """
    Get a template visible to ``user``.

    Raises:
        TemplateNotFoundError: If the template doesn't exist or is private
            to someone else
    """
    try:
        template = ReceiptTemplate.objects.select_related('created_by').get(id=template_id)
    except ReceiptTemplate.DoesNotExist:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")

    if not template.is_visible_to(user):
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")

    return template


@transaction.atomic
def update_template(*, template_id: UUID, user, **fields) -> ReceiptTemplate:
    """
    Update template fields (owner only).

    Receipts that already use the template keep their charge settings;
    only their appearance follows the new template values.

    Raises:
        TemplateNotFoundError: If template doesn't exist
        InsufficientPermissionsError: If user is not the owner
    """
    try:
        template = ReceiptTemplate.objects.select_for_update().get(id=template_id)
    except ReceiptTemplate.DoesNotExist:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")

    if template.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the template owner can update the template")

    update_fields = _apply_fields(template, fields)
    if update_fields:
        template.save()

    return template


@transaction.atomic
def delete_template(*, template_id: UUID, user) -> None:
    """
    Delete a template (owner only).

    Its menu items are deleted with it. Receipts keep their data and lose
    the template reference.

    Raises:
        TemplateNotFoundError: If template doesn't exist
        InsufficientPermissionsError: If user is not the owner
    """
    try:
        template = ReceiptTemplate.objects.select_for_update().get(id=template_id)
    except ReceiptTemplate.DoesNotExist:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")

    if template.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the template owner can delete the template")

    template.delete()
    logger.info("Deleted template %s", template_id)


def list_visible_templates(*, user, scope: str = SCOPE_ALL):
    """Templates visible to ``user`` in the given scope, newest first."""
    return (
        ReceiptTemplate.objects
        .filter(visibility_filter(user, scope))
        .select_related('created_by')
        .order_by('-created_at')
    )
