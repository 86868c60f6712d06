"""
Designs app services layer.

Services contain template business logic. All state-changing operations
use transactions and row locks.
"""

from .exceptions import (
    DesignsServiceError,
    TemplateNotFoundError,
    InsufficientPermissionsError,
    InvalidScopeError,
)

from .template_management import (
    SCOPE_MINE,
    SCOPE_PUBLIC,
    SCOPE_ALL,
    SCOPES,
    create_template,
    update_template,
    delete_template,
    get_template_by_id,
    list_visible_templates,
    visibility_filter,
)


__all__ = [
    # Exceptions
    'DesignsServiceError',
    'TemplateNotFoundError',
    'InsufficientPermissionsError',
    'InvalidScopeError',

    # Template Management
    'SCOPE_MINE',
    'SCOPE_PUBLIC',
    'SCOPE_ALL',
    'SCOPES',
    'create_template',
    'update_template',
    'delete_template',
    'get_template_by_id',
    'list_visible_templates',
    'visibility_filter',
]
