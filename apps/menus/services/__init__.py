"""
Menus app services layer.

Menu items are owned through their template: only the template owner can
change them, and anyone who can see the template can read them.
"""

from .exceptions import (
    MenusServiceError,
    MenuItemNotFoundError,
    InactiveMenuItemError,
    InsufficientPermissionsError,
)

from .menu_management import (
    UNCATEGORIZED,
    create_menu_item,
    update_menu_item,
    delete_menu_item,
    get_menu_item_by_id,
    list_menu_items,
    get_menu_categories,
    menu_item_to_line_item,
)


__all__ = [
    # Exceptions
    'MenusServiceError',
    'MenuItemNotFoundError',
    'InactiveMenuItemError',
    'InsufficientPermissionsError',

    # Menu Management
    'UNCATEGORIZED',
    'create_menu_item',
    'update_menu_item',
    'delete_menu_item',
    'get_menu_item_by_id',
    'list_menu_items',
    'get_menu_categories',
    'menu_item_to_line_item',
]
