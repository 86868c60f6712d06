"""
Domain-specific exceptions for menus app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class MenusServiceError(Exception):
    """Base exception for all menus service errors."""
    pass


class MenuItemNotFoundError(MenusServiceError):
    """Raised when a menu item does not exist or is inaccessible."""
    pass


class InactiveMenuItemError(MenusServiceError):
    """Raised when an inactive menu item is used to fill a receipt."""
    pass


class InsufficientPermissionsError(MenusServiceError):
    """Raised when a user edits the menu of a template they do not own."""
    pass
