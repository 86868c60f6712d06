"""
Domain-specific exceptions for designs app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class DesignsServiceError(Exception):
    """Base exception for all designs service errors."""
    pass


class TemplateNotFoundError(DesignsServiceError):
    """Raised when a template does not exist or is not visible to the user."""
    pass


class InsufficientPermissionsError(DesignsServiceError):
    """Raised when a user changes a template they do not own."""
    pass


class InvalidScopeError(DesignsServiceError):
    """Raised when a listing scope is not one of mine/public/all."""
    pass
