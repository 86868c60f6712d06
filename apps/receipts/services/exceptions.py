"""
Domain-specific exceptions for receipts app.

These exceptions represent business rule violations and collaborator
failures. Views catch them and convert them to HTTP responses.
"""


class ReceiptsServiceError(Exception):
    """Base exception for all receipts service errors."""
    pass


class ReceiptNotFoundError(ReceiptsServiceError):
    """Raised when a receipt does not exist or is not visible to the user."""
    pass


class InsufficientPermissionsError(ReceiptsServiceError):
    """Raised when a user changes a receipt they do not own."""
    pass


class TemplateNotAvailableError(ReceiptsServiceError):
    """Raised when a receipt refers to a template the user cannot see."""
    pass


class EmptyReceiptError(ReceiptsServiceError):
    """Raised when a receipt would be saved without line items."""
    pass


class LineItemNotFoundError(ReceiptsServiceError):
    """Raised when a line item ID is not on the receipt."""
    pass


class LastLineItemError(ReceiptsServiceError):
    """Raised when removing the only remaining line item."""
    pass


class ReceiptRenderingError(ReceiptsServiceError):
    """Receipt image rendering failed."""
    pass


class QRCodeGenerationError(ReceiptsServiceError):
    """QR code generation failed."""
    pass


class AmountOutOfRangeError(ReceiptsServiceError):
    """Raised when a receipt amount is too large to store."""
    pass
