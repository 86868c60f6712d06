"""
HTTP-level exceptions for receipts app.

Raised from views when a collaborator (image renderer, QR encoder) fails,
so clients get a retryable status instead of a generic server error.
"""
from rest_framework.exceptions import APIException


class RenderingUnavailableError(APIException):
    """Receipt image could not be produced."""
    status_code = 503
    default_detail = 'Receipt image could not be generated. Please try again.'
    default_code = 'rendering_unavailable'


class QRCodeUnavailableError(APIException):
    """QR code could not be produced."""
    status_code = 503
    default_detail = 'QR code could not be generated. Please try again.'
    default_code = 'qr_code_unavailable'
