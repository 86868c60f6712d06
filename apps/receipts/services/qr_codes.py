"""
QR codes pointing at a receipt's public URL.

Uses the ``qrcode`` library with PIL support (``pip install qrcode[pil]``).
Error correction level M (15% recovery) keeps codes readable from printed
receipts at small sizes.
"""

import logging
from io import BytesIO

import qrcode
from PIL import Image

from .exceptions import QRCodeGenerationError

logger = logging.getLogger(__name__)

DEFAULT_QR_SIZE = 200
MIN_QR_SIZE = 64
MAX_QR_SIZE = 1024


def build_receipt_url(receipt, base_url: str) -> str:
    """
    Public URL of a receipt.

    >>> build_receipt_url(receipt, 'https://receipts.example.com/')
    'https://receipts.example.com/api/receipts/<uuid>/'
    """
    return f"{base_url.rstrip('/')}/api/receipts/{receipt.id}/"


def encode_url(url: str, size: int = DEFAULT_QR_SIZE) -> bytes:
    """
    Encode ``url`` as a square PNG of ``size`` pixels.

    Raises:
        QRCodeGenerationError: If the data cannot be encoded or drawn
    """
    if not url:
        raise QRCodeGenerationError("Cannot encode an empty URL")

    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(url)
        qr.make(fit=True)

        raw = BytesIO()
        qr.make_image(fill_color="black", back_color="white").save(raw)
        raw.seek(0)

        with Image.open(raw) as img:
            img = img.convert('RGB').resize((size, size), Image.Resampling.NEAREST)

        buffer = BytesIO()
        img.save(buffer, format='PNG')
    except (ValueError, OSError, qrcode.exceptions.DataOverflowError) as e:
        logger.exception("QR code generation failed for %s", url)
        raise QRCodeGenerationError(str(e)) from e

    return buffer.getvalue()
