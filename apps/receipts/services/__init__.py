"""
Receipts app services layer.

Services contain receipt business logic plus the image and QR code
collaborators. All state-changing operations use transactions and lock the
receipt row, so concurrent line item edits cannot interleave.
"""

from .exceptions import (
    ReceiptsServiceError,
    ReceiptNotFoundError,
    InsufficientPermissionsError,
    TemplateNotAvailableError,
    EmptyReceiptError,
    LineItemNotFoundError,
    LastLineItemError,
    AmountOutOfRangeError,
    ReceiptRenderingError,
    QRCodeGenerationError,
)

from .receipt_management import (
    seed_charge_config,
    build_line_items,
    create_receipt,
    get_receipt_by_id,
    update_receipt,
    delete_receipt,
    add_line_item,
    update_line_item,
    remove_line_item,
    add_menu_item_to_receipt,
    list_visible_receipts,
)

from .rendering import (
    render_receipt_image,
)

from .qr_codes import (
    build_receipt_url,
    encode_url,
)


__all__ = [
    # Exceptions
    'ReceiptsServiceError',
    'ReceiptNotFoundError',
    'InsufficientPermissionsError',
    'TemplateNotAvailableError',
    'EmptyReceiptError',
    'LineItemNotFoundError',
    'LastLineItemError',
    'AmountOutOfRangeError',
    'ReceiptRenderingError',
    'QRCodeGenerationError',

    # Receipt Management
    'seed_charge_config',
    'build_line_items',
    'create_receipt',
    'get_receipt_by_id',
    'update_receipt',
    'delete_receipt',
    'add_line_item',
    'update_line_item',
    'remove_line_item',
    'add_menu_item_to_receipt',
    'list_visible_receipts',

    # Rendering
    'render_receipt_image',

    # QR Codes
    'build_receipt_url',
    'encode_url',
]
