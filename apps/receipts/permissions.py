"""
Custom permission classes for receipts app.

Public receipts can be read by anyone (the QR code on a printed receipt
points at them), private receipts only by their owner. Only the owner
can change a receipt.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsReceiptOwnerOrPublicReadOnly(BasePermission):
    """
    Permission to access a receipt.

    Usage:
        class ReceiptViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticatedOrReadOnly, IsReceiptOwnerOrPublicReadOnly]
    """

    message = 'You do not have permission to change this receipt.'

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return obj.is_visible_to(request.user)

        return obj.created_by_id == request.user.id
