from rest_framework import permissions


class IsTemplateOwnerOrReadOnly(permissions.BasePermission):
    """
    Permission: Only the template owner can edit/delete it.
    Public templates can be read by anyone, private ones only by the owner.
    """

    def has_object_permission(self, request, view, obj):
        # obj is a ReceiptTemplate instance
        if request.method in permissions.SAFE_METHODS:
            return obj.is_visible_to(request.user)

        return obj.created_by_id == request.user.id
