from rest_framework import permissions


class IsMenuTemplateOwnerOrReadOnly(permissions.BasePermission):
    """
    Permission: Only the owner of the item's template can edit/delete it.
    Anyone who can see the template can read its menu.
    """

    def has_object_permission(self, request, view, obj):
        # obj is a MenuItem instance
        if request.method in permissions.SAFE_METHODS:
            return obj.template.is_visible_to(request.user)

        return obj.template.created_by_id == request.user.id
