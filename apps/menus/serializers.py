from decimal import Decimal

from rest_framework import serializers

from apps.designs.models import ReceiptTemplate

from .models import MenuItem


# =============================================================================
# Input Serializers
# =============================================================================

class MenuItemFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for menu listing.

    Query Parameters:
        template (UUID): Template whose menu is listed (required)
        active (bool): Only active items
        search (str): Match on name or description
        category (str): Category name, or ``uncategorized``
    """

    template = serializers.UUIDField()
    active = serializers.BooleanField(required=False, default=False)
    search = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)


class MenuCategoriesQuerySerializer(serializers.Serializer):
    template = serializers.UUIDField()


# =============================================================================
# Menu Item Serializers
# =============================================================================

class MenuItemSerializer(serializers.ModelSerializer):
    """Main serializer for menu items."""

    template = serializers.PrimaryKeyRelatedField(queryset=ReceiptTemplate.objects.all())
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))

    class Meta:
        model = MenuItem
        fields = [
            'id',
            'template',
            'name',
            'description',
            'price',
            'category',
            'is_active',
            'sort_order',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'sort_order', 'created_at', 'updated_at']


class MenuItemUpdateSerializer(MenuItemSerializer):
    """Template cannot change after creation; position can."""

    template = serializers.PrimaryKeyRelatedField(read_only=True)
    sort_order = serializers.IntegerField(min_value=0, required=False)

    class Meta(MenuItemSerializer.Meta):
        read_only_fields = ['id', 'created_at', 'updated_at']
