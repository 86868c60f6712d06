from django.contrib.auth import get_user_model
from rest_framework import serializers

from .layout_config import COLUMN_POSITIONS, normalize_column_order
from .models import ReceiptTemplate
from .services import SCOPES, SCOPE_ALL

User = get_user_model()

ROW_LAYOUT_PREFIXES = ('summary', 'items_count')


# =============================================================================
# Input Serializers
# =============================================================================

class ScopeFilterSerializer(serializers.Serializer):
    """
    Validate the ``scope`` query parameter of list endpoints.

    Query Parameters:
        scope (str): mine, public or all (default all)
    """

    scope = serializers.ChoiceField(choices=SCOPES, default=SCOPE_ALL, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class OwnerSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    class Meta:
        model = User
        fields = ['id', 'username']
        read_only_fields = fields


class ReceiptTemplateSerializer(serializers.ModelSerializer):
    """Full template, used for detail, create and update."""

    created_by = OwnerSerializer(read_only=True)
    column_order = serializers.JSONField(required=False)

    class Meta:
        model = ReceiptTemplate
        fields = '__all__'
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def validate_column_order(self, value):
        """Store a clean permutation; anything else becomes the default order."""
        return list(normalize_column_order(value))

    def _current(self, attrs, name):
        if name in attrs:
            return attrs[name]
        if self.instance is not None:
            return getattr(self.instance, name)
        return ReceiptTemplate._meta.get_field(name).get_default()

    def validate(self, attrs):
        """Label and value positions must exist in the chosen column count."""
        errors = {}
        for prefix in ROW_LAYOUT_PREFIXES:
            layout_columns = self._current(attrs, f'{prefix}_layout_columns')
            allowed = COLUMN_POSITIONS[:layout_columns]
            for role in ('labels', 'values'):
                field = f'{prefix}_{role}_position'
                if self._current(attrs, field) not in allowed:
                    errors[field] = (
                        f"Position must be one of {', '.join(allowed)} "
                        f"for a {layout_columns}-column layout"
                    )
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class ReceiptTemplateListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    created_by = OwnerSerializer(read_only=True)
    menu_item_count = serializers.SerializerMethodField()

    class Meta:
        model = ReceiptTemplate
        fields = [
            'id',
            'name',
            'business_name',
            'is_public',
            'created_by',
            'menu_item_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_menu_item_count(self, obj):
        return obj.menu_items.count()
