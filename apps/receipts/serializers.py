from decimal import Decimal

from rest_framework import serializers

from apps.designs.models import ReceiptTemplate
from apps.designs.serializers import OwnerSerializer
from apps.designs.services import SCOPES, SCOPE_ALL

from .calculator import (
    ChargeConfig,
    DEFAULT_CHARGE_CONFIG,
    LineItem,
    MAX_AMOUNT,
    MAX_QUANTITY,
    compute,
)
from .models import Receipt
from .services.qr_codes import DEFAULT_QR_SIZE, MAX_QR_SIZE, MIN_QR_SIZE
from .services.rendering import MAX_SCALE, MIN_SCALE

# Receipt/API field name -> ChargeConfig attribute
CHARGE_FIELD_MAP = {
    'tax_enabled': 'tax_enabled',
    'tax_rate': 'tax_rate_percent',
    'service_charge_enabled': 'service_charge_enabled',
    'service_charge_rate': 'service_charge_rate_percent',
    'discount_enabled': 'discount_enabled',
    'discount_amount': 'discount_amount',
    'rounding_enabled': 'rounding_enabled',
    'rounding_amount': 'rounding_amount',
}

COMPUTED_READ_ONLY = [
    'subtotal',
    'discount_applied',
    'service_charge_amount',
    'tax_amount',
    'rounding_applied',
    'total',
]


# =============================================================================
# Input Serializers
# =============================================================================

class LineItemInputSerializer(serializers.Serializer):
    """
    Validate one line item.

    Fields:
        id (str): Optional client ID, unique within the receipt
        description (str): Non-empty text
        quantity (int): 0..MAX_QUANTITY
        unit_price (decimal): Non-negative
    """

    id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    description = serializers.CharField(max_length=500)
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class LineItemUpdateSerializer(serializers.Serializer):
    """Validate a partial line item edit."""

    description = serializers.CharField(max_length=500, required=False)
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, required=False)
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Provide at least one of description, quantity, unit_price')
        return attrs


class ChargeSettingsSerializer(serializers.Serializer):
    """Charge toggles with their rates and amounts."""

    tax_enabled = serializers.BooleanField(required=False)
    tax_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False
    )
    service_charge_enabled = serializers.BooleanField(required=False)
    service_charge_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False
    )
    discount_enabled = serializers.BooleanField(required=False)
    discount_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False
    )
    rounding_enabled = serializers.BooleanField(required=False)
    rounding_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)

    @classmethod
    def from_config(cls, config: ChargeConfig) -> 'ChargeSettingsSerializer':
        return cls({name: getattr(config, attr) for name, attr in CHARGE_FIELD_MAP.items()})


def apply_charge_settings(config: ChargeConfig, data) -> ChargeConfig:
    """Override ``config`` with the charge fields present in ``data``."""
    changes = {
        attr: data[name]
        for name, attr in CHARGE_FIELD_MAP.items()
        if name in data
    }
    return config.with_changes(**changes)


def check_amounts(items, config: ChargeConfig) -> None:
    """Reject item data whose breakdown would not fit the stored amounts."""
    line_items = [
        LineItem(
            id=str(index),
            description=item['description'],
            quantity=item['quantity'],
            unit_price=item['unit_price'],
        )
        for index, item in enumerate(items)
    ]
    if not compute(line_items, config).fits():
        raise serializers.ValidationError({'items': [f'Receipt amounts must not exceed {MAX_AMOUNT}']})


class CalculateInputSerializer(ChargeSettingsSerializer):
    """
    Validate a stateless calculation request.

    Charge fields start from the template's defaults (or the global
    defaults) and are overridden by the fields given.
    """

    items = LineItemInputSerializer(many=True, allow_empty=False)
    template = serializers.PrimaryKeyRelatedField(
        queryset=ReceiptTemplate.objects.all(), required=False, allow_null=True
    )
    include_layout = serializers.BooleanField(default=False)

    def validate_template(self, value):
        request = self.context.get('request')
        if value is not None and not value.is_visible_to(getattr(request, 'user', None)):
            raise serializers.ValidationError('Template not found')
        return value

    def validate(self, attrs):
        check_amounts(attrs['items'], self._charge_config(attrs))
        return attrs

    def _charge_config(self, data) -> ChargeConfig:
        template = data.get('template')
        base = template.default_charge_config() if template is not None else DEFAULT_CHARGE_CONFIG
        return apply_charge_settings(base, data)

    def get_charge_config(self) -> ChargeConfig:
        return self._charge_config(self.validated_data)


class AddMenuItemSerializer(serializers.Serializer):
    menu_item = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY, default=1)


class ImageQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        scale (int): Pixel density 1..4
        background (str): Background colour override, e.g. ``#fafafa``
    """

    scale = serializers.IntegerField(min_value=MIN_SCALE, max_value=MAX_SCALE, required=False)
    background = serializers.CharField(max_length=20, required=False)


class QRCodeQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        size (int): Image side in pixels
    """

    size = serializers.IntegerField(min_value=MIN_QR_SIZE, max_value=MAX_QR_SIZE, required=False)


class ReceiptFilterSerializer(serializers.Serializer):
    scope = serializers.ChoiceField(choices=SCOPES, default=SCOPE_ALL, required=False)


# =============================================================================
# Receipt Serializers
# =============================================================================

class ReceiptWriteSerializer(serializers.ModelSerializer):
    """
    Serializer for creating and updating receipts.

    Charge fields left out on create are seeded from the template.
    """

    items = LineItemInputSerializer(many=True, allow_empty=False)
    template = serializers.PrimaryKeyRelatedField(
        queryset=ReceiptTemplate.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Receipt
        fields = [
            'template',
            'receipt_number',
            'customer_name',
            'customer_email',
            'customer_phone',
            'items',
            'tax_enabled',
            'tax_rate',
            'service_charge_enabled',
            'service_charge_rate',
            'discount_enabled',
            'discount_amount',
            'rounding_enabled',
            'rounding_amount',
            'receipt_date',
            'receipt_time',
            'notes',
            'is_public',
        ]

    def validate(self, attrs):
        if 'items' in attrs:
            if self.instance is not None:
                base = self.instance.get_charge_config()
            else:
                template = attrs.get('template')
                base = template.default_charge_config() if template is not None else DEFAULT_CHARGE_CONFIG
            check_amounts(attrs['items'], apply_charge_settings(base, attrs))
        return attrs


class ReceiptSerializer(serializers.ModelSerializer):
    """Main serializer for receipts."""

    created_by = OwnerSerializer(read_only=True)
    template_name = serializers.SerializerMethodField()

    class Meta:
        model = Receipt
        fields = [
            'id',
            'template',
            'template_name',
            'created_by',
            'receipt_number',
            'customer_name',
            'customer_email',
            'customer_phone',
            'items',
            'tax_enabled',
            'tax_rate',
            'service_charge_enabled',
            'service_charge_rate',
            'discount_enabled',
            'discount_amount',
            'rounding_enabled',
            'rounding_amount',
            *COMPUTED_READ_ONLY,
            'receipt_date',
            'receipt_time',
            'notes',
            'is_public',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_template_name(self, obj):
        return obj.template.name if obj.template else None


class ReceiptListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    created_by = OwnerSerializer(read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Receipt
        fields = [
            'id',
            'receipt_number',
            'customer_name',
            'template',
            'created_by',
            'item_count',
            'total',
            'receipt_date',
            'is_public',
            'created_at',
        ]
        read_only_fields = fields

    def get_item_count(self, obj):
        return len(obj.items)


class BreakdownSerializer(serializers.Serializer):
    """Calculated amounts rounded to cents."""

    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    discount = serializers.DecimalField(max_digits=14, decimal_places=2)
    after_discount = serializers.DecimalField(max_digits=14, decimal_places=2)
    service_charge = serializers.DecimalField(max_digits=14, decimal_places=2)
    before_tax = serializers.DecimalField(max_digits=14, decimal_places=2)
    tax = serializers.DecimalField(max_digits=14, decimal_places=2)
    rounding = serializers.DecimalField(max_digits=14, decimal_places=2)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
