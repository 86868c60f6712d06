from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid

from .calculator import Breakdown, ChargeConfig, DEFAULT_CHARGE_CONFIG, LineItem, compute, to_decimal

# Stored amounts derived from the line items and charge inputs.
COMPUTED_FIELDS = [
    'subtotal',
    'discount_applied',
    'service_charge_amount',
    'tax_amount',
    'rounding_applied',
    'total',
]


def generate_receipt_number():
    return f"RCP-{int(timezone.now().timestamp() * 1000)}"


class Receipt(models.Model):
    """
    Stored receipt.

    Line items live in ``items`` as a JSON list. The computed amounts are
    always refreshed from the items and charge inputs in :meth:`save`, so
    the stored total cannot drift from the calculator.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    template = models.ForeignKey(
        'designs.ReceiptTemplate',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='receipts'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='receipts'
    )

    receipt_number = models.CharField(max_length=64, default=generate_receipt_number)

    # Customer contact (all optional)
    customer_name = models.CharField(max_length=200, blank=True)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)

    items = models.JSONField(default=list, encoder=DjangoJSONEncoder)

    # Charge inputs
    tax_enabled = models.BooleanField(default=False)
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=DEFAULT_CHARGE_CONFIG.tax_rate_percent,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    service_charge_enabled = models.BooleanField(default=False)
    service_charge_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=DEFAULT_CHARGE_CONFIG.service_charge_rate_percent,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    discount_enabled = models.BooleanField(default=False)
    discount_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    rounding_enabled = models.BooleanField(default=False)
    rounding_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    # Computed amounts, quantized to cents
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount_applied = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    service_charge_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    rounding_applied = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    receipt_date = models.DateField(default=timezone.localdate)
    receipt_time = models.TimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    is_public = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'receipts'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='receipts_created_4a7c93_idx'),
            models.Index(fields=['is_public', 'created_at'], name='receipts_is_publ_e51b08_idx'),
            models.Index(fields=['receipt_number'], name='receipts_receipt_0f6d2a_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.receipt_number} - {self.total}"

    def get_line_items(self) -> list[LineItem]:
        return [LineItem.from_dict(data) for data in self.items]

    def set_line_items(self, line_items) -> None:
        self.items = [item.to_dict() for item in line_items]

    def get_charge_config(self) -> ChargeConfig:
        return ChargeConfig(
            tax_enabled=self.tax_enabled,
            tax_rate_percent=to_decimal(self.tax_rate),
            service_charge_enabled=self.service_charge_enabled,
            service_charge_rate_percent=to_decimal(self.service_charge_rate),
            discount_enabled=self.discount_enabled,
            discount_amount=to_decimal(self.discount_amount),
            rounding_enabled=self.rounding_enabled,
            rounding_amount=to_decimal(self.rounding_amount),
        )

    def apply_charge_config(self, config: ChargeConfig) -> None:
        self.tax_enabled = config.tax_enabled
        self.tax_rate = config.tax_rate_percent
        self.service_charge_enabled = config.service_charge_enabled
        self.service_charge_rate = config.service_charge_rate_percent
        self.discount_enabled = config.discount_enabled
        self.discount_amount = config.discount_amount
        self.rounding_enabled = config.rounding_enabled
        self.rounding_amount = config.rounding_amount

    def calculate(self) -> Breakdown:
        return compute(self.get_line_items(), self.get_charge_config())

    def recalculate(self) -> Breakdown:
        """Refresh the stored amounts from items and charge inputs."""
        breakdown = self.calculate()
        amounts = breakdown.quantized()
        self.subtotal = amounts['subtotal']
        self.discount_applied = amounts['discount']
        self.service_charge_amount = amounts['service_charge']
        self.tax_amount = amounts['tax']
        self.rounding_applied = amounts['rounding']
        self.total = amounts['total']
        return breakdown

    def save(self, *args, **kwargs):
        """Recompute amounts before every write."""
        self.recalculate()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | set(COMPUTED_FIELDS) | {'updated_at'}
        super().save(*args, **kwargs)

    def is_visible_to(self, user) -> bool:
        return self.is_public or (user is not None and user.is_authenticated and self.created_by_id == user.id)
