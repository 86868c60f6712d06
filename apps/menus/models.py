from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class MenuItem(models.Model):
    """Reusable priced entry attached to a template, imported into receipts as a line item."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    template = models.ForeignKey(
        'designs.ReceiptTemplate',
        on_delete=models.CASCADE,
        related_name='menu_items'
    )

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    category = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'menu_items'
        indexes = [
            models.Index(fields=['template', 'sort_order'], name='menu_items_templat_3d9a41_idx'),
            models.Index(fields=['template', 'category'], name='menu_items_templat_8e02c7_idx'),
        ]
        ordering = ['sort_order', 'name']

    def __str__(self):
        return f"{self.name} ({self.price})"
