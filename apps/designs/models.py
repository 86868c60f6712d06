from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid

from apps.receipts.calculator import ChargeConfig, DEFAULT_CHARGE_CONFIG, to_decimal
from .layout_config import (
    DEFAULT_COLUMN_ORDER,
    DEFAULT_ITEM_COLUMN_WIDTHS,
    RowLayout,
    TemplateLayout,
    normalize_column_order,
)


class Alignment(models.TextChoices):
    LEFT = 'left', 'Left'
    CENTER = 'center', 'Center'
    RIGHT = 'right', 'Right'


class TextStyle(models.TextChoices):
    NORMAL = 'normal', 'Normal'
    BOLD = 'bold', 'Bold'
    ITALIC = 'italic', 'Italic'
    BOLD_ITALIC = 'bold-italic', 'Bold italic'


class ColumnPosition(models.TextChoices):
    COLUMN1 = 'column1', 'Column 1'
    COLUMN2 = 'column2', 'Column 2'
    COLUMN3 = 'column3', 'Column 3'


class DatetimeFormat(models.TextChoices):
    COMBINED = 'combined', 'Combined'
    SEPARATE = 'separate', 'Separate'


LAYOUT_COLUMN_CHOICES = [(2, '2 columns'), (3, '3 columns')]

percent_validators = [MinValueValidator(0), MaxValueValidator(100)]


def default_column_order():
    return list(DEFAULT_COLUMN_ORDER)


class ReceiptTemplate(models.Model):
    """Branding, layout and charge defaults used to render receipts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)

    # Business header
    business_name = models.CharField(max_length=200)
    business_address = models.TextField(blank=True)
    business_phone = models.CharField(max_length=50, blank=True)
    business_email = models.EmailField(blank=True)
    business_website = models.CharField(max_length=200, blank=True)
    header_style = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.CENTER)

    # Logo (plain URL or data: URL)
    logo_url = models.TextField(blank=True)
    logo_size = models.PositiveIntegerField(default=80)
    logo_position = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.CENTER)
    show_logo = models.BooleanField(default=False)

    # Colours and typography
    background_color = models.CharField(max_length=20, default='#ffffff')
    text_color = models.CharField(max_length=20, default='#000000')
    accent_color = models.CharField(max_length=20, default='#3b82f6')
    border_color = models.CharField(max_length=20, default='#e5e7eb')
    font_family = models.CharField(max_length=100, default='sans-serif')
    font_size = models.PositiveIntegerField(default=14)
    show_border = models.BooleanField(default=True)

    # Footer and terms
    footer_text = models.TextField(blank=True, default='Thank you for your business!')
    show_footer = models.BooleanField(default=True)
    terms_conditions = models.TextField(blank=True)
    show_terms = models.BooleanField(default=False)

    # Custom headers
    custom_header1 = models.TextField(blank=True)
    custom_header2 = models.TextField(blank=True)
    custom_header1_size = models.PositiveIntegerField(default=16)
    custom_header2_size = models.PositiveIntegerField(default=14)
    custom_header1_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.NORMAL)
    custom_header2_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.NORMAL)
    custom_header_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.LEFT)
    show_custom_headers = models.BooleanField(default=False)

    # Customer block
    show_customer_block = models.BooleanField(default=True)
    customer_block_title = models.CharField(max_length=200, blank=True)
    customer_block_title_size = models.PositiveIntegerField(default=16)
    customer_block_title_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.BOLD)
    customer_block_text = models.TextField(blank=True)
    customer_block_text_size = models.PositiveIntegerField(default=14)
    customer_block_text_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.NORMAL)
    customer_block_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.LEFT)
    show_datetime_in_customer = models.BooleanField(default=True)
    datetime_format = models.CharField(max_length=10, choices=DatetimeFormat.choices, default=DatetimeFormat.COMBINED)
    datetime_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.NORMAL)
    datetime_size = models.PositiveIntegerField(default=14)

    # Custom section before the footer
    show_custom_section = models.BooleanField(default=False)
    custom_section_title = models.CharField(max_length=200, blank=True, default='Additional Information')
    custom_section_text = models.TextField(blank=True)
    custom_section_title_size = models.PositiveIntegerField(default=16)
    custom_section_text_size = models.PositiveIntegerField(default=14)
    custom_section_title_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.BOLD)
    custom_section_text_style = models.CharField(max_length=12, choices=TextStyle.choices, default=TextStyle.NORMAL)
    custom_section_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.LEFT)

    # Item table
    show_item_labels = models.BooleanField(default=True)
    show_currency_symbol = models.BooleanField(default=False)
    show_description_column = models.BooleanField(default=True)
    show_quantity_column = models.BooleanField(default=True)
    show_price_column = models.BooleanField(default=True)
    show_total_column = models.BooleanField(default=True)
    item_description_width = models.FloatField(
        default=DEFAULT_ITEM_COLUMN_WIDTHS['description'], validators=percent_validators
    )
    item_quantity_width = models.FloatField(
        default=DEFAULT_ITEM_COLUMN_WIDTHS['quantity'], validators=percent_validators
    )
    item_price_width = models.FloatField(
        default=DEFAULT_ITEM_COLUMN_WIDTHS['price'], validators=percent_validators
    )
    item_total_width = models.FloatField(
        default=DEFAULT_ITEM_COLUMN_WIDTHS['total'], validators=percent_validators
    )
    column_order = models.JSONField(default=default_column_order)

    # Summary lines layout
    summary_layout_columns = models.PositiveSmallIntegerField(choices=LAYOUT_COLUMN_CHOICES, default=2)
    summary_column1_width = models.FloatField(default=50, validators=percent_validators)
    summary_column2_width = models.FloatField(default=50, validators=percent_validators)
    summary_column3_width = models.FloatField(default=0, validators=percent_validators)
    summary_labels_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.LEFT)
    summary_values_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.RIGHT)
    summary_labels_position = models.CharField(
        max_length=10, choices=ColumnPosition.choices, default=ColumnPosition.COLUMN1
    )
    summary_values_position = models.CharField(
        max_length=10, choices=ColumnPosition.choices, default=ColumnPosition.COLUMN2
    )

    # Items count row layout (independent of the summary layout)
    show_items_count = models.BooleanField(default=True)
    items_count_layout_columns = models.PositiveSmallIntegerField(choices=LAYOUT_COLUMN_CHOICES, default=2)
    items_count_column1_width = models.FloatField(default=50, validators=percent_validators)
    items_count_column2_width = models.FloatField(default=50, validators=percent_validators)
    items_count_column3_width = models.FloatField(default=0, validators=percent_validators)
    items_count_labels_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.LEFT)
    items_count_values_alignment = models.CharField(max_length=10, choices=Alignment.choices, default=Alignment.RIGHT)
    items_count_labels_position = models.CharField(
        max_length=10, choices=ColumnPosition.choices, default=ColumnPosition.COLUMN1
    )
    items_count_values_position = models.CharField(
        max_length=10, choices=ColumnPosition.choices, default=ColumnPosition.COLUMN2
    )

    # Separator lines in the totals section
    show_separator_after_items_count = models.BooleanField(default=False)
    show_separator_after_subtotal = models.BooleanField(default=False)
    show_separator_after_service_charge = models.BooleanField(default=False)
    show_separator_after_before_tax = models.BooleanField(default=False)
    show_separator_after_tax = models.BooleanField(default=False)
    show_separator_after_total = models.BooleanField(default=True)

    # Default charges for new receipts
    default_tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=DEFAULT_CHARGE_CONFIG.tax_rate_percent,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    default_service_charge_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=DEFAULT_CHARGE_CONFIG.service_charge_rate_percent,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    enable_tax_by_default = models.BooleanField(default=DEFAULT_CHARGE_CONFIG.tax_enabled)
    enable_service_charge_by_default = models.BooleanField(default=DEFAULT_CHARGE_CONFIG.service_charge_enabled)

    # Ownership and visibility
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='receipt_templates'
    )
    is_public = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'receipt_templates'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='receipt_tem_created_6c1f0a_idx'),
            models.Index(fields=['is_public', 'created_at'], name='receipt_tem_is_publ_1b7e2d_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.business_name})"

    def save(self, *args, **kwargs):
        """Store column order and row positions in their normalized form."""
        self.column_order = list(normalize_column_order(self.column_order))
        for prefix in ('summary', 'items_count'):
            row = RowLayout.from_getter(lambda name: getattr(self, name, None), prefix)
            setattr(self, f'{prefix}_layout_columns', row.layout_columns)
            setattr(self, f'{prefix}_labels_position', row.labels_position)
            setattr(self, f'{prefix}_values_position', row.values_position)
        super().save(*args, **kwargs)

    def get_layout(self) -> TemplateLayout:
        return TemplateLayout.from_template(self)

    def default_charge_config(self) -> ChargeConfig:
        """Charge settings a new receipt starts with when this template is picked."""
        return DEFAULT_CHARGE_CONFIG.with_changes(
            tax_enabled=self.enable_tax_by_default,
            tax_rate_percent=to_decimal(self.default_tax_rate),
            service_charge_enabled=self.enable_service_charge_by_default,
            service_charge_rate_percent=to_decimal(self.default_service_charge_rate),
        )

    def is_visible_to(self, user) -> bool:
        return self.is_public or (user is not None and user.is_authenticated and self.created_by_id == user.id)
