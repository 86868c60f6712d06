# Generated manually for the designs app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion

import apps.designs.models


ALIGNMENT_CHOICES = [('left', 'Left'), ('center', 'Center'), ('right', 'Right')]
TEXT_STYLE_CHOICES = [('normal', 'Normal'), ('bold', 'Bold'), ('italic', 'Italic'), ('bold-italic', 'Bold italic')]
POSITION_CHOICES = [('column1', 'Column 1'), ('column2', 'Column 2'), ('column3', 'Column 3')]
LAYOUT_COLUMN_CHOICES = [(2, '2 columns'), (3, '3 columns')]
PERCENT = [MinValueValidator(0), MaxValueValidator(100)]
RATE = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReceiptTemplate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('business_name', models.CharField(max_length=200)),
                ('business_address', models.TextField(blank=True)),
                ('business_phone', models.CharField(blank=True, max_length=50)),
                ('business_email', models.EmailField(blank=True, max_length=254)),
                ('business_website', models.CharField(blank=True, max_length=200)),
                ('header_style', models.CharField(choices=ALIGNMENT_CHOICES, default='center', max_length=10)),
                ('logo_url', models.TextField(blank=True)),
                ('logo_size', models.PositiveIntegerField(default=80)),
                ('logo_position', models.CharField(choices=ALIGNMENT_CHOICES, default='center', max_length=10)),
                ('show_logo', models.BooleanField(default=False)),
                ('background_color', models.CharField(default='#ffffff', max_length=20)),
                ('text_color', models.CharField(default='#000000', max_length=20)),
                ('accent_color', models.CharField(default='#3b82f6', max_length=20)),
                ('border_color', models.CharField(default='#e5e7eb', max_length=20)),
                ('font_family', models.CharField(default='sans-serif', max_length=100)),
                ('font_size', models.PositiveIntegerField(default=14)),
                ('show_border', models.BooleanField(default=True)),
                ('footer_text', models.TextField(blank=True, default='Thank you for your business!')),
                ('show_footer', models.BooleanField(default=True)),
                ('terms_conditions', models.TextField(blank=True)),
                ('show_terms', models.BooleanField(default=False)),
                ('custom_header1', models.TextField(blank=True)),
                ('custom_header2', models.TextField(blank=True)),
                ('custom_header1_size', models.PositiveIntegerField(default=16)),
                ('custom_header2_size', models.PositiveIntegerField(default=14)),
                ('custom_header1_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='normal', max_length=12)),
                ('custom_header2_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='normal', max_length=12)),
                ('custom_header_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='left', max_length=10)),
                ('show_custom_headers', models.BooleanField(default=False)),
                ('show_customer_block', models.BooleanField(default=True)),
                ('customer_block_title', models.CharField(blank=True, max_length=200)),
                ('customer_block_title_size', models.PositiveIntegerField(default=16)),
                ('customer_block_title_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='bold', max_length=12)),
                ('customer_block_text', models.TextField(blank=True)),
                ('customer_block_text_size', models.PositiveIntegerField(default=14)),
                ('customer_block_text_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='normal', max_length=12)),
                ('customer_block_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='left', max_length=10)),
                ('show_datetime_in_customer', models.BooleanField(default=True)),
                ('datetime_format', models.CharField(choices=[('combined', 'Combined'), ('separate', 'Separate')], default='combined', max_length=10)),
                ('datetime_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='normal', max_length=12)),
                ('datetime_size', models.PositiveIntegerField(default=14)),
                ('show_custom_section', models.BooleanField(default=False)),
                ('custom_section_title', models.CharField(blank=True, default='Additional Information', max_length=200)),
                ('custom_section_text', models.TextField(blank=True)),
                ('custom_section_title_size', models.PositiveIntegerField(default=16)),
                ('custom_section_text_size', models.PositiveIntegerField(default=14)),
                ('custom_section_title_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='bold', max_length=12)),
                ('custom_section_text_style', models.CharField(choices=TEXT_STYLE_CHOICES, default='normal', max_length=12)),
                ('custom_section_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='left', max_length=10)),
                ('show_item_labels', models.BooleanField(default=True)),
                ('show_currency_symbol', models.BooleanField(default=False)),
                ('show_description_column', models.BooleanField(default=True)),
                ('show_quantity_column', models.BooleanField(default=True)),
                ('show_price_column', models.BooleanField(default=True)),
                ('show_total_column', models.BooleanField(default=True)),
                ('item_description_width', models.FloatField(default=50.0, validators=PERCENT)),
                ('item_quantity_width', models.FloatField(default=15.0, validators=PERCENT)),
                ('item_price_width', models.FloatField(default=17.5, validators=PERCENT)),
                ('item_total_width', models.FloatField(default=17.5, validators=PERCENT)),
                ('column_order', models.JSONField(default=apps.designs.models.default_column_order)),
                ('summary_layout_columns', models.PositiveSmallIntegerField(choices=LAYOUT_COLUMN_CHOICES, default=2)),
                ('summary_column1_width', models.FloatField(default=50, validators=PERCENT)),
                ('summary_column2_width', models.FloatField(default=50, validators=PERCENT)),
                ('summary_column3_width', models.FloatField(default=0, validators=PERCENT)),
                ('summary_labels_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='left', max_length=10)),
                ('summary_values_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='right', max_length=10)),
                ('summary_labels_position', models.CharField(choices=POSITION_CHOICES, default='column1', max_length=10)),
                ('summary_values_position', models.CharField(choices=POSITION_CHOICES, default='column2', max_length=10)),
                ('show_items_count', models.BooleanField(default=True)),
                ('items_count_layout_columns', models.PositiveSmallIntegerField(choices=LAYOUT_COLUMN_CHOICES, default=2)),
                ('items_count_column1_width', models.FloatField(default=50, validators=PERCENT)),
                ('items_count_column2_width', models.FloatField(default=50, validators=PERCENT)),
                ('items_count_column3_width', models.FloatField(default=0, validators=PERCENT)),
                ('items_count_labels_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='left', max_length=10)),
                ('items_count_values_alignment', models.CharField(choices=ALIGNMENT_CHOICES, default='right', max_length=10)),
                ('items_count_labels_position', models.CharField(choices=POSITION_CHOICES, default='column1', max_length=10)),
                ('items_count_values_position', models.CharField(choices=POSITION_CHOICES, default='column2', max_length=10)),
                ('show_separator_after_items_count', models.BooleanField(default=False)),
                ('show_separator_after_subtotal', models.BooleanField(default=False)),
                ('show_separator_after_service_charge', models.BooleanField(default=False)),
                ('show_separator_after_before_tax', models.BooleanField(default=False)),
                ('show_separator_after_tax', models.BooleanField(default=False)),
                ('show_separator_after_total', models.BooleanField(default=True)),
                ('default_tax_rate', models.DecimalField(decimal_places=2, default=Decimal('8.5'), max_digits=5, validators=RATE)),
                ('default_service_charge_rate', models.DecimalField(decimal_places=2, default=Decimal('5.0'), max_digits=5, validators=RATE)),
                ('enable_tax_by_default', models.BooleanField(default=False)),
                ('enable_service_charge_by_default', models.BooleanField(default=False)),
                ('is_public', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='receipt_templates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'receipt_templates',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_by', 'created_at'], name='receipt_tem_created_6c1f0a_idx'),
                    models.Index(fields=['is_public', 'created_at'], name='receipt_tem_is_publ_1b7e2d_idx'),
                ],
            },
        ),
    ]
