# Generated manually for the receipts app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

import apps.receipts.models


RATE = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('designs', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Receipt',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('receipt_number', models.CharField(default=apps.receipts.models.generate_receipt_number, max_length=64)),
                ('customer_name', models.CharField(blank=True, max_length=200)),
                ('customer_email', models.EmailField(blank=True, max_length=254)),
                ('customer_phone', models.CharField(blank=True, max_length=50)),
                ('items', models.JSONField(default=list, encoder=DjangoJSONEncoder)),
                ('tax_enabled', models.BooleanField(default=False)),
                ('tax_rate', models.DecimalField(decimal_places=2, default=Decimal('8.5'), max_digits=5, validators=RATE)),
                ('service_charge_enabled', models.BooleanField(default=False)),
                ('service_charge_rate', models.DecimalField(decimal_places=2, default=Decimal('5.0'), max_digits=5, validators=RATE)),
                ('discount_enabled', models.BooleanField(default=False)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[MinValueValidator(Decimal('0'))])),
                ('rounding_enabled', models.BooleanField(default=False)),
                ('rounding_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('discount_applied', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('service_charge_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('rounding_applied', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('receipt_date', models.DateField(default=django.utils.timezone.localdate)),
                ('receipt_time', models.TimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('is_public', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='receipts', to=settings.AUTH_USER_MODEL)),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='receipts', to='designs.receipttemplate')),
            ],
            options={
                'db_table': 'receipts',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_by', 'created_at'], name='receipts_created_4a7c93_idx'),
                    models.Index(fields=['is_public', 'created_at'], name='receipts_is_publ_e51b08_idx'),
                    models.Index(fields=['receipt_number'], name='receipts_receipt_0f6d2a_idx'),
                ],
            },
        ),
    ]
