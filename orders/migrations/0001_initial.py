import decimal
import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "state",
                    models.CharField(
                        choices=[("draft", "Draft"), ("completed", "Completed")],
                        default="draft",
                        max_length=32,
                    ),
                ),
                ("checkout_step", models.CharField(blank=True, default="", max_length=64)),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=6,
                        default=decimal.Decimal("0"),
                        max_digits=19,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))],
                    ),
                ),
                ("currency", models.CharField(default="EUR", max_length=3)),
                ("language", models.CharField(default="en", max_length=12)),
                ("payment_gateway", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("placed_at", models.DateTimeField(blank=True, null=True)),
            ],
        ),
    ]
