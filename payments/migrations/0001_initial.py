import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentMethod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_gateway", models.CharField(default="sips_payment", max_length=64)),
                ("payment_option", models.CharField(max_length=32)),
                ("response_code", models.CharField(blank=True, default="", max_length=8)),
                ("seal", models.CharField(blank=True, default="", max_length=128)),
                ("reusable", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_gateway", models.CharField(default="sips_payment", max_length=64)),
                (
                    "state",
                    models.CharField(
                        choices=[("new", "New"), ("capture_completed", "Completed"), ("void", "Voided")],
                        default="new",
                        max_length=32,
                    ),
                ),
                (
                    "remote_state",
                    models.CharField(
                        choices=[("pending", "Pending"), ("done", "Done"), ("failed", "Failed")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("remote_id", models.CharField(max_length=35, unique=True)),
                ("amount", models.DecimalField(decimal_places=6, max_digits=19)),
                ("currency", models.CharField(max_length=3)),
                ("authorization_expires", models.DateTimeField()),
                ("test", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="orders.order",
                    ),
                ),
                (
                    "payment_method",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payments",
                        to="payments.paymentmethod",
                    ),
                ),
            ],
        ),
    ]
