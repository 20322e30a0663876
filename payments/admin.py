from django.contrib import admin
from .models import Payment, PaymentMethod


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "remote_id", "state", "remote_state", "amount", "currency", "test", "created_at")
    list_filter = ("state", "remote_state", "test", "created_at")
    search_fields = ("order__id", "remote_id")
    readonly_fields = (
        "order",
        "payment_method",
        "payment_gateway",
        "state",
        "remote_state",
        "remote_id",
        "amount",
        "currency",
        "authorization_expires",
        "test",
        "created_at",
        "completed_at",
    )


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("id", "payment_option", "response_code", "payment_gateway", "created_at")
    list_filter = ("payment_option", "response_code")
    # the seal is kept for audit only
    readonly_fields = ("payment_gateway", "payment_option", "response_code", "seal", "reusable", "created_at")
