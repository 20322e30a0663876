from django.contrib import admin
from django.contrib.humanize.templatetags.humanize import intcomma
from django.utils.html import format_html

from payments.models import Payment
from .models import Order


def _short(s: str, n: int = 10) -> str:
    s = str(s or "")
    return s if len(s) <= n else (s[:n] + "…")


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    fields = ("remote_id", "state", "remote_state", "amount", "currency", "test", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_per_page = 50
    save_on_top = True
    date_hierarchy = "created_at"

    search_fields = ("id",)
    list_filter = ("state", "checkout_step", "currency", "created_at")
    list_display = ("id_short", "state_badge", "checkout_step", "total_display", "payment_method", "created_at")
    ordering = ("-created_at",)
    readonly_fields = ("id", "created_at", "placed_at", "total_display")
    inlines = [PaymentInline]

    fieldsets = (
        ("State", {"fields": ("state", "checkout_step")}),
        ("Amount", {"fields": ("total", "currency", "total_display", "language")}),
        ("Payment", {"fields": ("payment_gateway", "payment_method")}),
        ("Metadata", {"fields": ("id", "created_at", "placed_at")}),
    )

    @admin.display(description="Order", ordering="id")
    def id_short(self, obj: Order) -> str:
        return _short(obj.id, 12)

    @admin.display(description="State", ordering="state")
    def state_badge(self, obj: Order) -> str:
        if obj.state == Order.State.COMPLETED:
            return format_html('<span style="padding:2px 8px;border-radius:10px;background:#e6f4ea;color:#137333;">Completed</span>')
        if obj.state == Order.State.DRAFT:
            return format_html('<span style="padding:2px 8px;border-radius:10px;background:#fff4e5;color:#b06000;">Draft</span>')
        return format_html('<span style="padding:2px 8px;border-radius:10px;background:#eee;color:#333;">{}</span>', obj.state)

    @admin.display(description="Total", ordering="total")
    def total_display(self, obj: Order) -> str:
        return f"{intcomma(f'{obj.total:.2f}')} {obj.currency}"
