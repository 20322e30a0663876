from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path("", RedirectView.as_view(pattern_name="orders:cart", permanent=False)),
    path("admin/", admin.site.urls),
    path("orders/", include("orders.urls")),
    path("payments/", include("payments.urls")),
]
