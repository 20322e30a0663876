from django.urls import path
from . import views

app_name = "orders"

urlpatterns = [
    path("cart/", views.cart, name="cart"),
    path("<uuid:order_id>/checkout/<slug:step>/", views.checkout, name="checkout"),
]
