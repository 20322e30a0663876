from django.urls import path
from . import views

app_name = "payments"

urlpatterns = [
    path("<uuid:order_id>/information/", views.payment_information, name="payment_information"),
    path("<uuid:order_id>/start/", views.start_payment, name="start"),
    path("<uuid:order_id>/<int:payment_id>/response/", views.handle_response, name="handle_response"),
]
