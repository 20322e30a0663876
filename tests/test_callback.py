"""The buyer coming back from SIPS: validation, transitions and redirects."""

import pytest
from django.contrib.messages import get_messages
from django.urls import reverse

from orders.models import Order
from payments.models import Payment
from payments.services import handle_callback
from payments.sips import AuthenticityError, DeclinedError, ReplayError

pytestmark = pytest.mark.django_db


def _url(order, payment):
    return reverse("payments:handle_response", kwargs={"order_id": order.id, "payment_id": payment.pk})


def _messages(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


def _checkout(order, step):
    return reverse("orders:checkout", kwargs={"order_id": order.id, "step": step})


def test_accepted_payment_completes_and_places_order(client, sips_settings, order, payment, sign_response):
    response = client.post(_url(order, payment), sign_response(payment, "00"))

    assert response.status_code == 302
    assert response["Location"] == _checkout(order, "complete")
    assert _messages(response) == []

    payment.refresh_from_db()
    order.refresh_from_db()
    assert (payment.state, payment.remote_state) == ("capture_completed", "done")
    assert order.checkout_step == "complete"
    assert order.state == Order.State.COMPLETED
    assert order.payment_method.response_code == "00"


def test_accepted_payment_before_last_step_only_advances(client, sips_settings, order, payment, sign_response):
    order.checkout_step = "review"
    order.save()

    response = client.get(_url(order, payment), sign_response(payment, "00"))

    order.refresh_from_db()
    assert response["Location"] == _checkout(order, "payment")
    assert order.checkout_step == "payment"
    assert order.state == Order.State.DRAFT


def test_refused_payment_is_voided_and_buyer_goes_back(client, sips_settings, order, payment, sign_response):
    response = client.post(_url(order, payment), sign_response(payment, "05"))

    assert response["Location"] == _checkout(order, "review")
    assert _messages(response) == ["An error occurred in the SIPS platform: [05] Authorisation refused"]

    payment.refresh_from_db()
    order.refresh_from_db()
    assert (payment.state, payment.remote_state) == ("void", "failed")
    assert order.checkout_step == "review"
    assert order.state == Order.State.DRAFT
    assert order.payment_method.response_code == "05"


def test_unknown_code_still_fails_payment(sips_settings, config, order, payment, sign_response):
    outcome = handle_callback(order.id, payment.pk, sign_response(payment, "77"), config)

    assert isinstance(outcome.error, DeclinedError)
    assert outcome.error.description == "Unknown error code - [77]"
    payment.refresh_from_db()
    assert payment.remote_state == "failed"


def test_replayed_callback_changes_nothing(client, sips_settings, order, payment, sign_response):
    body = sign_response(payment, "00")
    client.post(_url(order, payment), body)

    response = client.post(_url(order, payment), sign_response(payment, "05"))

    assert response["Location"] == reverse("orders:cart")
    assert _messages(response) == []
    payment.refresh_from_db()
    order.refresh_from_db()
    assert (payment.state, payment.remote_state) == ("capture_completed", "done")
    assert order.payment_method.response_code == "00"


def test_not_pending_remote_state_is_a_replay(config, order, payment, sign_response):
    Payment.objects.filter(pk=payment.pk).update(remote_state=Payment.RemoteState.DONE)

    outcome = handle_callback(order.id, payment.pk, sign_response(payment, "00"), config)

    assert isinstance(outcome.error, ReplayError)
    assert outcome.message is None
    payment.refresh_from_db()
    assert payment.state == "new"


def test_reference_mismatch_is_rejected_with_valid_seal(client, sips_settings, order, payment, sign_response):
    response = client.post(_url(order, payment), sign_response(payment, "00", transactionReference="someoneelse"))

    assert response["Location"] == reverse("orders:cart")
    assert _messages(response) == ["An error occurred while processing your request."]
    payment.refresh_from_db()
    assert (payment.state, payment.remote_state) == ("new", "pending")
    order.refresh_from_db()
    assert order.payment_method.response_code == ""


def test_forged_seal_is_rejected(config, order, payment, sign_response):
    body = sign_response(payment, "00")
    body["Seal"] = "f" * 64

    outcome = handle_callback(order.id, payment.pk, body, config)

    assert isinstance(outcome.error, AuthenticityError)
    assert outcome.redirect_to == reverse("orders:cart")
    payment.refresh_from_db()
    order.refresh_from_db()
    assert (payment.state, payment.remote_state) == ("new", "pending")
    assert order.checkout_step == "payment"


def test_rejections_are_logged_with_each_check(config, order, payment, sign_response, caplog):
    body = sign_response(payment, "00")
    body["Seal"] = "0" * 64

    with caplog.at_level("WARNING", logger="payments"):
        handle_callback(order.id, payment.pk, body, config)

    assert "[Valid SIPS answer: No]" in caplog.text
    assert "[Is remote state pending: pending]" in caplog.text
    assert config.passphrase.reveal() not in caplog.text


def test_unknown_order_goes_to_cart(client, sips_settings, order, payment, sign_response):
    url = reverse(
        "payments:handle_response",
        kwargs={"order_id": "00000000-0000-0000-0000-000000000000", "payment_id": payment.pk},
    )
    response = client.post(url, sign_response(payment))
    assert response["Location"] == reverse("orders:cart")


def test_payment_of_another_order_is_ignored(config, order, payment, sign_response):
    other = Order.objects.create(total=order.total, currency="EUR")

    outcome = handle_callback(other.id, payment.pk, sign_response(payment), config)

    assert isinstance(outcome.error, ReplayError)
    payment.refresh_from_db()
    assert payment.remote_state == "pending"


def test_misconfigured_gateway_answers_500(client, sips_settings, order, payment, sign_response):
    sips_settings.SIPS_PASSPHRASE = ""
    response = client.post(_url(order, payment), sign_response(payment))
    assert response.status_code == 500
    assert b"SIPS_PASSPHRASE" in response.content
