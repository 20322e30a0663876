"""Shared fixtures: a configured TEST-mode gateway, an order at the payment step."""

from decimal import Decimal

import pytest

from orders.models import Order
from payments.conf import GatewayConfig
from payments.models import PaymentMethod
from payments.services import create_payment
from payments.sips import Mode, Passphrase, SealComposer, to_parameter_string

MERCHANT_ID = "002001000000001"
PASSPHRASE = "002001000000001_KEY1"


@pytest.fixture
def sips_settings(settings):
    settings.SIPS_MODE = "TEST"
    settings.SIPS_MERCHANT_ID = MERCHANT_ID
    settings.SIPS_PASSPHRASE = PASSPHRASE
    settings.SIPS_KEY_VERSION = "1"
    settings.SIPS_INTERFACE_VERSION = "HP_2.20"
    settings.SIPS_SEAL_ALGORITHM = "SHA-256"
    settings.SIPS_TIMEOUT = 5
    settings.PUBLIC_BASE_URL = "https://shop.example.com"
    return settings


@pytest.fixture
def config():
    return GatewayConfig(
        mode=Mode.TEST,
        interface_version="HP_2.20",
        passphrase=Passphrase(PASSPHRASE),
        merchant_id=MERCHANT_ID,
        key_version=1,
    )


@pytest.fixture
def composer(config):
    return SealComposer(config.passphrase, config.seal_algorithm)


@pytest.fixture
def payment_method(db):
    return PaymentMethod.objects.create(payment_option="VISA")


@pytest.fixture
def order(db, payment_method):
    return Order.objects.create(
        total=Decimal("19.99"),
        currency="EUR",
        language="fr",
        checkout_step="payment",
        payment_gateway="sips_payment",
        payment_method=payment_method,
    )


@pytest.fixture
def payment(order, config):
    return create_payment(order, config)


@pytest.fixture
def sign_response(composer):
    """Build the POST body SIPS sends back, sealed with the shared passphrase."""

    def _sign(payment, response_code="00", **overrides):
        params = {
            "amount": "1999",
            "currencyCode": "978",
            "merchantId": MERCHANT_ID,
            "transactionReference": payment.remote_id,
            "keyVersion": "1",
            "responseCode": response_code,
        }
        params.update(overrides)
        return {
            "Data": to_parameter_string(params),
            "Seal": composer.seal(params),
            "InterfaceVersion": "HP_2.20",
        }

    return _sign
