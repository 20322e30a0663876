"""Inbound response parsing and the three callback checks."""

import pytest

from payments.sips import (
    PaymentResponse,
    describe_response_code,
    to_parameter_string,
    validate_response,
)
from payments.sips.response import parse_data

PARAMS = {
    "amount": "1999",
    "currencyCode": "978",
    "merchantId": "002001000000001",
    "transactionReference": "ref123",
    "responseCode": "00",
}


def _post(composer, params=PARAMS):
    return {"Data": to_parameter_string(params), "Seal": composer.seal(params), "InterfaceVersion": "HP_2.20"}


def test_parse_data_splits_pairs_and_keeps_equals_in_values():
    assert parse_data("a=1|b=x=y||broken|c=") == {"a": "1", "b": "x=y", "c": ""}


def test_lookup_is_case_insensitive(composer):
    response = PaymentResponse(_post(composer))
    assert response.get("RESPONSECODE") == "00"
    assert response.get("TransactionReference") == "ref123"
    assert response.get("missing", "dflt") == "dflt"


def test_flat_fields_are_accepted(composer):
    raw = dict(PARAMS, Seal=composer.seal(PARAMS), InterfaceVersion="HP_2.20")
    response = PaymentResponse(raw)
    assert "Seal" not in response.parameters
    assert "InterfaceVersion" not in response.parameters
    assert response.is_valid(composer)


def test_valid_successful_response(composer):
    result = validate_response(_post(composer), "ref123", "pending", composer)
    assert result.ok
    assert result.successful
    assert result.response_code == "00"


def test_declined_response_is_ok_but_not_successful(composer):
    params = dict(PARAMS, responseCode="05")
    result = validate_response(_post(composer, params), "ref123", "pending", composer)
    assert result.ok
    assert not result.successful
    assert result.description == "Authorisation refused"


def test_wrong_reference_is_rejected_even_with_valid_seal(composer):
    result = validate_response(_post(composer), "other-ref", "pending", composer)
    assert result.seal_valid
    assert not result.reference_matches
    assert not result.ok


@pytest.mark.parametrize("remote_state", ["done", "failed", ""])
def test_non_pending_payment_is_rejected_regardless_of_seal(composer, remote_state):
    result = validate_response(_post(composer), "ref123", remote_state, composer)
    assert result.seal_valid
    assert not result.state_pending
    assert not result.ok
    assert not result.successful


def test_every_check_is_reported_when_all_fail(composer):
    raw = _post(composer)
    raw["Seal"] = "0" * 64
    result = validate_response(raw, "other-ref", "done", composer)
    assert (result.seal_valid, result.reference_matches, result.state_pending) == (False, False, False)


def test_tampered_amount_breaks_the_seal(composer):
    raw = _post(composer)
    raw["Data"] = raw["Data"].replace("amount=1999", "amount=1")
    assert not validate_response(raw, "ref123", "pending", composer).ok


def test_empty_reference_never_matches(composer):
    params = dict(PARAMS, transactionReference="")
    result = validate_response(_post(composer, params), "", "pending", composer)
    assert not result.reference_matches


@pytest.mark.parametrize(
    "code, description",
    [
        ("00", "Authorisation accepted"),
        ("05", "Authorisation refused"),
        ("17", "Buyer cancellation"),
        ("51", "mount too high"),
        ("77", "Unknown error code - [77]"),
        ("", "Unknown error code - []"),
    ],
)
def test_describe_response_code(code, description):
    assert describe_response_code(code) == description
