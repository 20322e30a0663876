"""Seal composition: ordering, determinism and tamper sensitivity."""

import hashlib
import hmac

import pytest

from payments.sips import HMAC_SHA256, Passphrase, SealComposer, to_parameter_string
from payments.sips.composer import ordered_items

PARAMS = {
    "transactionReference": "abc123",
    "amount": "1999",
    "merchantId": "002001000000001",
    "currencyCode": "978",
    "responseCode": "00",
}


def test_declared_order_wins_over_insertion_order():
    keys = [k for k, _ in ordered_items(PARAMS)]
    assert keys == ["amount", "currencyCode", "merchantId", "transactionReference", "responseCode"]


def test_unknown_parameters_follow_sorted_by_name():
    keys = [k for k, _ in ordered_items({"zeta": "1", "alpha": "2", "amount": "3"})]
    assert keys == ["amount", "alpha", "zeta"]


def test_empty_values_are_not_signed():
    assert ordered_items({"amount": "1", "orderId": "", "captureDay": None}) == [("amount", "1")]


def test_parameter_string_format():
    assert to_parameter_string({"normalReturnUrl": "https://x/y", "amount": "10"}) == (
        "amount=10|normalReturnUrl=https://x/y"
    )


def test_compose_concatenates_values_then_passphrase():
    composer = SealComposer(Passphrase("secret"))
    assert composer.compose(PARAMS) == "1999978002001000000001abc12300secret"


def test_sha256_seal_matches_digest_of_canonical_string():
    composer = SealComposer(Passphrase("secret"))
    expected = hashlib.sha256(b"1999978002001000000001abc12300secret").hexdigest()
    assert composer.seal(PARAMS) == expected


def test_hmac_seal_uses_passphrase_as_key():
    composer = SealComposer(Passphrase("secret"), HMAC_SHA256)
    assert composer.compose(PARAMS) == "1999978002001000000001abc12300"
    expected = hmac.new(b"secret", b"1999978002001000000001abc12300", hashlib.sha256).hexdigest()
    assert composer.seal(PARAMS) == expected


def test_seal_is_deterministic_regardless_of_mapping_order():
    composer = SealComposer(Passphrase("secret"))
    reversed_params = dict(reversed(list(PARAMS.items())))
    assert composer.seal(PARAMS) == composer.seal(dict(PARAMS)) == composer.seal(reversed_params)


def test_verify_accepts_own_seal_case_insensitively():
    composer = SealComposer(Passphrase("secret"))
    seal = composer.seal(PARAMS)
    assert composer.verify(PARAMS, seal)
    assert composer.verify(PARAMS, seal.upper())


def test_verify_rejects_other_passphrase_and_empty_seal():
    seal = SealComposer(Passphrase("secret")).seal(PARAMS)
    assert not SealComposer(Passphrase("other")).verify(PARAMS, seal)
    assert not SealComposer(Passphrase("secret")).verify(PARAMS, "")


@pytest.mark.parametrize("algorithm", ["SHA-256", HMAC_SHA256])
def test_any_single_character_mutation_breaks_the_seal(algorithm):
    composer = SealComposer(Passphrase("secret"), algorithm)
    seal = composer.seal(PARAMS)
    for name, value in PARAMS.items():
        for i, ch in enumerate(value):
            mutated = dict(PARAMS)
            mutated[name] = value[:i] + ("X" if ch != "X" else "Y") + value[i + 1:]
            assert not composer.verify(mutated, seal), (name, i)


def test_unsupported_algorithm_is_rejected():
    with pytest.raises(ValueError):
        SealComposer(Passphrase("secret"), "MD5")


def test_passphrase_never_shows_in_repr():
    composer = SealComposer(Passphrase("top-secret"))
    assert "top-secret" not in repr(composer)
    assert "top-secret" not in str(composer.passphrase)
