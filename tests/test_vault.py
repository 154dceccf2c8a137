import pytest

from vault_core import (
    InvalidSecretError,
    SecretNotFoundError,
    generate_otp,
    list_secrets,
    load_secret,
    save_secret,
    verify_otp,
)

from conftest import RFC_SECRET


def test_round_trip_with_explicit_store(store):
    save_secret("x", RFC_SECRET, store=store)
    assert load_secret("x", store=store) == RFC_SECRET
    assert list_secrets(store=store) == ["x"]


def test_round_trip_from_environment(vault_env):
    save_secret("x", RFC_SECRET)
    assert load_secret("x") == RFC_SECRET


def test_generate_otp_rfc_vector(store):
    save_secret("rfc", RFC_SECRET, store=store)
    assert generate_otp("rfc", length=8, window=30, timestamp=59, store=store) == "94287082"


def test_generate_otp_same_bucket(store):
    save_secret("rfc", RFC_SECRET, store=store)
    codes = {generate_otp("rfc", timestamp=t, store=store) for t in (60, 75, 89)}
    assert codes == {"359152"}


def test_verify_otp(store):
    save_secret("rfc", RFC_SECRET, store=store)
    assert verify_otp("rfc", "94287082", length=8, timestamp=59, store=store)
    assert not verify_otp("rfc", "94287083", length=8, timestamp=59, store=store)


def test_load_unknown(store):
    with pytest.raises(SecretNotFoundError):
        load_secret("nonexistent", store=store)


@pytest.mark.parametrize("secret", ["GEZDGNB1", "GEZDGNB8"])
def test_generate_otp_invalid_secret(store, secret):
    save_secret("bad", secret, store=store)
    with pytest.raises(InvalidSecretError):
        generate_otp("bad", store=store)
