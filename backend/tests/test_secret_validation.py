"""
Tests for TTL validation and id generation.
"""

import re

import pytest

from cendre.core.config import settings
from cendre.services.secret_store import generate_id, validate_blob, validate_ttl
from cendre.utils.exceptions import InvalidInputError


@pytest.mark.parametrize("ttl", [1, 60, 86400])
def test_validate_ttl_accepts_values_in_bounds(ttl):
    assert validate_ttl(ttl, max_ttl_secs=86400) == ttl


@pytest.mark.parametrize("ttl", [0, -1, 86401])
def test_validate_ttl_rejects_out_of_bounds(ttl):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_ttl(ttl, max_ttl_secs=86400)

    assert exc_info.value.field == "ttl_secs"


@pytest.mark.parametrize("ttl", [True, 1.5, "60", None])
def test_validate_ttl_rejects_non_integers(ttl):
    with pytest.raises(InvalidInputError):
        validate_ttl(ttl, max_ttl_secs=86400)


def test_validate_ttl_never_accepts_zero_even_with_lower_minimum():
    with pytest.raises(InvalidInputError):
        validate_ttl(0, max_ttl_secs=10, min_ttl_secs=0)


def test_validate_ttl_defaults_to_configured_bounds():
    assert validate_ttl(settings.SECRET_TTL_MAX_SECS) == settings.SECRET_TTL_MAX_SECS
    with pytest.raises(InvalidInputError):
        validate_ttl(settings.SECRET_TTL_MAX_SECS + 1)


def test_generate_id_is_url_safe_and_high_entropy():
    secret_id = generate_id()

    # 16 bytes of randomness encode to 22 base64url characters
    assert len(secret_id) == 22
    assert re.fullmatch(r"[A-Za-z0-9_-]+", secret_id)


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(1000)}
    assert len(ids) == 1000


@pytest.mark.parametrize("value", ["", "   ", None, b"AQ=="])
def test_validate_blob_rejects_empty_or_non_string(value):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_blob("ciphertext", value, max_length=10)

    assert exc_info.value.field == "ciphertext"


def test_validate_blob_rejects_oversized_values():
    with pytest.raises(InvalidInputError):
        validate_blob("iv", "A" * 11, max_length=10)

    assert validate_blob("iv", "A" * 10, max_length=10) == "A" * 10
