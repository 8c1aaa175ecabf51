"""
Email format validation.
Run with: pytest tests/test_validation.py -v
"""

import pytest

from mailcollect.core.validation import validate_email


@pytest.mark.parametrize("email", [
    "test@example.com",
    "Test@Example.com",
    "first.last@sub.domain.co.uk",
    "user+tag@gmail.com",
    "o_neil%x@example.io",
    "dev@my-site.example.com",
    "  padded@example.com  ",
])
def test_accepts_valid_addresses(email):
    assert validate_email(email) is True


@pytest.mark.parametrize("email", [
    "",
    "   ",
    "not-an-email",
    "a@b",
    "@example.com",
    "user@",
    "user@.com",
    "user..dots@example.com",
    ".leading@example.com",
    "trailing.@example.com",
    "two@@example.com",
    "spaces in@example.com",
    "user@example.c",
    "a@-example-.com",
    "user@example-.com",
    "user@sub.-example.com",
    None,
    42,
    ["a@example.com"],
])
def test_rejects_malformed_addresses(email):
    assert validate_email(email) is False


def test_rejects_overlong_address():
    local = "a" * 250
    assert validate_email(f"{local}@example.com") is False
