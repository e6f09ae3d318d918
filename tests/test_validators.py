"""Tests for checkout form checks."""

from blytz.validators import check_address, check_payment_card

COMPLETE = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address_line1": "12 Analytical Way",
    "city": "London",
    "state": "LDN",
    "postal_code": "N1 9GU",
    "country": "GB",
}


def test_complete_address_passes():
    result = check_address(COMPLETE)

    assert result["passed"] is True
    assert result["missing_fields"] == []


def test_missing_and_blank_fields_reported():
    data = dict(COMPLETE, first_name="  ")
    del data["state"]

    result = check_address(data)

    assert result["passed"] is False
    assert result["missing_fields"] == ["first_name", "state"]
    assert result["reason"] == "Please fill in: first name, state"


def test_blank_card_form_passes():
    assert check_payment_card("", None, " ")["passed"] is True


def test_valid_card():
    result = check_payment_card("4242 4242 4242 4242", "12/30", "123")

    assert result["passed"] is True


def test_partial_card_fails():
    result = check_payment_card("4242-4242-4242-4242", "", "")

    assert result["passed"] is False
    assert result["invalid_fields"] == ["card_expiry", "cvc"]
