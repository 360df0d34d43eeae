from datetime import date

import pytest

from booking_engine.core.errors import ValidationError
from booking_engine.services.customer.required_fields import (
    normalize_phone,
    validate_customer_fields,
    validate_required_field_names,
)

TODAY = date(2026, 3, 2)
MARIA = {"name": "Maria", "phone": "(51) 98065-1119"}


class TestValidateCustomerFields:
    def test_minimal_customer(self):
        validate_customer_fields(["name", "phone"], MARIA, TODAY)

    def test_name_and_phone_always_required(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_customer_fields([], {}, TODAY)
        assert set(exc_info.value.details["errors"]) == {"name", "phone"}

    def test_configured_fields_required(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_customer_fields(["name", "phone", "email", "last_name", "birth_date"], MARIA, TODAY)
        assert set(exc_info.value.details["errors"]) == {"email", "last_name", "birth_date"}

    def test_birth_date_must_be_in_the_past(self):
        data = dict(MARIA, birth_date=TODAY)
        with pytest.raises(ValidationError) as exc_info:
            validate_customer_fields(["name", "phone", "birth_date"], data, TODAY)
        assert "birth_date" in exc_info.value.details["errors"]

        validate_customer_fields(["name", "phone", "birth_date"], dict(MARIA, birth_date=date(1990, 5, 17)), TODAY)

    def test_optional_field_still_validated_when_sent(self):
        with pytest.raises(ValidationError):
            validate_customer_fields(["name", "phone"], dict(MARIA, birth_date=date(2030, 1, 1)), TODAY)

    @pytest.mark.parametrize("phone", ["123", "abc", "+55 (51) 9"])
    def test_short_phone(self, phone):
        with pytest.raises(ValidationError):
            validate_customer_fields(None, {"name": "Maria", "phone": phone}, TODAY)


class TestRequiredFieldNames:
    def test_normalized_and_always_includes_identity(self):
        assert validate_required_field_names(["email"]) == ["name", "phone", "email"]

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            validate_required_field_names(["cpf"])


def test_normalize_phone():
    assert normalize_phone("(51) 98065-1119") == "51980651119"
    assert normalize_phone("+55 51 98065 1119") == "5551980651119"
