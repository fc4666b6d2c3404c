"""Field and document validation tests (rule order, implied type checks)."""

import pytest

from app.application.services.validation import (
    MSG_INVALID_EMAIL,
    MSG_INVALID_FORMAT,
    MSG_INVALID_OPTION,
    MSG_INVALID_PATTERN,
    MSG_INVALID_URL,
    MSG_REQUIRED,
    format_validation_errors,
    is_valid_email,
    is_valid_url,
    validate_document,
    validate_field,
    validate_value,
)
from app.domain.entities.schema import FieldDef, ValidationRule
from app.domain.field_types import FieldType


def test_no_rule_accepts_anything() -> None:
    assert validate_field("x", None, None) is None
    assert validate_field("x", "anything", None) is None


@pytest.mark.parametrize("empty", [None, ""])
def test_required_rejects_empty(empty) -> None:
    error = validate_field("name", empty, ValidationRule(required=True))
    assert error is not None
    assert error.field == "name"
    assert error.message == MSG_REQUIRED


def test_optional_empty_short_circuits_other_rules() -> None:
    rule = ValidationRule(min=5, pattern="^x", email=True, url=True)
    assert validate_field("f", "", rule) is None
    assert validate_field("f", None, rule) is None


def test_zero_and_false_are_not_empty() -> None:
    rule = ValidationRule(required=True)
    assert validate_field("n", 0, rule) is None
    assert validate_field("b", False, rule) is None


def test_numeric_bounds_are_inclusive() -> None:
    rule = ValidationRule(min=0, max=100)
    assert validate_field("price", 0, rule) is None
    assert validate_field("price", 100, rule) is None
    low = validate_field("price", -5, rule)
    high = validate_field("price", 100.5, rule)
    assert low is not None and low.message == "Value must be at least 0"
    assert high is not None and high.message == "Value must be at most 100"


def test_bounds_do_not_apply_to_strings_without_text_type() -> None:
    assert validate_field("code", "abc", ValidationRule(min=10)) is None


def test_text_bounds_are_length_bounds() -> None:
    rule = ValidationRule(min=2, max=4)
    short = validate_field("code", "a", rule, FieldType.TEXT)
    long = validate_field("code", "abcde", rule, FieldType.TEXT)
    assert short is not None and short.message == "Must be at least 2 characters"
    assert long is not None and long.message == "Must be at most 4 characters"
    assert validate_field("code", "abc", rule, FieldType.TEXT) is None


def test_pattern_uses_search_and_custom_message() -> None:
    rule = ValidationRule(pattern=r"\d{3}", pattern_error="Needs three digits")
    assert validate_field("sku", "AB-123", rule) is None
    error = validate_field("sku", "AB-12", rule)
    assert error is not None and error.message == "Needs three digits"


def test_pattern_default_message() -> None:
    error = validate_field("sku", "nope", ValidationRule(pattern="^[0-9]+$"))
    assert error is not None and error.message == MSG_INVALID_FORMAT


def test_invalid_pattern_is_a_field_error_not_a_crash() -> None:
    error = validate_field("sku", "abc", ValidationRule(pattern="(["))
    assert error is not None and error.message == MSG_INVALID_PATTERN


def test_rule_order_bounds_before_pattern() -> None:
    rule = ValidationRule(min=0, pattern="^never$")
    error = validate_field("n", -1, rule)
    assert error is not None and error.message.startswith("Value must be at least")


@pytest.mark.parametrize(
    "value,ok",
    [
        ("a@b.co", True),
        ("first.last@example.org", True),
        ("no-at-sign", False),
        ("two@@example.com", False),
        ("spaces in@example.com", False),
        ("missing@tld", False),
    ],
)
def test_email_shape(value: str, ok: bool) -> None:
    assert is_valid_email(value) is ok


@pytest.mark.parametrize(
    "value,ok",
    [
        ("https://example.com/path?q=1", True),
        ("ftp://files.example.com", True),
        ("example.com", False),
        ("not a url", False),
    ],
)
def test_url_requires_scheme(value: str, ok: bool) -> None:
    assert is_valid_url(value) is ok


def test_email_and_url_switches() -> None:
    email_error = validate_field("c", "bad", ValidationRule(email=True))
    url_error = validate_field("w", "bad", ValidationRule(url=True))
    assert email_error is not None and email_error.message == MSG_INVALID_EMAIL
    assert url_error is not None and url_error.message == MSG_INVALID_URL


def test_select_type_implies_membership() -> None:
    field = FieldDef(name="status", type=FieldType.SELECT, options=("a", "b"))
    assert validate_value(field, "a") is None
    assert validate_value(field, "") is None
    error = validate_value(field, "c")
    assert error is not None and error.message == MSG_INVALID_OPTION


def test_email_and_url_types_imply_format_checks() -> None:
    email = FieldDef(name="contact", type=FieldType.EMAIL)
    url = FieldDef(name="site", type=FieldType.URL)
    assert validate_value(email, "x@y.io") is None
    assert validate_value(email, "x").message == MSG_INVALID_EMAIL
    assert validate_value(url, "https://y.io") is None
    assert validate_value(url, "y.io").message == MSG_INVALID_URL


def test_validate_document_collects_all_errors_in_field_order() -> None:
    fields = (
        FieldDef(name="name", type=FieldType.TEXT, validation=ValidationRule(required=True)),
        FieldDef(name="price", type=FieldType.NUMBER, validation=ValidationRule(min=0)),
        FieldDef(name="notes", type=FieldType.TEXT),
    )
    result = validate_document({"name": "", "price": -1, "extra": "ignored"}, fields)
    assert not result.is_valid
    assert [e.field for e in result.errors] == ["name", "price"]
    assert result.errors_as_dicts()[0] == {"field": "name", "message": MSG_REQUIRED}


def test_validate_document_valid() -> None:
    fields = (FieldDef(name="name", type=FieldType.TEXT),)
    assert validate_document({}, fields).is_valid


def test_format_validation_errors() -> None:
    fields = (
        FieldDef(name="a", type=FieldType.TEXT, validation=ValidationRule(required=True)),
    )
    text = format_validation_errors(validate_document({}, fields).errors)
    assert text == f"a: {MSG_REQUIRED}"


def test_validate_document_is_deterministic() -> None:
    fields = (
        FieldDef(name="name", type=FieldType.TEXT, validation=ValidationRule(required=True)),
        FieldDef(name="price", type=FieldType.NUMBER, validation=ValidationRule(min=0, max=10)),
        FieldDef(name="site", type=FieldType.URL),
        FieldDef(name="code", type=FieldType.TEXT, validation=ValidationRule(pattern="^[A-Z]+$")),
    )
    document = {"name": "", "price": 42, "site": "not a url", "code": "abc"}
    first = validate_document(document, fields)
    second = validate_document(document, fields)
    assert first == second
    assert len(first.errors) == 4
