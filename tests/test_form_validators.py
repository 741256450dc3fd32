"""Unit tests for contact form validation and sanitization."""

import pytest

from app.utils.form_validators import (
    ERROR_MESSAGES,
    escape_html,
    is_valid_email,
    is_valid_length,
    is_valid_phone_number,
    sanitize_form_data,
    sanitize_input,
    validate_contact_form,
)


def _valid_form(**overrides) -> dict:
    form = {
        "name": "홍길동",
        "email": "gildong@example.com",
        "phone": "010-1234-5678",
        "organization": "Acme",
        "service": "리더십 코칭",
        "workshop": None,
        "message": "리더십 코칭 프로그램에 대해 문의드립니다.",
    }
    form.update(overrides)
    return form


class TestEscapeHtml:
    def test_escapes_markup_and_quotes(self) -> None:
        assert escape_html("<script>alert('x')</script>") == (
            "&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;"
        )

    def test_escapes_ampersand_and_double_quote(self) -> None:
        assert escape_html('Tom & "Jerry"') == "Tom &amp; &quot;Jerry&quot;"

    def test_existing_entities_are_escaped_again(self) -> None:
        assert escape_html("&lt;b&gt; &amp; &quot;") == "&amp;lt;b&amp;gt; &amp;amp; &amp;quot;"

    def test_plain_text_unchanged(self) -> None:
        assert escape_html("안녕하세요 hello") == "안녕하세요 hello"

    def test_empty(self) -> None:
        assert escape_html("") == ""


class TestFieldValidators:
    @pytest.mark.parametrize("email", ["a@b.co", "first.last@example.com"])
    def test_valid_email(self, email: str) -> None:
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "no-at.com", "a@b", "a b@c.com", "a@b c.com"])
    def test_invalid_email(self, email: str) -> None:
        assert not is_valid_email(email)

    @pytest.mark.parametrize(
        "phone",
        ["", None, "010-1234-5678", "01012345678", "02-123-4567", "031 123 4567"],
    )
    def test_valid_phone(self, phone) -> None:
        assert is_valid_phone_number(phone)

    @pytest.mark.parametrize("phone", ["012-1234-5678", "123-4567", "010-12-5678", "+82-10-1234-5678"])
    def test_invalid_phone(self, phone: str) -> None:
        assert not is_valid_phone_number(phone)

    def test_length_bounds(self) -> None:
        assert is_valid_length("abc", 1, 3)
        assert not is_valid_length("abcd", 1, 3)
        assert not is_valid_length("", 1, 3)
        assert is_valid_length("", 0, 3)
        assert is_valid_length(None, 0, 3)


class TestSanitize:
    def test_sanitize_input(self) -> None:
        assert sanitize_input("  hi  ") == "hi"
        assert sanitize_input(None) == ""

    def test_sanitize_form_data_trims_strings_only(self) -> None:
        data = {"name": "  Kim ", "count": 3, "workshop": None}

        result = sanitize_form_data(data)

        assert result == {"name": "Kim", "count": 3, "workshop": None}
        assert data["name"] == "  Kim "


class TestValidateContactForm:
    def test_valid_form_has_no_errors(self) -> None:
        assert validate_contact_form(_valid_form()) == {}

    def test_optional_fields_may_be_missing(self) -> None:
        assert validate_contact_form(_valid_form(phone=None, organization=None)) == {}

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("name", ""),
            ("name", "x" * 51),
            ("email", "not-an-email"),
            ("phone", "12345"),
            ("organization", "o" * 101),
            ("service", ""),
            ("message", "too short"),
            ("message", "m" * 1001),
        ],
    )
    def test_single_invalid_field(self, field: str, value: str) -> None:
        errors = validate_contact_form(_valid_form(**{field: value}))

        assert errors == {field: ERROR_MESSAGES[field]}

    def test_message_boundaries(self) -> None:
        assert validate_contact_form(_valid_form(message="m" * 10)) == {}
        assert validate_contact_form(_valid_form(message="m" * 1000)) == {}

    def test_workshop_required_for_workshop_service(self) -> None:
        errors = validate_contact_form(_valid_form(service="전문 프로그램"))

        assert errors == {"workshop": ERROR_MESSAGES["workshop"]}
        assert validate_contact_form(_valid_form(service="전문 프로그램", workshop="조직 워크숍")) == {}

    def test_workshop_service_is_configurable(self) -> None:
        errors = validate_contact_form(_valid_form(service="Workshops"), workshop_service="Workshops")

        assert set(errors) == {"workshop"}

    def test_all_required_missing(self) -> None:
        errors = validate_contact_form({})

        assert set(errors) == {"name", "email", "service", "message"}
