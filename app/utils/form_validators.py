"""Contact form validation and sanitization.

Validation messages are shown to site visitors, so they are in Korean like
the rest of the public site.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, TypeVar

import bleach

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Mobile (010, 011, 016-019), Seoul (02) and other area codes (03x-09x)
_KOREAN_PHONE = re.compile(r"^(01[016789]|02|0[3-9][0-9])-?[0-9]{3,4}-?[0-9]{4}$")
_WHITESPACE = re.compile(r"\s+")

NAME_MAX_LENGTH = 50
ORGANIZATION_MAX_LENGTH = 100
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 1000

DEFAULT_WORKSHOP_SERVICE = "전문 프로그램"

ERROR_MESSAGES = {
    "name": "이름을 입력해주세요 (최대 50자)",
    "email": "유효한 이메일 주소를 입력해주세요",
    "phone": "유효한 전화번호를 입력해주세요",
    "organization": "소속을 100자 이내로 입력해주세요",
    "service": "서비스 유형을 선택해주세요",
    "workshop": "특강/워크숍 유형을 선택해주세요",
    "message": "문의 내용을 10자 이상 입력해주세요 (최대 1000자)",
}

FormT = TypeVar("FormT", bound=Mapping[str, Any])


def escape_html(text: str) -> str:
    """Escape markup so the text renders literally.

    Every ``&`` is escaped, including ones that already start an entity.

    >>> escape_html('<b>"hi"</b>')
    '&lt;b&gt;&quot;hi&quot;&lt;/b&gt;'
    >>> escape_html("&lt;")
    '&amp;lt;'
    """
    if not text:
        return ""
    # bleach keeps existing entities as they are
    escaped = bleach.clean(text.replace("&", "&amp;"), tags=[], attributes={}, strip=False)
    return escaped.replace('"', "&quot;").replace("'", "&#039;")


def is_valid_email(email: str) -> bool:
    return bool(email) and _EMAIL.match(email) is not None


def is_valid_phone_number(phone: str | None) -> bool:
    """Korean phone number, dashes optional. Empty is valid (optional field)."""
    if not phone:
        return True
    return _KOREAN_PHONE.match(_WHITESPACE.sub("", phone)) is not None


def is_valid_length(text: str | None, min_length: int, max_length: int) -> bool:
    if not text:
        return min_length == 0
    return min_length <= len(text) <= max_length


def sanitize_input(value: str | None) -> str:
    if not value:
        return ""
    return value.strip()


def sanitize_form_data(data: FormT) -> dict[str, Any]:
    """Return a copy with every string value trimmed; other values untouched."""
    return {
        key: sanitize_input(value) if isinstance(value, str) else value
        for key, value in data.items()
    }


def validate_contact_form(
    data: Mapping[str, Any],
    *,
    workshop_service: str = DEFAULT_WORKSHOP_SERVICE,
) -> dict[str, str]:
    """Validate a sanitized contact form.

    Args:
        data: Form fields (name, email, phone, organization, service,
            workshop, message).
        workshop_service: Service value that requires a workshop selection.

    Returns:
        Mapping of field name to error message. Empty when the form is valid.
    """
    errors: dict[str, str] = {}

    name = data.get("name") or ""
    if not name or not is_valid_length(name, 1, NAME_MAX_LENGTH):
        errors["name"] = ERROR_MESSAGES["name"]

    email = data.get("email") or ""
    if not email or not is_valid_email(email):
        errors["email"] = ERROR_MESSAGES["email"]

    phone = data.get("phone")
    if phone and not is_valid_phone_number(phone):
        errors["phone"] = ERROR_MESSAGES["phone"]

    organization = data.get("organization")
    if organization and not is_valid_length(organization, 1, ORGANIZATION_MAX_LENGTH):
        errors["organization"] = ERROR_MESSAGES["organization"]

    service = data.get("service")
    if not service:
        errors["service"] = ERROR_MESSAGES["service"]
    elif service == workshop_service and not data.get("workshop"):
        errors["workshop"] = ERROR_MESSAGES["workshop"]

    message = data.get("message") or ""
    if not message or not is_valid_length(message, MESSAGE_MIN_LENGTH, MESSAGE_MAX_LENGTH):
        errors["message"] = ERROR_MESSAGES["message"]

    return errors
