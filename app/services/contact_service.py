"""Contact form handling.

Delivery (email to staff, auto-reply to the sender) is not wired up yet; a
received inquiry is only logged, with personal data hashed or omitted.
"""

from __future__ import annotations

import logging

from app.core.config import settings
from app.core.errors import ValidationAppError
from app.core.logging import hash_identifier
from app.schemas.contact import ContactRequest, ContactResponse
from app.utils.form_validators import escape_html, sanitize_form_data, validate_contact_form

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "문의가 성공적으로 접수되었습니다. 곧 답변 드리겠습니다."

# Free-text fields that end up in HTML notifications
_ESCAPED_FIELDS = ("name", "organization", "workshop", "message")


class ContactService:
    """Validate, sanitize and accept contact inquiries."""

    def __init__(self, workshop_service: str | None = None) -> None:
        self.workshop_service = workshop_service or settings.app.workshop_service

    def prepare(self, form: ContactRequest) -> dict[str, str | None]:
        """Trim, validate and HTML-escape a submission.

        Raises:
            ValidationAppError: One or more fields are invalid. The per-field
                messages are in ``details["fields"]``.
        """
        data = sanitize_form_data(form.model_dump())
        errors = validate_contact_form(data, workshop_service=self.workshop_service)
        if errors:
            logger.info(
                "contact.validation_failed",
                extra={"invalid_fields": sorted(errors)},
            )
            raise ValidationAppError(
                code="contact_validation_failed",
                message="입력 내용을 확인해주세요.",
                details={"fields": errors},
            )

        for field in _ESCAPED_FIELDS:
            if data.get(field):
                data[field] = escape_html(data[field])
        return data

    async def submit(self, form: ContactRequest) -> ContactResponse:
        inquiry = self.prepare(form)
        logger.info(
            "contact.received",
            extra={
                "email_hash": hash_identifier(inquiry["email"] or ""),
                "service": inquiry["service"],
                "workshop": inquiry.get("workshop"),
                "has_phone": bool(inquiry.get("phone")),
                "message_length": len(inquiry["message"] or ""),
            },
        )
        return ContactResponse(message=SUCCESS_MESSAGE)
