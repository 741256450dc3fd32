"""Pydantic schemas for the contact form endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class ContactRequest(BaseModel):
    """Contact form submission.

    Every field is optional at the schema level: ``null``, missing and
    non-text values all reach the form validator as missing, so they are
    reported per field with a 400 instead of as a schema error.
    """

    name: str | None = Field(None, description="Sender name (1-50 chars).")
    email: str | None = Field(None, description="Reply-to email address.")
    phone: str | None = Field(None, description="Optional Korean phone number.")
    organization: str | None = Field(None, description="Optional organization (max 100 chars).")
    service: str | None = Field(None, description="Requested service category.")
    workshop: str | None = Field(
        None,
        description="Workshop selection; required for the workshop service.",
    )
    message: str | None = Field(None, description="Inquiry text (10-1000 chars).")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        # Numbers become text; lists, objects and booleans count as missing
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None


class ContactResponse(BaseModel):
    message: str = Field(..., description="Confirmation shown to the sender.")
