from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_contact_service
from app.core.rate_limit import enforce_contact_rate_limit
from app.schemas.contact import ContactRequest, ContactResponse
from app.services.contact_service import ContactService

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post(
    "/contact",
    response_model=ContactResponse,
    dependencies=[Depends(enforce_contact_rate_limit)],
    responses={
        400: {"description": "One or more fields are invalid (details.fields)."},
        429: {"description": "Too many submissions from this client."},
    },
)
async def submit_contact(
    form: ContactRequest,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactResponse:
    """Submit the contact form.

    Every request counts against the client's budget, including invalid
    ones.

    Returns:
        ContactResponse: Confirmation message for the sender.

    Raises:
        ValidationAppError: 400 with per-field messages.
        HTTPException: 429 with ``Retry-After`` when rate limited.
    """
    return await service.submit(form)
