"""Public contact form. Stores the submission, then emails are best effort."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.schemas.contact import ContactForm, ContactReceipt
from app.services import email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public", tags=["public"])


@router.post("/contact", response_model=ContactReceipt, status_code=201)
async def submit_contact(
    body: ContactForm,
    db: AsyncSession = Depends(get_db),
):
    submission = await crud.create_contact_submission(
        db,
        name=body.name,
        email=str(body.email),
        phone=body.phone,
        inquiry_type=body.inquiry_type.value,
        message=body.message,
    )

    confirmed = await asyncio.to_thread(
        email.send_contact_confirmation, body.name, str(body.email), body.inquiry_type.value
    )
    notified = await asyncio.to_thread(
        email.send_contact_notification,
        body.name, str(body.email), body.phone, body.inquiry_type.value, body.message,
    )
    if not (confirmed and notified):
        logger.warning(
            "Contact submission stored but email delivery incomplete",
            extra={"submission_id": submission.id, "confirmation": confirmed, "notification": notified},
        )
    return submission
