from __future__ import annotations
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, StringConstraints, field_validator

from app.models.enums import InquiryType


class ContactForm(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    email: EmailStr
    phone: Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)] | None = None
    inquiry_type: InquiryType
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=2000)]

    @field_validator("email")
    @classmethod
    def _email_length(cls, v: str) -> str:
        if len(v) > 255:
            raise ValueError("Email must be less than 255 characters")
        return v

    @field_validator("phone")
    @classmethod
    def _blank_phone(cls, v: str | None) -> str | None:
        return v or None


class ContactReceipt(BaseModel):
    id: str
    created_at: datetime
    status: str = "received"

    model_config = {"from_attributes": True}
