from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin


class ContactSubmission(Base, ULIDMixin):
    __tablename__ = "contact_submissions"

    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    inquiry_type: Mapped[str] = mapped_column(String(20))
    message: Mapped[str] = mapped_column(Text)
