"""Off-site location model: workshops and storage yards that hold assets."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin


class OffsiteLocation(Base, ULIDMixin):
    __tablename__ = "offsite_locations"

    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
