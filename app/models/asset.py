"""Asset model: a trike or scooter in the fleet."""

from __future__ import annotations

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin, UpdatedAtMixin


class Asset(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "assets"

    name: Mapped[str] = mapped_column(String(255), index=True)
    asset_tag: Mapped[str | None] = mapped_column(String(100), nullable=True)
    asset_type: Mapped[str] = mapped_column(String(20), default="trike")  # trike | scooter
    status: Mapped[str] = mapped_column(String(20), default="available")  # available | in_repair | out_of_service
    # Exactly one of course_id / location is set.
    course_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("courses.id"), nullable=True, index=True
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    course = relationship("Course", lazy="joined")

    @property
    def course_name(self) -> str | None:
        return self.course.name if self.course else None
