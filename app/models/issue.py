"""Issue model: a problem reported against one asset."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, Float, ForeignKey, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin, UpdatedAtMixin


class Issue(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "issues"

    asset_id: Mapped[str] = mapped_column(String(26), ForeignKey("assets.id"), index=True)
    # Copied from the asset when the issue is reported; null for off-site assets.
    course_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("courses.id"), nullable=True, index=True
    )
    issue_type: Mapped[str] = mapped_column(String(20))  # damage | breakdown | battery | tyres | brakes | other
    severity: Mapped[str] = mapped_column(String(10))  # low | medium | high
    description: Mapped[str] = mapped_column(Text)
    photos: Mapped[list] = mapped_column(JSON, default=list)
    reported_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    reported_by_name: Mapped[str] = mapped_column(String(255), default="Unknown")
    status: Mapped[str] = mapped_column(String(20), default="reported", index=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    cost_estimate: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    cost_final: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)

    asset = relationship("Asset", lazy="joined")
    course = relationship("Course", lazy="joined")

    @property
    def asset_name(self) -> str | None:
        return self.asset.name if self.asset else None

    @property
    def asset_tag(self) -> str | None:
        return self.asset.asset_tag if self.asset else None

    @property
    def asset_status(self) -> str | None:
        return self.asset.status if self.asset else None

    @property
    def course_name(self) -> str | None:
        return self.course.name if self.course else None
