"""Auth models: Profile (users), UserRole, UserSession.

The role lives in its own relation so that it is never taken from the
profile row a client can see or edit.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin
from app.models.enums import Role


class Profile(Base, ULIDMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    course_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("courses.id"), nullable=True, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    course = relationship("Course", lazy="joined")
    roles = relationship(
        "UserRole", lazy="selectin", cascade="all, delete-orphan", back_populates="user"
    )

    @property
    def role(self) -> str:
        """Effective role: admin if any admin row exists, otherwise course_user."""
        if any(r.role == Role.ADMIN.value for r in self.roles):
            return Role.ADMIN.value
        return Role.COURSE_USER.value

    @property
    def course_name(self) -> str | None:
        return self.course.name if self.course else None


class UserRole(Base, ULIDMixin):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    role: Mapped[str] = mapped_column(String(20), default=Role.COURSE_USER.value)  # admin | course_user

    user = relationship("Profile", back_populates="roles")


class UserSession(Base, ULIDMixin):
    __tablename__ = "user_sessions"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    ip_address: Mapped[str] = mapped_column(String(45), default="")
