from __future__ import annotations

import enum
import uuid
import datetime as dt
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

DEFAULT_HOUR_THRESHOLD = 100
# Sick leave and vacation always count as a full working day.
LEAVE_DAY_HOURS = 8


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class UserRole(enum.StrEnum):
    user = "user"
    admin = "admin"


class TimesheetType(enum.StrEnum):
    worked = "worked"
    sick = "sick"
    vacation = "vacation"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(200))
    # Stored normalized; see timesheets.auth.normalize_access_code.
    access_code: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.user)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    timesheets: Mapped[list[Timesheet]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


class WorkPhase(Base):
    __tablename__ = "work_phases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), unique=True)
    description: Mapped[str] = mapped_column(String(500))
    # Grouping label such as "BOR01", "BOR02" or "EXTRA".
    category: Mapped[str] = mapped_column(String(100), index=True)
    hour_threshold: Mapped[int] = mapped_column(Integer, default=DEFAULT_HOUR_THRESHOLD)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_timesheets_user_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    type: Mapped[TimesheetType] = mapped_column(Enum(TimesheetType))
    work_phase_id: Mapped[int | None] = mapped_column(
        ForeignKey("work_phases.id", ondelete="SET NULL"), nullable=True, index=True
    )
    hours: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    user: Mapped[User] = relationship(back_populates="timesheets")
    work_phase: Mapped[WorkPhase | None] = relationship()
