"""Generated plan for one training day of one week.

Slots are JSON lists of {"exercise_id", "name"} on the row itself, so any multi-slot
change (tri-set, full day) is a single UPDATE.
"""

from datetime import date, datetime, timezone
from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from workout_rotation.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _empty_station1() -> dict:
    return {"phase1": [], "phase2": []}


class Workout(Base):
    __tablename__ = "workouts"
    __table_args__ = (
        UniqueConstraint("user_id", "day_of_week", "week_start_date", name="uq_workouts_user_day_week"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week: Mapped[str] = mapped_column(String(16), nullable=False)
    day_type: Mapped[str] = mapped_column(String(32), nullable=False)
    filter: Mapped[str] = mapped_column(String(32), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)  # Sunday
    station1: Mapped[dict] = mapped_column(JSON, nullable=False, default=_empty_station1)
    station2: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    station3: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tri_set_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tri_sets.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user: Mapped["User"] = relationship("User", back_populates="workouts")
