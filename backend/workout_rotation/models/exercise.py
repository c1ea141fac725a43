"""Exercise catalog entry. One user owns it; workouts keep a name snapshot, so deleting does not cascade."""

from datetime import datetime, timezone
from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from workout_rotation.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Exercise(Base):
    __tablename__ = "exercises"
    __table_args__ = (
        Index("ix_exercises_user_station_day_type", "user_id", "station", "day_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    station: Mapped[int] = mapped_column(Integer, nullable=False)  # 1 conditioning, 2 bag work, 3 partner drill
    focus: Mapped[str | None] = mapped_column(String(32), nullable=True)  # station 1 only
    day_type: Mapped[str] = mapped_column(String(32), nullable=False)
    is_static: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    static_condition: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Written only through UsageLedger
    last_used: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user: Mapped["User"] = relationship("User", back_populates="exercises")
