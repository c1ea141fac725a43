"""Linked Station 1 group for the Technique days: Phase 1 (A/B/C) plus an optional Phase 2 of three."""

from datetime import datetime, timezone
from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from workout_rotation.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TriSet(Base):
    __tablename__ = "tri_sets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    day_type: Mapped[str] = mapped_column(String(32), nullable=False, default="Technique")
    focus: Mapped[str] = mapped_column(String(16), nullable=False, index=True)  # Mixed (Monday) | Lower (Saturday)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    concept: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    exercise_ids: Mapped[list] = mapped_column(JSON, nullable=False)  # Phase 1, grid order A, B, C
    phase2_exercise_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # [] or 3 ids
    last_used: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user: Mapped["User"] = relationship("User", back_populates="tri_sets")

    @property
    def is_dual_phase(self) -> bool:
        return len(self.phase2_exercise_ids or []) == 3
