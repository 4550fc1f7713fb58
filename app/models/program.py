"""Weekly program models: the active window, its default schedule and per-user overrides."""
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship

from app.db.database import Base
from app.models.enums import ProgramStatus


class ProgramMetadata(Base):
    """A 7-day program window.

    At most one row carries ``status = ACTIVE``; the partial unique index makes
    a concurrent second activation fail instead of producing two active windows.
    """
    __tablename__ = "program_metadata"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(Integer, nullable=False, default=int(ProgramStatus.ACTIVE))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    schedule_entries = relationship(
        "ProgramSchedule",
        back_populates="program",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index(
            "uq_program_metadata_single_active",
            "status",
            unique=True,
            postgresql_where=text("status = 1"),
            sqlite_where=text("status = 1"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status == ProgramStatus.ACTIVE

    def __repr__(self):
        return (
            f"<ProgramMetadata(id={self.id}, start_date={self.start_date}, "
            f"end_date={self.end_date}, status={self.status})>"
        )


class ProgramSchedule(Base):
    """Default assignment of a catalog workout to a weekday of a program."""
    __tablename__ = "program_schedule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    program_id = Column(
        Integer,
        ForeignKey("program_metadata.id", ondelete="CASCADE"),
        nullable=False,
    )
    day = Column(String(10), nullable=False)
    workout_id = Column(
        Integer,
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
    )

    program = relationship("ProgramMetadata", back_populates="schedule_entries")
    workout = relationship("Workout")

    __table_args__ = (
        Index("ix_program_schedule_program_day", "program_id", "day"),
    )


class UserProgramSchedule(Base):
    """Per-user prescription for one (program, day, workout).

    The personalized layer (sets, reps, weight_value, weight_unit) is written
    once by personalization. Manual edits live in the ``*_modified`` columns
    and only count while ``is_modified`` is set.
    """
    __tablename__ = "user_program_schedule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    program_id = Column(
        Integer,
        ForeignKey("program_metadata.id", ondelete="CASCADE"),
        nullable=False,
    )
    day = Column(String(10), nullable=False)
    workout_id = Column(
        Integer,
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Personalized layer
    sets = Column(Integer, nullable=True)
    reps = Column(Integer, nullable=True)
    weight_value = Column(Float, nullable=True)
    weight_unit = Column(String(2), nullable=True)

    # Manual layer
    sets_modified = Column(Integer, nullable=True)
    reps_modified = Column(Integer, nullable=True)
    weight_modified = Column(Float, nullable=True)
    weight_unit_modified = Column(String(2), nullable=True)
    is_modified = Column(Boolean, default=False, nullable=False)
    modification_type = Column(String(20), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    workout = relationship("Workout")

    __table_args__ = (
        UniqueConstraint(
            "user_id", "program_id", "day", "workout_id",
            name="uq_user_program_day_workout",
        ),
        Index("ix_user_program_schedule_user_program", "user_id", "program_id"),
    )

    def __repr__(self):
        return (
            f"<UserProgramSchedule(user_id={self.user_id}, program_id={self.program_id}, "
            f"day={self.day!r}, workout_id={self.workout_id}, is_modified={self.is_modified})>"
        )
