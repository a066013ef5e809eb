import uuid
from datetime import datetime, time
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.academic_year import AcademicYear
from app.models.curriculum import CurriculumSubject
from app.models.faculty import Faculty
from app.models.room import Room
from app.models.subject import Subject


class ScheduleStatus(str, Enum):
    active = "active"
    inactive = "inactive"


def normalize_section(value: str | None) -> str:
    """Comparison key for section labels: trimmed and case-folded."""
    if value is None:
        return ""
    return value.strip().casefold()


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        # Uniqueness covers active rows only; inactive rows may repeat the tuple.
        Index(
            "uq_schedules_subject_section_term",
            "subject_id",
            "section_key",
            "semester",
            "academic_year_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_schedules_term_status", "academic_year_id", "semester", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    academic_year_id: Mapped[str] = mapped_column(ForeignKey("academic_years.id"), index=True, nullable=False)
    semester: Mapped[str] = mapped_column(String(10), nullable=False)
    subject_id: Mapped[str | None] = mapped_column(ForeignKey("subjects.id"), nullable=True)
    room_id: Mapped[str | None] = mapped_column(ForeignKey("rooms.id"), index=True, nullable=True)
    faculty_id: Mapped[str | None] = mapped_column(ForeignKey("faculty.id"), nullable=True)
    curriculum_subject_id: Mapped[str | None] = mapped_column(ForeignKey("curriculum_subjects.id"), nullable=True)
    day_pattern: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    section: Mapped[str | None] = mapped_column(String(255), nullable=True)
    section_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    enrolled_students: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_conflicted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_overload: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[ScheduleStatus] = mapped_column(
        SAEnum(ScheduleStatus, name="schedule_status"),
        nullable=False,
        default=ScheduleStatus.active,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    academic_year: Mapped[AcademicYear] = relationship()
    subject: Mapped[Subject | None] = relationship()
    room: Mapped[Room | None] = relationship()
    faculty: Mapped[Faculty | None] = relationship()
    curriculum_subject: Mapped[CurriculumSubject | None] = relationship()

    @validates("section")
    def _sync_section_key(self, key: str, value: str | None) -> str | None:
        self.section_key = normalize_section(value) or None
        return value

    @property
    def subject_code(self) -> str:
        return self.subject.code if self.subject is not None else "Unknown"

    @property
    def room_label(self) -> str:
        return self.room.display_name if self.room is not None else "No Room Assigned"

    @property
    def faculty_name(self) -> str:
        return self.faculty.name if self.faculty is not None else "Unassigned"
