import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.subject import Subject


class CurriculumTerm(Base):
    __tablename__ = "curriculum_terms"
    __table_args__ = (
        UniqueConstraint("curriculum_name", "year_level", "semester", name="uq_curriculum_terms_curriculum_year_semester"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    curriculum_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    year_level: Mapped[int] = mapped_column(Integer, nullable=False)
    semester: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class CurriculumSubject(Base):
    __tablename__ = "curriculum_subjects"
    __table_args__ = (
        UniqueConstraint("curriculum_term_id", "subject_id", name="uq_curriculum_subjects_term_subject"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    curriculum_term_id: Mapped[str] = mapped_column(ForeignKey("curriculum_terms.id"), nullable=False)
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    curriculum_term: Mapped[CurriculumTerm] = relationship()
    subject: Mapped[Subject] = relationship()
