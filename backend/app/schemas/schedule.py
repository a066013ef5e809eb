from datetime import time
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.services.day_patterns import is_canonical

Semester = Literal["1st", "2nd", "Summer"]


class ScheduleProbe(BaseModel):
    """A proposed schedule to check before it is saved.

    ``schedule_id`` identifies the stored row when an existing schedule is
    being edited; that row is then left out of its own conflict checks.
    """

    schedule_id: str | None = None
    academic_year_id: str
    semester: Semester
    subject_id: str | None = None
    room_id: str | None = None
    faculty_id: str | None = None
    curriculum_subject_id: str | None = None
    section: str | None = Field(default=None, max_length=255)
    day_pattern: str
    start_time: time
    end_time: time
    enrolled_students: int = Field(default=0, ge=0)

    @field_validator("day_pattern")
    @classmethod
    def validate_day_pattern(cls, value: str) -> str:
        pattern = value.strip().upper()
        if not is_canonical(pattern):
            raise ValueError("Invalid day pattern")
        return pattern
