from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.curriculum import CurriculumSubject, CurriculumTerm
from app.models.room import Room
from app.models.schedule import Schedule, ScheduleStatus


class ScheduleQuery(Protocol):
    """Storage operations the conflict detector reads from."""

    def active_schedules(
        self,
        academic_year_id: str,
        semester: str,
        room_id: str | None = None,
    ) -> list[Schedule]: ...

    def all_active_schedules(
        self,
        academic_year_id: str | None = None,
        semester: str | None = None,
    ) -> list[Schedule]: ...

    def year_level_for(self, schedule: Schedule) -> int | None: ...

    def room_capacity(self, schedule: Schedule) -> int | None: ...


class SqlAlchemyScheduleRepository:
    def __init__(self, db: Session):
        self.db = db

    def active_schedules(
        self,
        academic_year_id: str,
        semester: str,
        room_id: str | None = None,
    ) -> list[Schedule]:
        query = select(Schedule).where(
            Schedule.academic_year_id == academic_year_id,
            Schedule.semester == semester,
            Schedule.status == ScheduleStatus.active,
        )
        if room_id is not None:
            query = query.where(Schedule.room_id == room_id)
        return list(self.db.execute(query.order_by(Schedule.start_time)).scalars())

    def all_active_schedules(
        self,
        academic_year_id: str | None = None,
        semester: str | None = None,
    ) -> list[Schedule]:
        query = select(Schedule).where(Schedule.status == ScheduleStatus.active)
        if academic_year_id is not None:
            query = query.where(Schedule.academic_year_id == academic_year_id)
        if semester is not None:
            query = query.where(Schedule.semester == semester)
        return list(self.db.execute(query.order_by(Schedule.semester, Schedule.start_time)).scalars())

    def year_level_for(self, schedule: Schedule) -> int | None:
        if schedule.curriculum_subject_id is None:
            return None
        query = (
            select(CurriculumTerm.year_level)
            .join(CurriculumSubject, CurriculumSubject.curriculum_term_id == CurriculumTerm.id)
            .where(CurriculumSubject.id == schedule.curriculum_subject_id)
            .limit(1)
        )
        return self.db.execute(query).scalar_one_or_none()

    def room_capacity(self, schedule: Schedule) -> int | None:
        if schedule.room_id is None:
            return None
        room = self.db.get(Room, schedule.room_id)
        return room.capacity if room is not None else None
