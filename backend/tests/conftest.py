import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

from datetime import time  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.core.config import Settings  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.models import (  # noqa: E402
    AcademicYear,
    CurriculumSubject,
    CurriculumTerm,
    Faculty,
    Room,
    Schedule,
    ScheduleStatus,
    Subject,
)
from app.services.conflict_service import ConflictDetector  # noqa: E402
from app.services.schedule_repository import SqlAlchemyScheduleRepository  # noqa: E402


class ScheduleBuilder:
    """Creates rooms, subjects, curriculum links and schedules for a test."""

    def __init__(self, db):
        self.db = db
        self._ids = count(1)
        self._subjects: dict[str, Subject] = {}
        self._terms: dict[tuple[int, str], CurriculumTerm] = {}
        self.academic_year = self._save(AcademicYear(label="2025-2026", is_current=True))

    def _save(self, instance):
        self.db.add(instance)
        self.db.commit()
        return instance

    def academic_year_for(self, label: str) -> AcademicYear:
        return self._save(AcademicYear(label=label))

    def room(self, code: str | None = None, capacity: int = 40, name: str | None = None) -> Room:
        code = code or f"TEST-ROOM-{next(self._ids)}"
        return self._save(Room(code=code, name=name or code, capacity=capacity))

    def subject(self, code: str) -> Subject:
        if code not in self._subjects:
            self._subjects[code] = self._save(Subject(code=code, title=code))
        return self._subjects[code]

    def faculty(self, name: str) -> Faculty:
        return self._save(Faculty(name=name, email=f"faculty{next(self._ids)}@example.com"))

    def curriculum_subject(self, subject: Subject, year_level: int, semester: str) -> CurriculumSubject:
        key = (year_level, semester)
        if key not in self._terms:
            self._terms[key] = self._save(CurriculumTerm(curriculum_name="BSIT", year_level=year_level, semester=semester))
        return self._save(CurriculumSubject(curriculum_term_id=self._terms[key].id, subject_id=subject.id))

    def schedule(
        self,
        subject_code: str,
        section: str | None,
        day_pattern: str,
        start: str,
        end: str,
        *,
        room: Room | None = None,
        year_level: int | None = None,
        semester: str = "2nd",
        academic_year: AcademicYear | None = None,
        faculty: Faculty | None = None,
        enrolled: int = 0,
        status: ScheduleStatus = ScheduleStatus.active,
        persist: bool = True,
    ) -> Schedule:
        subject = self.subject(subject_code)
        room = room or self.room()
        academic_year = academic_year or self.academic_year
        link = self.curriculum_subject(subject, year_level, semester) if year_level is not None else None

        schedule = Schedule(
            semester=semester,
            section=section,
            day_pattern=day_pattern,
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
            enrolled_students=enrolled,
            status=status,
        )
        schedule.academic_year = academic_year
        schedule.subject = subject
        schedule.room = room
        schedule.faculty = faculty
        schedule.curriculum_subject = link
        schedule.academic_year_id = academic_year.id
        schedule.subject_id = subject.id
        schedule.room_id = room.id
        schedule.faculty_id = faculty.id if faculty is not None else None
        schedule.curriculum_subject_id = link.id if link is not None else None
        if persist:
            self._save(schedule)
        return schedule


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def builder(db_session):
    return ScheduleBuilder(db_session)


@pytest.fixture()
def settings():
    return Settings(_env_file=None)


@pytest.fixture()
def detector(db_session, settings):
    return ConflictDetector(SqlAlchemyScheduleRepository(db_session), settings)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
