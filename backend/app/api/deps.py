from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.session import SessionLocal
from app.services.conflict_service import ConflictDetector
from app.services.schedule_repository import SqlAlchemyScheduleRepository


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_conflict_detector(db: Session = Depends(get_db)) -> ConflictDetector:
    return ConflictDetector(SqlAlchemyScheduleRepository(db), get_settings())
