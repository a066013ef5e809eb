from typing import List, Literal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_conflict_detector, get_db
from app.core.exceptions import ResourceNotFoundError, ScheduleValidationError
from app.models.academic_year import AcademicYear
from app.models.curriculum import CurriculumSubject
from app.models.faculty import Faculty
from app.models.room import Room
from app.models.schedule import Schedule
from app.models.subject import Subject
from app.schemas.conflict import (
    BlockSectionScanOut,
    ConflictCheckResult,
    ConflictDetail,
    ConflictRefreshStats,
    ConflictedScheduleOut,
)
from app.schemas.schedule import ScheduleProbe, Semester
from app.services.conflict_service import ConflictDetector, ConflictType

router = APIRouter()

# "section_conflict" is the older name for block sectioning.
ConflictTypeFilter = Literal[
    "room_time_conflict",
    "block_sectioning_conflict",
    "section_conflict",
    "duplicate_subject_section",
    "faculty_conflict",
]


def _require(db: Session, model, resource_id: str | None, label: str):
    if resource_id is None:
        return None
    instance = db.get(model, resource_id)
    if instance is None:
        raise ResourceNotFoundError(label, resource_id)
    return instance


def _build_probe(db: Session, payload: ScheduleProbe) -> Schedule:
    # Transient: never added to the session, so checks cannot flush it.
    probe = Schedule(
        id=payload.schedule_id,
        semester=payload.semester,
        section=payload.section,
        day_pattern=payload.day_pattern,
        start_time=payload.start_time,
        end_time=payload.end_time,
        enrolled_students=payload.enrolled_students,
    )
    probe.academic_year = _require(db, AcademicYear, payload.academic_year_id, "AcademicYear")
    probe.subject = _require(db, Subject, payload.subject_id, "Subject")
    probe.room = _require(db, Room, payload.room_id, "Room")
    probe.faculty = _require(db, Faculty, payload.faculty_id, "Faculty")
    probe.curriculum_subject = _require(db, CurriculumSubject, payload.curriculum_subject_id, "CurriculumSubject")
    probe.academic_year_id = payload.academic_year_id
    probe.subject_id = payload.subject_id
    probe.room_id = payload.room_id
    probe.faculty_id = payload.faculty_id
    probe.curriculum_subject_id = payload.curriculum_subject_id
    return probe


def _check(detector: ConflictDetector, schedule: Schedule, exclude_self: bool) -> ConflictCheckResult:
    errors = detector.validate_time_range(schedule)
    if errors:
        raise ScheduleValidationError(errors)

    conflicts = detector.detect_conflicts(schedule, exclude_self=exclude_self)
    conflicts.extend(detector.check_duplicate_subject_section(schedule, exclude_self=exclude_self))
    return ConflictCheckResult(
        has_conflicts=bool(conflicts),
        blocking=bool(conflicts),
        conflicts=[ConflictDetail.from_record(record) for record in conflicts],
        warnings=detector.validate_room_capacity(schedule),
        summary=detector.conflict_summary(conflicts),
    )


@router.post("/check", response_model=ConflictCheckResult)
def check_schedule(
    payload: ScheduleProbe,
    db: Session = Depends(get_db),
    detector: ConflictDetector = Depends(get_conflict_detector),
) -> ConflictCheckResult:
    probe = _build_probe(db, payload)
    return _check(detector, probe, exclude_self=payload.schedule_id is not None)


@router.get("/schedules/{schedule_id}", response_model=ConflictCheckResult)
def check_stored_schedule(
    schedule_id: str,
    db: Session = Depends(get_db),
    detector: ConflictDetector = Depends(get_conflict_detector),
) -> ConflictCheckResult:
    schedule = _require(db, Schedule, schedule_id, "Schedule")
    return _check(detector, schedule, exclude_self=True)


@router.get("/scan", response_model=BlockSectionScanOut)
def scan_block_sections(
    academic_year_id: str | None = None,
    semester: Semester | None = None,
    detector: ConflictDetector = Depends(get_conflict_detector),
) -> BlockSectionScanOut:
    scan = detector.scan_block_section_conflicts(academic_year_id, semester)
    return BlockSectionScanOut.from_scan(scan)


@router.post("/refresh", response_model=ConflictRefreshStats)
def refresh_conflict_flags(
    academic_year_id: str | None = None,
    semester: Semester | None = None,
    db: Session = Depends(get_db),
    detector: ConflictDetector = Depends(get_conflict_detector),
) -> ConflictRefreshStats:
    stats = detector.scan_and_update_all_conflicts(academic_year_id, semester)
    db.commit()
    return ConflictRefreshStats(**stats)


@router.get("/details", response_model=List[ConflictedScheduleOut])
def list_conflicted_schedules(
    academic_year_id: str | None = None,
    semester: Semester | None = None,
    conflict_type: ConflictTypeFilter | None = None,
    detector: ConflictDetector = Depends(get_conflict_detector),
) -> List[ConflictedScheduleOut]:
    wanted = ConflictType.from_label(conflict_type) if conflict_type is not None else None
    items = detector.conflicted_schedules_with_details(academic_year_id, semester, conflict_type=wanted)
    return [ConflictedScheduleOut.from_details(item) for item in items]
