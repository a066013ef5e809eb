from datetime import time
from typing import List, Literal, Optional

from pydantic import BaseModel

from app.services.conflict_service import BlockSectionScan, ConflictRecord
from app.services.day_patterns import pattern_label


class ConflictDetail(BaseModel):
    conflict_type: Literal[
        "room_time_conflict",
        "block_sectioning_conflict",
        "duplicate_subject_section",
        "faculty_conflict",
    ]
    description: str
    schedule_id: str
    subject_code: str
    section: Optional[str] = None
    day_pattern: Optional[str] = None
    days: str = ""
    start_time: time
    end_time: time
    room: str

    @classmethod
    def from_record(cls, record: ConflictRecord) -> "ConflictDetail":
        existing = record.schedule
        return cls(
            conflict_type=record.type.value,
            description=record.message,
            schedule_id=existing.id,
            subject_code=existing.subject_code,
            section=existing.section,
            day_pattern=existing.day_pattern,
            days=pattern_label(existing.day_pattern),
            start_time=existing.start_time,
            end_time=existing.end_time,
            room=existing.room_label,
        )


class ConflictCheckResult(BaseModel):
    has_conflicts: bool
    blocking: bool
    conflicts: List[ConflictDetail]
    warnings: List[str]
    summary: str


class BlockSectionFindingOut(BaseModel):
    schedule_id: str
    subject_code: str
    conflicting_schedule_id: str
    conflicting_subject_code: str
    day_pattern: Optional[str] = None
    start_time: time
    end_time: time
    room: str
    conflicting_room: str
    message: str


class BlockSectionGroupOut(BaseModel):
    label: str
    year_level: int
    section: str
    findings: List[BlockSectionFindingOut]


class BlockSectionScanOut(BaseModel):
    total_scanned: int
    conflict_count: int
    affected_schedule_ids: List[str]
    groups: List[BlockSectionGroupOut]

    @classmethod
    def from_scan(cls, scan: BlockSectionScan) -> "BlockSectionScanOut":
        groups = [
            BlockSectionGroupOut(
                label=key.label,
                year_level=key.year_level,
                section=key.section,
                findings=[
                    BlockSectionFindingOut(
                        schedule_id=finding.schedule.id,
                        subject_code=finding.schedule.subject_code,
                        conflicting_schedule_id=finding.opposing.id,
                        conflicting_subject_code=finding.opposing.subject_code,
                        day_pattern=finding.schedule.day_pattern,
                        start_time=finding.schedule.start_time,
                        end_time=finding.schedule.end_time,
                        room=finding.schedule.room_label,
                        conflicting_room=finding.opposing.room_label,
                        message=finding.message,
                    )
                    for finding in findings
                ],
            )
            for key, findings in scan.groups.items()
        ]
        return cls(
            total_scanned=scan.total_scanned,
            conflict_count=scan.conflict_count,
            affected_schedule_ids=scan.affected_schedule_ids,
            groups=groups,
        )


class ConflictRefreshStats(BaseModel):
    total_scanned: int
    conflicts_found: int
    schedules_updated: int


class ConflictedScheduleOut(BaseModel):
    schedule_id: str
    subject_code: str
    section: Optional[str] = None
    day_pattern: Optional[str] = None
    days: str = ""
    start_time: time
    end_time: time
    room: str
    faculty: str
    is_conflicted: bool
    conflict_count: int
    conflicts: List[ConflictDetail]

    @classmethod
    def from_details(cls, item: dict) -> "ConflictedScheduleOut":
        schedule = item["schedule"]
        return cls(
            schedule_id=schedule.id,
            subject_code=schedule.subject_code,
            section=schedule.section,
            day_pattern=schedule.day_pattern,
            days=pattern_label(schedule.day_pattern),
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            room=schedule.room_label,
            faculty=schedule.faculty_name,
            is_conflicted=schedule.is_conflicted,
            conflict_count=item["conflict_count"],
            conflicts=[ConflictDetail.from_record(record) for record in item["conflicts"]],
        )
