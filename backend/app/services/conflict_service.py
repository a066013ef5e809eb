from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from app.core.config import Settings, get_settings
from app.core.exceptions import ConfigurationError
from app.models.schedule import Schedule, normalize_section
from app.services.day_patterns import days_overlap, parse_pattern
from app.services.schedule_repository import ScheduleQuery
from app.services.time_intervals import TimeInterval, format_time, times_overlap

logger = logging.getLogger(__name__)


class ConflictType(str, Enum):
    room_time_conflict = "room_time_conflict"
    block_sectioning_conflict = "block_sectioning_conflict"
    duplicate_subject_section = "duplicate_subject_section"
    faculty_conflict = "faculty_conflict"

    @classmethod
    def from_label(cls, label: str) -> "ConflictType":
        # Older controllers reported block sectioning as "section_conflict".
        if label == "section_conflict":
            return cls.block_sectioning_conflict
        return cls(label)


@dataclass(frozen=True)
class ConflictRecord:
    type: ConflictType
    schedule: Schedule
    message: str


class BlockSectionKey(NamedTuple):
    year_level: int
    section: str

    @property
    def label(self) -> str:
        return f"Year {self.year_level} - Section {self.section}"


@dataclass(frozen=True)
class BlockSectionFinding:
    schedule: Schedule
    opposing: Schedule
    message: str


@dataclass
class BlockSectionScan:
    total_scanned: int
    groups: dict[BlockSectionKey, list[BlockSectionFinding]] = field(default_factory=dict)

    def add(self, key: BlockSectionKey, finding: BlockSectionFinding) -> None:
        self.groups.setdefault(key, []).append(finding)

    @property
    def conflict_count(self) -> int:
        return sum(len(findings) for findings in self.groups.values())

    @property
    def affected_schedule_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for findings in self.groups.values():
            for finding in findings:
                seen.setdefault(finding.schedule.id, None)
        return list(seen)

    @property
    def has_conflicts(self) -> bool:
        return self.conflict_count > 0


def _describe_minutes(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"


class ConflictDetector:
    """Decides whether a schedule collides with other active schedules.

    Every call re-reads its candidate set through ``repository``; the
    detector keeps no state between calls.
    """

    def __init__(self, repository: ScheduleQuery, settings: Settings | None = None):
        self.repository = repository
        self.settings = settings or get_settings()
        self.day_window = TimeInterval.from_times(self.settings.day_window_start, self.settings.day_window_end)
        if self.day_window.start >= self.day_window.end:
            raise ConfigurationError(
                f"Day window start {self.settings.day_window_start} must be before end {self.settings.day_window_end}"
            )

    def detect_conflicts(self, schedule: Schedule, exclude_self: bool = False) -> list[ConflictRecord]:
        conflicts: list[ConflictRecord] = []
        existing_schedules = self._term_schedules(schedule, exclude_self)
        if not existing_schedules:
            return conflicts

        section_key = normalize_section(schedule.section)
        year_level = self.repository.year_level_for(schedule) if section_key else None
        check_faculty = self.settings.detect_faculty_conflicts and schedule.faculty_id is not None

        for existing in existing_schedules:
            if not self._meets_at_same_time(schedule, existing):
                continue

            if schedule.room_id is not None and existing.room_id == schedule.room_id:
                conflicts.append(ConflictRecord(
                    type=ConflictType.room_time_conflict,
                    schedule=existing,
                    message=(
                        f"Room {existing.room_label} is already booked for {existing.subject_code} "
                        f"({existing.day_pattern}) from {format_time(existing.start_time)} "
                        f"to {format_time(existing.end_time)} (Section: {existing.section or 'N/A'})"
                    ),
                ))

            if year_level is not None and normalize_section(existing.section) == section_key:
                existing_year_level = self.repository.year_level_for(existing)
                logger.debug(
                    "Block section check %s (Year %s, Section %s) against %s (Year %s, Section %s)",
                    schedule.subject_code,
                    year_level,
                    schedule.section,
                    existing.subject_code,
                    existing_year_level,
                    existing.section,
                )
                if existing_year_level == year_level:
                    conflicts.append(ConflictRecord(
                        type=ConflictType.block_sectioning_conflict,
                        schedule=existing,
                        message=(
                            f"BLOCK SECTIONING CONFLICT: Year {year_level} Section {schedule.section.strip()} "
                            f"students cannot attend both {schedule.subject_code} and {existing.subject_code} "
                            f"at the same time ({existing.day_pattern}, {format_time(existing.start_time)} - "
                            f"{format_time(existing.end_time)}). Faculty: {existing.faculty_name}, "
                            f"Room: {existing.room_label}"
                        ),
                    ))

            if check_faculty and existing.faculty_id == schedule.faculty_id:
                conflicts.append(ConflictRecord(
                    type=ConflictType.faculty_conflict,
                    schedule=existing,
                    message=(
                        f"Faculty {existing.faculty_name} is already teaching {existing.subject_code} "
                        f"(Section {existing.section or 'N/A'}) on {existing.day_pattern} from "
                        f"{format_time(existing.start_time)} to {format_time(existing.end_time)} "
                        f"in Room {existing.room_label}"
                    ),
                ))

        return conflicts

    def check_duplicate_subject_section(self, schedule: Schedule, exclude_self: bool = False) -> list[ConflictRecord]:
        section_key = normalize_section(schedule.section)
        if schedule.subject_id is None or not section_key:
            return []

        conflicts: list[ConflictRecord] = []
        for existing in self._term_schedules(schedule, exclude_self):
            if existing.subject_id != schedule.subject_id:
                continue
            if normalize_section(existing.section) != section_key:
                continue
            conflicts.append(ConflictRecord(
                type=ConflictType.duplicate_subject_section,
                schedule=existing,
                message=(
                    f"Subject {existing.subject_code} Section {existing.section or 'N/A'} already exists on "
                    f"{existing.day_pattern} from {format_time(existing.start_time)} to "
                    f"{format_time(existing.end_time)} in {existing.room_label}"
                ),
            ))
        return conflicts

    def validate_time_range(self, schedule: Schedule) -> list[str]:
        if schedule.start_time is None or schedule.end_time is None:
            return ["Start time and end time are required."]
        try:
            interval = TimeInterval.from_times(schedule.start_time, schedule.end_time)
        except ValueError:
            return ["Start time and end time must be valid times of day (HH:MM)."]

        errors: list[str] = []
        if interval.start >= interval.end:
            errors.append("End time must be after start time.")
        if interval.start < self.day_window.start:
            errors.append(f"Start time must not be earlier than {format_time(self.settings.day_window_start)}.")
        if interval.end > self.day_window.end:
            errors.append(f"End time must not be later than {format_time(self.settings.day_window_end)}.")
        if interval.start < interval.end:
            if interval.duration > self.settings.max_duration_minutes:
                errors.append(
                    f"Schedule duration cannot exceed {_describe_minutes(self.settings.max_duration_minutes)}."
                )
            if interval.duration < self.settings.min_duration_minutes:
                errors.append(
                    f"Schedule duration must be at least {_describe_minutes(self.settings.min_duration_minutes)}."
                )
        return errors

    def validate_room_capacity(self, schedule: Schedule) -> list[str]:
        enrolled = schedule.enrolled_students or 0
        if enrolled <= 0:
            return []
        capacity = self.repository.room_capacity(schedule)
        if capacity and enrolled > capacity:
            return [f"Enrolled students ({enrolled}) exceeds room capacity ({capacity})."]
        return []

    def conflict_summary(self, conflicts: list[ConflictRecord]) -> str:
        if not conflicts:
            return "No conflicts detected."
        lines = [f"{len(conflicts)} conflict(s) detected:"]
        lines.extend(f"- {conflict.message}" for conflict in conflicts)
        return "\n".join(lines)

    def update_conflict_status(self, schedule: Schedule) -> bool:
        schedule.is_conflicted = bool(self.detect_conflicts(schedule, exclude_self=True))
        return schedule.is_conflicted

    def scan_block_section_conflicts(
        self,
        academic_year_id: str | None = None,
        semester: str | None = None,
    ) -> BlockSectionScan:
        schedules = self.repository.all_active_schedules(academic_year_id, semester)
        scan = BlockSectionScan(total_scanned=len(schedules))

        for schedule in schedules:
            block_conflicts = [
                conflict
                for conflict in self.detect_conflicts(schedule, exclude_self=True)
                if conflict.type is ConflictType.block_sectioning_conflict
            ]
            if not block_conflicts:
                continue
            key = BlockSectionKey(
                year_level=self.repository.year_level_for(schedule),
                section=(schedule.section or "").strip().upper(),
            )
            for conflict in block_conflicts:
                scan.add(key, BlockSectionFinding(schedule=schedule, opposing=conflict.schedule, message=conflict.message))

        logger.info(
            "Block section scan checked %d schedules: %d conflict(s) across %d schedule(s)",
            scan.total_scanned,
            scan.conflict_count,
            len(scan.affected_schedule_ids),
        )
        return scan

    def scan_and_update_all_conflicts(
        self,
        academic_year_id: str | None = None,
        semester: str | None = None,
    ) -> dict[str, int]:
        schedules = self.repository.all_active_schedules(academic_year_id, semester)
        stats = {"total_scanned": len(schedules), "conflicts_found": 0, "schedules_updated": 0}

        for schedule in schedules:
            previous = schedule.is_conflicted
            if self.update_conflict_status(schedule):
                stats["conflicts_found"] += 1
            if previous != schedule.is_conflicted:
                stats["schedules_updated"] += 1

        logger.info(
            "Conflict flags refreshed: %d scanned, %d conflicted, %d changed",
            stats["total_scanned"],
            stats["conflicts_found"],
            stats["schedules_updated"],
        )
        return stats

    def conflicted_schedules_with_details(
        self,
        academic_year_id: str | None = None,
        semester: str | None = None,
        conflict_type: ConflictType | None = None,
    ) -> list[dict]:
        results = []
        for schedule in self.repository.all_active_schedules(academic_year_id, semester):
            conflicts = self.detect_conflicts(schedule, exclude_self=True)
            if conflict_type is not None:
                conflicts = [conflict for conflict in conflicts if conflict.type is conflict_type]
            if conflicts:
                results.append({"schedule": schedule, "conflicts": conflicts, "conflict_count": len(conflicts)})
        return results

    def _term_schedules(self, schedule: Schedule, exclude_self: bool) -> list[Schedule]:
        if schedule.academic_year_id is None or schedule.semester is None:
            return []
        existing = self.repository.active_schedules(schedule.academic_year_id, schedule.semester)
        if exclude_self and schedule.id is not None:
            existing = [item for item in existing if item.id != schedule.id]
        return existing

    def _meets_at_same_time(self, schedule: Schedule, existing: Schedule) -> bool:
        if existing.day_pattern and not parse_pattern(existing.day_pattern):
            logger.warning(
                "Schedule %s has unrecognised day pattern %r; treating it as non-overlapping",
                existing.id,
                existing.day_pattern,
            )
            return False
        if not days_overlap(schedule.day_pattern, existing.day_pattern):
            return False
        if None in (schedule.start_time, schedule.end_time, existing.start_time, existing.end_time):
            return False
        return times_overlap(schedule.start_time, schedule.end_time, existing.start_time, existing.end_time)
