"""Scan all active schedules for block sectioning conflicts.

Run:
  PYTHONPATH=backend python -m app.cli.scan_block_sections [--academic-year-id ID] [--semester 1st]

Exits with status 1 while any block sectioning conflict remains.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from typing import get_args

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.schemas.schedule import Semester
from app.services.conflict_service import BlockSectionScan, ConflictDetector
from app.services.schedule_repository import SqlAlchemyScheduleRepository
from app.services.time_intervals import format_time

EXIT_OK = 0
EXIT_CONFLICTS = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scan-block-section-conflicts",
        description="Scan all active schedules for block sectioning conflicts",
    )
    parser.add_argument("--academic-year-id", default=None, help="Only scan this academic year")
    parser.add_argument("--semester", choices=get_args(Semester), default=None, help="Only scan this semester")
    return parser


def render_report(scan: BlockSectionScan) -> list[str]:
    lines = ["Block Sectioning Conflict Scanner", ""]
    if scan.total_scanned == 0:
        lines.append("No active schedules found.")
        return lines

    lines.append(f"Scanned {scan.total_scanned} active schedule(s).")
    if not scan.has_conflicts:
        lines.append("No block sectioning conflicts found. All schedules are valid.")
        return lines

    lines.append(
        f"Found {scan.conflict_count} block sectioning conflict(s) "
        f"affecting {len(scan.affected_schedule_ids)} schedule(s)"
    )
    for key, findings in scan.groups.items():
        lines.append("")
        lines.append(key.label)
        lines.append("-" * len(key.label))
        for finding in findings:
            schedule, opposing = finding.schedule, finding.opposing
            lines.append(
                f"  {schedule.subject_code} (Section {key.section}) conflicts with "
                f"{opposing.subject_code} (Section {key.section})"
            )
            lines.append(
                f"     Time: {format_time(schedule.start_time)} - {format_time(schedule.end_time)} "
                f"on {schedule.day_pattern}"
            )
            lines.append(f"     Rooms: {schedule.room_label} vs {opposing.room_label}")

    lines.append("")
    lines.append("Action required: students in the same section cannot attend both classes at the same time.")
    lines.append("Reschedule one of the conflicting subjects to a different time slot.")
    return lines


def main(argv: Sequence[str] | None = None, session_factory: Callable[[], Session] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if session_factory is None:
        from app.db.session import SessionLocal

        session_factory = SessionLocal

    db = session_factory()
    try:
        detector = ConflictDetector(SqlAlchemyScheduleRepository(db), settings)
        scan = detector.scan_block_section_conflicts(args.academic_year_id, args.semester)
        # render_report lazy-loads subjects and rooms; the session must still be open.
        for line in render_report(scan):
            print(line)
    finally:
        db.close()

    return EXIT_CONFLICTS if scan.has_conflicts else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
