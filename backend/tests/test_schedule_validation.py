import pytest

from app.core.config import Settings
from app.core.exceptions import ConfigurationError
from app.services.conflict_service import ConflictDetector
from app.services.schedule_repository import SqlAlchemyScheduleRepository


def test_valid_time_range_has_no_errors(builder, detector):
    schedule = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", persist=False)

    assert detector.validate_time_range(schedule) == []


def test_end_before_start_is_rejected(builder, detector):
    schedule = builder.schedule("ITS 308", "A", "T-TH", "10:00", "08:30", persist=False)

    assert detector.validate_time_range(schedule) == ["End time must be after start time."]


def test_zero_length_is_rejected(builder, detector):
    schedule = builder.schedule("ITS 308", "A", "T-TH", "10:00", "10:00", persist=False)

    assert "End time must be after start time." in detector.validate_time_range(schedule)


def test_times_outside_day_window_are_rejected(builder, detector):
    early = builder.schedule("ITS 308", "A", "T-TH", "05:30", "07:00", persist=False)
    late = builder.schedule("ITS 309", "A", "T-TH", "21:00", "22:30", persist=False)

    assert detector.validate_time_range(early) == ["Start time must not be earlier than 6:00 AM."]
    assert detector.validate_time_range(late) == ["End time must not be later than 10:00 PM."]


def test_day_window_is_configurable(builder, db_session):
    settings = Settings(_env_file=None, day_window_start="07:30", day_window_end="18:00")
    detector = ConflictDetector(SqlAlchemyScheduleRepository(db_session), settings)
    schedule = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", persist=False)

    assert detector.validate_time_range(schedule) == ["Start time must not be earlier than 7:30 AM."]


def test_duration_limits(builder, detector):
    short = builder.schedule("ITS 308", "A", "T-TH", "07:00", "07:15", persist=False)
    long = builder.schedule("ITS 309", "A", "T-TH", "07:00", "16:00", persist=False)

    assert detector.validate_time_range(short) == ["Schedule duration must be at least 30 minutes."]
    assert detector.validate_time_range(long) == ["Schedule duration cannot exceed 8 hours."]


def test_missing_times_are_reported(builder, detector):
    schedule = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", persist=False)
    schedule.end_time = None

    assert detector.validate_time_range(schedule) == ["Start time and end time are required."]


def test_inverted_day_window_is_a_configuration_error(db_session):
    settings = Settings(_env_file=None, day_window_start="20:00", day_window_end="06:00")

    with pytest.raises(ConfigurationError):
        ConflictDetector(SqlAlchemyScheduleRepository(db_session), settings)


def test_malformed_window_setting_is_rejected():
    with pytest.raises(ValueError):
        Settings(_env_file=None, day_window_start="6am")


def test_capacity_within_limit_has_no_warning(builder, detector):
    room = builder.room(capacity=40)
    schedule = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", room=room, enrolled=40, persist=False)

    assert detector.validate_room_capacity(schedule) == []


def test_capacity_overflow_warns(builder, detector):
    room = builder.room(capacity=40)
    schedule = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", room=room, enrolled=50, persist=False)

    assert detector.validate_room_capacity(schedule) == ["Enrolled students (50) exceeds room capacity (40)."]


def test_capacity_check_skips_rooms_without_capacity(builder, detector):
    room = builder.room(capacity=40)
    room.capacity = None
    builder.db.commit()
    schedule = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", room=room, enrolled=50, persist=False)

    assert detector.validate_room_capacity(schedule) == []
