from app.models.academic_year import AcademicYear  # noqa: F401
from app.models.curriculum import CurriculumSubject, CurriculumTerm  # noqa: F401
from app.models.faculty import Faculty  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.schedule import Schedule, ScheduleStatus  # noqa: F401
from app.models.subject import Subject  # noqa: F401
