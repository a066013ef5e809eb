"""create schedule tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    schedule_status = sa.Enum("active", "inactive", name="schedule_status")

    op.create_table(
        "academic_years",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("label", sa.String(length=20), nullable=False),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_academic_years_label", "academic_years", ["label"], unique=True)

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("building", sa.String(length=200), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True, server_default="30"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_rooms_code", "rooms", ["code"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)

    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_faculty_email", "faculty", ["email"], unique=True)

    op.create_table(
        "curriculum_terms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("curriculum_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("year_level", sa.Integer(), nullable=False),
        sa.Column("semester", sa.String(length=10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "curriculum_name",
            "year_level",
            "semester",
            name="uq_curriculum_terms_curriculum_year_semester",
        ),
    )

    op.create_table(
        "curriculum_subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("curriculum_term_id", sa.String(length=36), sa.ForeignKey("curriculum_terms.id"), nullable=False),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("curriculum_term_id", "subject_id", name="uq_curriculum_subjects_term_subject"),
    )

    op.create_table(
        "schedules",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("academic_year_id", sa.String(length=36), sa.ForeignKey("academic_years.id"), nullable=False),
        sa.Column("semester", sa.String(length=10), nullable=False),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id"), nullable=True),
        sa.Column("room_id", sa.String(length=36), sa.ForeignKey("rooms.id"), nullable=True),
        sa.Column("faculty_id", sa.String(length=36), sa.ForeignKey("faculty.id"), nullable=True),
        sa.Column(
            "curriculum_subject_id",
            sa.String(length=36),
            sa.ForeignKey("curriculum_subjects.id"),
            nullable=True,
        ),
        sa.Column("day_pattern", sa.String(length=255), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("section", sa.String(length=255), nullable=True),
        sa.Column("section_key", sa.String(length=255), nullable=True),
        sa.Column("enrolled_students", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_conflicted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_overload", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("status", schedule_status, nullable=False, server_default="active"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_schedules_academic_year_id", "schedules", ["academic_year_id"])
    op.create_index("ix_schedules_room_id", "schedules", ["room_id"])
    op.create_index("ix_schedules_term_status", "schedules", ["academic_year_id", "semester", "status"])
    op.create_index(
        "uq_schedules_subject_section_term",
        "schedules",
        ["subject_id", "section_key", "semester", "academic_year_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )


def downgrade() -> None:
    op.drop_index("uq_schedules_subject_section_term", table_name="schedules")
    op.drop_index("ix_schedules_term_status", table_name="schedules")
    op.drop_index("ix_schedules_room_id", table_name="schedules")
    op.drop_index("ix_schedules_academic_year_id", table_name="schedules")
    op.drop_table("schedules")
    op.drop_table("curriculum_subjects")
    op.drop_table("curriculum_terms")
    op.drop_index("ix_faculty_email", table_name="faculty")
    op.drop_table("faculty")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_rooms_code", table_name="rooms")
    op.drop_table("rooms")
    op.drop_index("ix_academic_years_label", table_name="academic_years")
    op.drop_table("academic_years")
    sa.Enum(name="schedule_status").drop(op.get_bind(), checkfirst=True)
