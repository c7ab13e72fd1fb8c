"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

from .enums import (
    course_status_enum,
    form_type_enum,
    module_type_enum,
    renewal_email_type_enum,
)

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. USERS
# =====================================================
# Members and admins share one table; coaching clients are members.
users = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", Text, nullable=False),
    Column("first_name", Text),
    Column("last_name", Text),
    Column("phone", Text),
    Column("country", Text),
    Column("is_admin", Boolean, server_default="false"),
    Column("terms_accepted", Boolean, server_default="false"),
    Column("has_whatsapp_support", Boolean, server_default="false"),
    Column("program_expiry_date", Date),
    Column("whatsapp_expiry_date", Date),
    Column("expired_archived_at", TIMESTAMP(timezone=True)),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_users_email", "email"),
    Index("idx_users_program_expiry_date", "program_expiry_date"),
)


# =====================================================
# 2. COACHING_FORM_RESPONSES
# =====================================================
# One row per (client, form_type); resubmission replaces `responses`.
coaching_form_responses = Table(
    "coaching_form_responses",
    metadata,
    Column("response_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "client_id",
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("form_type", form_type_enum, nullable=False),
    Column("responses", JSONB, nullable=False, server_default="{}"),
    Column("submitted_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_coaching_form_responses_client_id", "client_id"),
    UniqueConstraint(
        "client_id",
        "form_type",
        name="uq_coaching_form_responses_client_id_form_type",
    ),
)


# =====================================================
# 3. COURSES
# =====================================================
courses = Table(
    "courses",
    metadata,
    Column("course_id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("slug", Text, nullable=False, unique=True),
    Column("description", Text, server_default=""),
    Column("status", course_status_enum, server_default="draft"),
    Column("image_url", Text),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
)


# =====================================================
# 4. COURSE_MODULES
# =====================================================
# Modules are reusable across courses via course_module_mappings.
course_modules = Table(
    "course_modules",
    metadata,
    Column("module_id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("description", Text),
    Column("module_type", module_type_enum, nullable=False),
    Column("color_theme", Text),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
)


# =====================================================
# 5. COURSE_MODULE_MAPPINGS
# =====================================================
course_module_mappings = Table(
    "course_module_mappings",
    metadata,
    Column("mapping_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "course_id",
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "module_id",
        Integer,
        ForeignKey("course_modules.module_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("order_index", Integer, nullable=False, server_default="0"),
    Column("is_required", Boolean, server_default="true"),
    Index("idx_course_module_mappings_course_id", "course_id"),
    UniqueConstraint(
        "course_id", "module_id", name="uq_course_module_mappings_course_module"
    ),
)


# =====================================================
# 6. MODULE_SECTIONS
# =====================================================
module_sections = Table(
    "module_sections",
    metadata,
    Column("section_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "module_id",
        Integer,
        ForeignKey("course_modules.module_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("order_index", Integer, nullable=False, server_default="0"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_module_sections_module_id", "module_id"),
)


# =====================================================
# 7. EXERCISES
# =====================================================
exercises = Table(
    "exercises",
    metadata,
    Column("exercise_id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("description", Text),
    Column("video_url", Text),
    Column("duration", Text),
    Column("default_reps", Text),
    Column("category", Text),
    Column("difficulty", Text),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
)


# =====================================================
# 8. STRUCTURED_WORKOUTS
# =====================================================
structured_workouts = Table(
    "structured_workouts",
    metadata,
    Column("workout_id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("workout_type", Text),
    Column("rounds", Integer, server_default="1"),
    Column("rest_between_exercises", Integer),
    Column("rest_between_rounds", Integer),
    Column("total_duration", Text),
    Column("difficulty", Text),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
)


# =====================================================
# 9. WORKOUT_EXERCISE_LINKS
# =====================================================
workout_exercise_links = Table(
    "workout_exercise_links",
    metadata,
    Column("link_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "workout_id",
        Integer,
        ForeignKey("structured_workouts.workout_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "exercise_id",
        Integer,
        ForeignKey("exercises.exercise_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("reps", Text),
    Column("sets", Integer),
    Column("duration", Text),
    Column("rest_after", Integer),
    Column("side_specific", Boolean, server_default="false"),
    Column("order_index", Integer, nullable=False, server_default="0"),
    Index("idx_workout_exercise_links_workout_id", "workout_id"),
)


# =====================================================
# 10. CONTENT_ITEMS
# =====================================================
content_items = Table(
    "content_items",
    metadata,
    Column("item_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "section_id",
        Integer,
        ForeignKey("module_sections.section_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", Text, nullable=False),
    Column("content_type", Text, nullable=False),  # ContentKind value
    Column("content", Text),  # text body
    Column("video_url", Text),
    Column("duration", Text),
    Column(
        "exercise_id",
        Integer,
        ForeignKey("exercises.exercise_id", ondelete="SET NULL"),
    ),
    Column("reps_override", Text),
    Column(
        "structured_workout_id",
        Integer,
        ForeignKey("structured_workouts.workout_id", ondelete="SET NULL"),
    ),
    Column("metadata", JSONB),
    Column("order_index", Integer, nullable=False, server_default="0"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_content_items_section_id", "section_id"),
)


# =====================================================
# 11. RENEWAL_EMAIL_LOGS
# =====================================================
# Records that a renewal reminder went out; delivery happens elsewhere.
renewal_email_logs = Table(
    "renewal_email_logs",
    metadata,
    Column("log_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("email_type", renewal_email_type_enum, nullable=False),
    Column("sent_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_renewal_email_logs_user_id", "user_id"),
)
