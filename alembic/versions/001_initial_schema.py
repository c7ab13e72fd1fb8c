"""Initial schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the enum types (tables reference them with create_type=False)
and every table in core.tables.
"""

from typing import Sequence, Union

from alembic import op
from sqlalchemy.dialects import postgresql

from core.enums import CourseStatus, FormType, ModuleType, RenewalEmailType

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUM_TYPES = [
    postgresql.ENUM(*[e.value for e in FormType], name="form_type"),
    postgresql.ENUM(*[e.value for e in CourseStatus], name="course_status"),
    postgresql.ENUM(*[e.value for e in ModuleType], name="module_type"),
    postgresql.ENUM(*[e.value for e in RenewalEmailType], name="renewal_email_type"),
]


def upgrade() -> None:
    """Create enum types, then all tables from SQLAlchemy models."""
    from core.tables import metadata

    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)
    metadata.create_all(bind, checkfirst=True)


def downgrade() -> None:
    """Drop all tables - use with caution!"""
    from core.tables import metadata

    bind = op.get_bind()
    metadata.drop_all(bind)
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
