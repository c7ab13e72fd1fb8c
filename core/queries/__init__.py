"""Query layer for database operations using SQLAlchemy Core."""

from .users import create_user, get_user_by_id, is_admin
from .form_responses import (
    get_form_response,
    list_form_responses,
    list_form_responses_by_type,
    upsert_form_response,
)
from .members import (
    archive_expired_member,
    list_expired_members,
    list_expiring_members,
    list_members,
    list_renewal_email_logs,
    log_renewal_email,
)

__all__ = [
    # Users
    "get_user_by_id",
    "is_admin",
    "create_user",
    # Coaching form responses
    "list_form_responses",
    "get_form_response",
    "upsert_form_response",
    "list_form_responses_by_type",
    # Members
    "list_members",
    "list_expired_members",
    "list_expiring_members",
    "archive_expired_member",
    "log_renewal_email",
    "list_renewal_email_logs",
]
