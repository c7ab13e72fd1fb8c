"""
Core business logic - platform-agnostic.
Used by the web API and the admin views (intake editor, course preview).
"""

# Database (SQLAlchemy)
from .database import get_connection, get_transaction, get_engine, close_engine, is_configured

# Enums
from .enums import FormType, CourseStatus, ModuleType, ContentKind, RenewalEmailType

# Notices shown by admin views
from .notices import Notice, validation_notice, error_notice, success_notice

# HTTP client for the admin API
from .api_client import AdminApiClient, ApiError

# Tabular exports (CSV, print)
from .exports import (
    Column, project_rows, to_csv, to_print_grid,
    MEMBER_COLUMNS, EXPIRED_MEMBER_COLUMNS, intake_columns,
)


__all__ = [
    # Database
    'get_connection', 'get_transaction', 'get_engine', 'close_engine', 'is_configured',
    # Enums
    'FormType', 'CourseStatus', 'ModuleType', 'ContentKind', 'RenewalEmailType',
    # Notices
    'Notice', 'validation_notice', 'error_notice', 'success_notice',
    # API client
    'AdminApiClient', 'ApiError',
    # Exports
    'Column', 'project_rows', 'to_csv', 'to_print_grid',
    'MEMBER_COLUMNS', 'EXPIRED_MEMBER_COLUMNS', 'intake_columns',
]
