"""Member list, expired-membership and renewal-email routes.

All endpoints require admin authentication.

Endpoints:
- GET /api/admin/members - List members
- GET /api/admin/members/export.csv - Members as CSV
- GET /api/admin/members/export/print - Members as a printable grid
- GET /api/admin/members/expired - Members with an expired program or WhatsApp support
- GET /api/admin/members/expiring - Members whose program or WhatsApp support ends within a week
- DELETE /api/admin/members/expired/{user_id} - Archive a member from the expired list
- GET /api/admin/renewal-email-logs - Renewal reminders sent
- POST /api/admin/renewal-email-logs - Record that a renewal reminder was sent
"""

import sys
from datetime import date
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.database import get_connection, get_transaction
from core.enums import RenewalEmailType
from core.exports import (
    EXPIRED_MEMBER_COLUMNS,
    EXPIRING_MEMBER_COLUMNS,
    MEMBER_COLUMNS,
    member_name,
    to_csv,
    to_print_grid,
)
from core.queries.members import (
    archive_expired_member,
    list_expired_members,
    list_expiring_members,
    list_members,
    list_renewal_email_logs,
    log_renewal_email,
)
from web_api.auth import require_admin

router = APIRouter(prefix="/api/admin", tags=["members"])


class RenewalEmailLogRequest(BaseModel):
    """Request body for recording a renewal email."""

    user_id: int
    email_type: RenewalEmailType


def _csv_response(content: str, name: str) -> Response:
    filename = f"{name}-{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/members")
async def list_members_endpoint(
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    async with get_connection() as conn:
        members = await list_members(conn)

    for member in members:
        member["name"] = member_name(member)
    return {"members": members, "total": len(members)}


@router.get("/members/export.csv")
async def export_members_csv(
    admin: dict = Depends(require_admin),
) -> Response:
    async with get_connection() as conn:
        members = await list_members(conn)

    return _csv_response(to_csv(members, MEMBER_COLUMNS), "all-members")


@router.get("/members/export/print")
async def export_members_print(
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """Grid for the printable member list; first row is the header."""
    async with get_connection() as conn:
        members = await list_members(conn)

    return {
        "title": "All Members",
        "total": len(members),
        "rows": to_print_grid(members, MEMBER_COLUMNS),
    }


@router.get("/members/expired")
async def list_expired_members_endpoint(
    format: str | None = None,
    admin: dict = Depends(require_admin),
) -> Any:
    """Expired members; `?format=csv` downloads them instead."""
    async with get_connection() as conn:
        members = await list_expired_members(conn, date.today())

    if format == "csv":
        return _csv_response(to_csv(members, EXPIRED_MEMBER_COLUMNS), "expired-members")

    for member in members:
        member["name"] = member_name(member)
    return {"members": members, "total": len(members)}


@router.get("/members/expiring")
async def list_expiring_members_endpoint(
    days: int = Query(7, ge=0, le=365),
    format: str | None = None,
    admin: dict = Depends(require_admin),
) -> Any:
    """Members expiring within `days` days (default a week); `?format=csv` downloads them."""
    async with get_connection() as conn:
        members = await list_expiring_members(conn, date.today(), within_days=days)

    if format == "csv":
        return _csv_response(to_csv(members, EXPIRING_MEMBER_COLUMNS), "expiring-members")

    for member in members:
        member["name"] = member_name(member)
    return {"members": members, "total": len(members)}


@router.delete("/members/expired/{user_id}")
async def archive_expired_member_endpoint(
    user_id: int,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    async with get_transaction() as conn:
        archived = await archive_expired_member(conn, user_id)

    if not archived:
        raise HTTPException(status_code=404, detail="Member not found")
    return {"status": "archived"}


@router.get("/renewal-email-logs")
async def list_renewal_email_logs_endpoint(
    user_id: int | None = None,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    async with get_connection() as conn:
        logs = await list_renewal_email_logs(conn, user_id)

    return {"logs": logs}


@router.post("/renewal-email-logs", status_code=201)
async def create_renewal_email_log(
    request: RenewalEmailLogRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    try:
        async with get_transaction() as conn:
            log = await log_renewal_email(conn, request.user_id, request.email_type)
    except IntegrityError:
        raise HTTPException(status_code=404, detail="Member not found")

    return log
