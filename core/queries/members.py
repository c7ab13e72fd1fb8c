"""Member lists, expired memberships and renewal-email logs."""

from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import and_, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..enums import RenewalEmailType
from ..tables import renewal_email_logs, users

MEMBER_FIELDS = (
    users.c.user_id,
    users.c.email,
    users.c.first_name,
    users.c.last_name,
    users.c.phone,
    users.c.country,
    users.c.terms_accepted,
    users.c.has_whatsapp_support,
    users.c.program_expiry_date,
    users.c.whatsapp_expiry_date,
    users.c.created_at,
)


async def list_members(conn: AsyncConnection) -> list[dict[str, Any]]:
    """All non-admin users, newest first."""
    result = await conn.execute(
        select(*MEMBER_FIELDS)
        .where(users.c.is_admin.isnot(True))
        .order_by(users.c.created_at.desc())
    )
    return [dict(row) for row in result.mappings()]


async def list_expired_members(
    conn: AsyncConnection,
    today: date,
) -> list[dict[str, Any]]:
    """
    Members whose program has expired, or whose WhatsApp support has
    expired while they still have it, and who haven't been archived from
    the expired list.

    Each row carries `program_expired` / `whatsapp_expired` flags.
    """
    program_expired = users.c.program_expiry_date < today
    whatsapp_expired = and_(
        users.c.has_whatsapp_support.is_(True),
        users.c.whatsapp_expiry_date < today,
    )
    result = await conn.execute(
        select(*MEMBER_FIELDS)
        .where(users.c.is_admin.isnot(True))
        .where(users.c.expired_archived_at.is_(None))
        .where(or_(program_expired, whatsapp_expired))
        .order_by(users.c.program_expiry_date)
    )

    members = []
    for row in result.mappings():
        member = dict(row)
        member["program_expired"] = (
            member["program_expiry_date"] is not None
            and member["program_expiry_date"] < today
        )
        member["whatsapp_expired"] = bool(
            member["has_whatsapp_support"]
            and member["whatsapp_expiry_date"] is not None
            and member["whatsapp_expiry_date"] < today
        )
        members.append(member)
    return members


async def list_expiring_members(
    conn: AsyncConnection,
    today: date,
    within_days: int = 7,
) -> list[dict[str, Any]]:
    """
    Members whose program or WhatsApp support runs out in the next
    `within_days` days (today and the last day both included).

    Each row carries `program_expiring` / `whatsapp_expiring` flags. Rows
    come soonest expiry first.
    """
    last_day = today + timedelta(days=within_days)
    program_expiring = users.c.program_expiry_date.between(today, last_day)
    whatsapp_expiring = and_(
        users.c.has_whatsapp_support.is_(True),
        users.c.whatsapp_expiry_date.between(today, last_day),
    )
    result = await conn.execute(
        select(*MEMBER_FIELDS)
        .where(users.c.is_admin.isnot(True))
        .where(or_(program_expiring, whatsapp_expiring))
        .order_by(users.c.user_id)
    )

    def in_window(value: date | None) -> bool:
        return value is not None and today <= value <= last_day

    members = []
    for row in result.mappings():
        member = dict(row)
        member["program_expiring"] = in_window(member["program_expiry_date"])
        member["whatsapp_expiring"] = bool(
            member["has_whatsapp_support"] and in_window(member["whatsapp_expiry_date"])
        )
        members.append(member)

    def soonest(member: dict[str, Any]) -> date:
        dates = [
            member["program_expiry_date"] if member["program_expiring"] else None,
            member["whatsapp_expiry_date"] if member["whatsapp_expiring"] else None,
        ]
        return min(d for d in dates if d is not None)

    members.sort(key=soonest)
    return members


async def archive_expired_member(conn: AsyncConnection, user_id: int) -> bool:
    """Hide a member from the expired list. Returns False if no such member."""
    now = datetime.now(timezone.utc)
    result = await conn.execute(
        update(users)
        .where(users.c.user_id == user_id)
        .values(expired_archived_at=now, updated_at=now)
    )
    return result.rowcount > 0


async def log_renewal_email(
    conn: AsyncConnection,
    user_id: int,
    email_type: RenewalEmailType,
) -> dict[str, Any]:
    """Record that a renewal reminder was sent (sending happens elsewhere)."""
    result = await conn.execute(
        insert(renewal_email_logs)
        .values(user_id=user_id, email_type=email_type)
        .returning(renewal_email_logs)
    )
    return dict(result.mappings().first())


async def list_renewal_email_logs(
    conn: AsyncConnection,
    user_id: int | None = None,
) -> list[dict[str, Any]]:
    query = select(renewal_email_logs).order_by(renewal_email_logs.c.sent_at.desc())
    if user_id is not None:
        query = query.where(renewal_email_logs.c.user_id == user_id)
    result = await conn.execute(query)
    return [dict(row) for row in result.mappings()]
