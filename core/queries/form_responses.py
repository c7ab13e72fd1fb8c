"""Coaching questionnaire storage: one response per (client, form type)."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncConnection

from ..enums import FormType
from ..tables import coaching_form_responses, users


async def list_form_responses(
    conn: AsyncConnection,
    client_id: int,
) -> list[dict[str, Any]]:
    """All questionnaires a client has submitted (empty list if none)."""
    result = await conn.execute(
        select(coaching_form_responses)
        .where(coaching_form_responses.c.client_id == client_id)
        .order_by(coaching_form_responses.c.form_type)
    )
    return [dict(row) for row in result.mappings()]


async def get_form_response(
    conn: AsyncConnection,
    client_id: int,
    form_type: FormType,
) -> dict[str, Any] | None:
    result = await conn.execute(
        select(coaching_form_responses).where(
            (coaching_form_responses.c.client_id == client_id)
            & (coaching_form_responses.c.form_type == form_type)
        )
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def upsert_form_response(
    conn: AsyncConnection,
    client_id: int,
    form_type: FormType,
    responses: dict[str, Any],
) -> dict[str, Any]:
    """
    Store a client's questionnaire, replacing any earlier submission.

    `responses` replaces the stored map wholesale; `submitted_at` is
    stamped on every write.
    """
    now = datetime.now(timezone.utc)
    stmt = pg_insert(coaching_form_responses).values(
        client_id=client_id,
        form_type=form_type,
        responses=responses,
        submitted_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        constraint="uq_coaching_form_responses_client_id_form_type",
        set_={
            "responses": stmt.excluded.responses,
            "submitted_at": stmt.excluded.submitted_at,
            "updated_at": stmt.excluded.updated_at,
        },
    ).returning(coaching_form_responses)

    result = await conn.execute(stmt)
    row = result.mappings().first()
    # No explicit commit - let the caller's transaction context handle it
    return dict(row)


async def list_form_responses_by_type(
    conn: AsyncConnection,
    form_type: FormType,
) -> list[dict[str, Any]]:
    """Every client's response of one form type, with client name/email for export."""
    result = await conn.execute(
        select(
            coaching_form_responses.c.client_id,
            coaching_form_responses.c.form_type,
            coaching_form_responses.c.responses,
            coaching_form_responses.c.submitted_at,
            users.c.first_name,
            users.c.last_name,
            users.c.email,
        )
        .join(users, users.c.user_id == coaching_form_responses.c.client_id)
        .where(coaching_form_responses.c.form_type == form_type)
        .order_by(coaching_form_responses.c.submitted_at.desc())
    )
    return [dict(row) for row in result.mappings()]
