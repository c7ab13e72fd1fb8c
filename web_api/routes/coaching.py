"""Coaching intake questionnaire API routes.

All endpoints require admin authentication.

Endpoints:
- GET /api/admin/coaching/clients/{client_id}/form-responses - List a client's questionnaires
- POST /api/admin/coaching/clients/{client_id}/form-responses - Save (upsert) one questionnaire
- GET /api/admin/coaching/clients/{client_id}/form-responses/{form_type}/summary - Read-only view
- GET /api/admin/coaching/form-responses/{form_type}/export.csv - All clients, one form type
"""

import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.database import get_connection, get_transaction
from core.enums import FormType
from core.exports import intake_columns, to_csv
from core.intake import (
    FieldValueError,
    FormSchema,
    UnknownFormTypeError,
    coerce_value,
    get_schema,
    render_readonly,
)
from core.queries.form_responses import (
    get_form_response,
    list_form_responses,
    list_form_responses_by_type,
    upsert_form_response,
)
from web_api.auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/coaching", tags=["coaching"])


class FormResponseRequest(BaseModel):
    """Request body for saving a questionnaire."""

    formType: str
    responses: dict[str, Any] = {}


def _schema_or_400(form_type: str) -> FormSchema:
    try:
        return get_schema(form_type)
    except UnknownFormTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _normalize(schema: FormSchema, responses: dict[str, Any]) -> dict[str, Any]:
    """
    Check each answered field against its kind and store the canonical wire
    value. Keys the schema doesn't know are kept as sent.
    """
    normalized = {}
    for name, value in responses.items():
        if not schema.has_field(name):
            normalized[name] = value
            continue
        try:
            normalized[name] = coerce_value(schema.get_field(name), value).to_wire()
        except FieldValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    return normalized


def _format_record(row: dict) -> dict[str, Any]:
    submitted_at = row.get("submitted_at")
    if isinstance(submitted_at, datetime):
        submitted_at = submitted_at.isoformat()
    return {
        "clientId": row["client_id"],
        "formType": FormType(row["form_type"]).value,
        "responses": row.get("responses") or {},
        "submittedAt": submitted_at,
    }


@router.get("/clients/{client_id}/form-responses")
async def list_client_form_responses(
    client_id: int,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """All questionnaires a client has submitted; an empty list is not an error."""
    async with get_connection() as conn:
        rows = await list_form_responses(conn, client_id)

    return {"responses": [_format_record(r) for r in rows]}


@router.post("/clients/{client_id}/form-responses")
async def save_client_form_response(
    client_id: int,
    request: FormResponseRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """Store a questionnaire, replacing any earlier one of the same type."""
    schema = _schema_or_400(request.formType)
    responses = _normalize(schema, request.responses)

    async with get_transaction() as conn:
        row = await upsert_form_response(conn, client_id, schema.form_type, responses)

    logger.info(
        f"Admin {admin['user_id']} saved {schema.form_type.value} for client {client_id}"
    )
    return _format_record(row)


@router.get("/clients/{client_id}/form-responses/{form_type}/summary")
async def get_client_form_summary(
    client_id: int,
    form_type: str,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """Read-only view of a stored questionnaire, or `submitted: false`."""
    schema = _schema_or_400(form_type)

    async with get_connection() as conn:
        row = await get_form_response(conn, client_id, schema.form_type)

    if not row:
        return {"submitted": False}

    record = _format_record(row)
    summary = render_readonly(schema, record["responses"])
    return {
        "submitted": True,
        "submittedAt": record["submittedAt"],
        **summary.to_dict(),
    }


@router.get("/form-responses/{form_type}/export.csv")
async def export_form_responses(
    form_type: str,
    admin: dict = Depends(require_admin),
) -> Response:
    """Every client's answers to one questionnaire as CSV."""
    schema = _schema_or_400(form_type)

    async with get_connection() as conn:
        rows = await list_form_responses_by_type(conn, schema.form_type)

    filename = f"{schema.form_type.value}-{date.today().isoformat()}.csv"
    return Response(
        content=to_csv(rows, intake_columns(schema)),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
