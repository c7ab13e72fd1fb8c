"""
Tabular exports of admin lists.

Both layouts (CSV download and the printable grid) go through
`project_rows`, so a column defined once renders the same way in each.
"""

import csv
import io
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from core.intake.schemas import FormSchema

Record = Mapping[str, Any]


@dataclass(frozen=True)
class Column:
    """One export column.

    `value` is either a record key or a function of the record. `width`
    caps the cell length in the print grid; CSV cells are never cut.
    """

    header: str
    value: str | Callable[[Record], Any]
    width: int | None = None

    def extract(self, record: Record) -> Any:
        if callable(self.value):
            return self.value(record)
        return record.get(self.value)


def format_date(value: date) -> str:
    """e.g. 5 Mar 2024"""
    return f"{value.day} {value.strftime('%b %Y')}"


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    # datetime is a date subclass
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(format_cell(v) for v in value)
    return str(value)


def project_rows(records: Iterable[Record], columns: list[Column]) -> list[list[str]]:
    """Format every record into one row of strings, column order preserved."""
    return [[format_cell(c.extract(r)) for c in columns] for r in records]


_LINE_BREAK = re.compile(r"\s*(?:\r\n|\r|\n)\s*")


def _single_line(cell: str) -> str:
    return _LINE_BREAK.sub(" ", cell)


def to_csv(records: Iterable[Record], columns: list[Column]) -> str:
    """Header line plus exactly one line per record; every cell quoted.

    Line breaks inside a cell (multiline answers) become single spaces.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([c.header for c in columns])
    writer.writerows(
        [_single_line(cell) for cell in row] for row in project_rows(records, columns)
    )
    return buffer.getvalue()


def to_print_grid(records: Iterable[Record], columns: list[Column]) -> list[list[str]]:
    """Header plus rows for the printable list; empty cells show as '-'."""
    grid = [[c.header for c in columns]]
    for row in project_rows(records, columns):
        cells = []
        for column, cell in zip(columns, row):
            if column.width is not None:
                cell = cell[: column.width]
            cells.append(cell or "-")
        grid.append(cells)
    return grid


# --- Column sets ---


def member_name(record: Record) -> str:
    """Full name, falling back to email when no name is set."""
    name = f"{record.get('first_name') or ''} {record.get('last_name') or ''}".strip()
    return name or record.get("email") or ""


def _member_status(record: Record) -> str:
    return "Active" if record.get("terms_accepted") else "Pending"


def _expired_what(record: Record) -> list[str]:
    expired = []
    if record.get("program_expired"):
        expired.append("Program")
    if record.get("whatsapp_expired"):
        expired.append("WhatsApp")
    return expired


def _expiring_what(record: Record) -> list[str]:
    expiring = []
    if record.get("program_expiring"):
        expiring.append("Program")
    if record.get("whatsapp_expiring"):
        expiring.append("WhatsApp")
    return expiring


MEMBER_COLUMNS = [
    Column("Name", member_name, width=20),
    Column("Email", "email", width=30),
    Column("Phone", "phone", width=15),
    Column("Country", "country", width=15),
    Column("Joined", "created_at"),
    Column("Status", _member_status),
    Column("Has WhatsApp Support", "has_whatsapp_support"),
]

EXPIRED_MEMBER_COLUMNS = [
    Column("Name", member_name, width=20),
    Column("Email", "email", width=30),
    Column("Program Expiry", "program_expiry_date"),
    Column("WhatsApp Expiry", "whatsapp_expiry_date"),
    Column("Expired", _expired_what),
]

EXPIRING_MEMBER_COLUMNS = [
    Column("Name", member_name, width=20),
    Column("Email", "email", width=30),
    Column("Program Expiry", "program_expiry_date"),
    Column("WhatsApp Expiry", "whatsapp_expiry_date"),
    Column("Expiring", _expiring_what),
]


def intake_columns(schema: FormSchema) -> list[Column]:
    """Client columns followed by every question in schema order."""

    def answer(name: str) -> Callable[[Record], Any]:
        return lambda record: (record.get("responses") or {}).get(name)

    columns = [
        Column("Client Name", member_name),
        Column("Email", "email"),
        Column("Submitted", "submitted_at"),
    ]
    columns.extend(Column(f.label, answer(f.name)) for f in schema.fields)
    return columns
