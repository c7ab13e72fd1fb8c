"""Tests for CSV and print-grid exports."""

import csv
import io
from datetime import date, datetime

from core.enums import FormType
from core.exports import (
    EXPIRED_MEMBER_COLUMNS,
    MEMBER_COLUMNS,
    Column,
    format_cell,
    format_date,
    intake_columns,
    member_name,
    to_csv,
    to_print_grid,
)
from core.intake.schemas import get_schema


def _member(**overrides) -> dict:
    member = {
        "user_id": 1,
        "first_name": "Dana",
        "last_name": "Reyes",
        "email": "dana@example.com",
        "phone": "+44 7700 900123",
        "country": "United Kingdom",
        "created_at": datetime(2024, 3, 5, 9, 30),
        "terms_accepted": True,
        "has_whatsapp_support": False,
    }
    member.update(overrides)
    return member


class TestFormatting:
    """Tests for cell formatting."""

    def test_date_format(self):
        assert format_date(date(2024, 3, 5)) == "5 Mar 2024"
        assert format_cell(datetime(2024, 12, 25, 18, 0)) == "25 Dec 2024"

    def test_booleans_and_missing(self):
        assert format_cell(True) == "Yes"
        assert format_cell(False) == "No"
        assert format_cell(None) == ""

    def test_lists_are_joined(self):
        assert format_cell(["Program", "WhatsApp"]) == "Program, WhatsApp"
        assert format_cell([]) == ""

    def test_member_name_falls_back_to_email(self):
        assert member_name(_member()) == "Dana Reyes"
        assert member_name(_member(first_name=None, last_name=None)) == "dana@example.com"
        assert member_name(_member(last_name="")) == "Dana"


class TestCsv:
    """Tests for to_csv."""

    def test_header_plus_one_line_per_record(self):
        records = [_member(user_id=i) for i in range(3)]
        output = to_csv(records, MEMBER_COLUMNS)
        lines = output.splitlines()
        assert len(lines) == 4
        assert lines[0] == (
            '"Name","Email","Phone","Country","Joined","Status","Has WhatsApp Support"'
        )

    def test_no_records_is_header_only(self):
        assert len(to_csv([], MEMBER_COLUMNS).splitlines()) == 1

    def test_cells_with_quotes_and_commas_survive(self):
        records = [_member(first_name='Ana "AJ"', last_name="Silva, Jr.")]
        rows = list(csv.reader(io.StringIO(to_csv(records, MEMBER_COLUMNS))))
        assert rows[1][0] == 'Ana "AJ" Silva, Jr.'
        assert rows[1][4] == "5 Mar 2024"
        assert rows[1][5] == "Active"
        assert rows[1][6] == "No"

    def test_csv_cells_are_not_truncated(self):
        long_email = "a-very-long-address-for-testing@example.com"
        rows = list(csv.reader(io.StringIO(to_csv([_member(email=long_email)], MEMBER_COLUMNS))))
        assert rows[1][1] == long_email

    def test_expired_columns(self):
        record = _member(
            program_expiry_date=date(2024, 1, 31),
            whatsapp_expiry_date=None,
            program_expired=True,
            whatsapp_expired=False,
        )
        rows = list(csv.reader(io.StringIO(to_csv([record], EXPIRED_MEMBER_COLUMNS))))
        assert rows[0] == ["Name", "Email", "Program Expiry", "WhatsApp Expiry", "Expired"]
        assert rows[1][2:] == ["31 Jan 2024", "", "Program"]


class TestPrintGrid:
    """Tests for to_print_grid."""

    def test_truncates_to_column_width(self):
        grid = to_print_grid([_member(email="x" * 40)], MEMBER_COLUMNS)
        assert grid[0][0] == "Name"
        assert grid[1][1] == "x" * 30

    def test_empty_cells_show_dash(self):
        grid = to_print_grid([_member(phone=None, country="")], MEMBER_COLUMNS)
        assert grid[1][2] == "-"
        assert grid[1][3] == "-"

    def test_callable_and_key_columns(self):
        columns = [Column("Id", "user_id"), Column("Upper", lambda r: r["email"].upper(), width=4)]
        assert to_print_grid([_member()], columns) == [["Id", "Upper"], ["1", "DANA"]]


class TestIntakeColumns:
    """Tests for intake_columns."""

    def test_client_columns_then_questions_in_order(self):
        schema = get_schema(FormType.lifestyle_questionnaire)
        headers = [c.header for c in intake_columns(schema)]
        assert headers[:3] == ["Client Name", "Email", "Submitted"]
        assert headers[3:] == [f.label for f in schema.fields]

    def test_answers_come_from_responses(self):
        schema = get_schema(FormType.lifestyle_questionnaire)
        first = schema.fields[0]
        record = _member(submitted_at=datetime(2024, 3, 5), responses={first.name: "answer"})
        rows = list(csv.reader(io.StringIO(to_csv([record], intake_columns(schema)))))
        assert rows[1][:4] == ["Dana Reyes", "dana@example.com", "5 Mar 2024", "answer"]

    def test_multiline_answers_stay_on_one_line(self):
        schema = get_schema(FormType.health_evaluation)
        records = [
            _member(
                user_id=1,
                submitted_at=datetime(2024, 3, 5),
                responses={"restrictionDetails": "no jumping\nno lifting"},
            ),
            _member(
                user_id=2,
                submitted_at=datetime(2024, 3, 6),
                responses={"restrictionDetails": "rest\r\n\r\nwalk only"},
            ),
        ]
        columns = intake_columns(schema)
        output = to_csv(records, columns)

        assert len(output.splitlines()) == 3
        index = [c.header for c in columns].index(schema.get_field("restrictionDetails").label)
        rows = list(csv.reader(io.StringIO(output)))
        assert rows[1][index] == "no jumping no lifting"
        assert rows[2][index] == "rest walk only"

    def test_print_grid_keeps_line_breaks(self):
        columns = [Column("Notes", "notes")]
        assert to_print_grid([{"notes": "a\nb"}], columns)[1] == ["a\nb"]

    def test_missing_responses_are_blank(self):
        schema = get_schema(FormType.lifestyle_questionnaire)
        rows = list(csv.reader(io.StringIO(to_csv([_member(responses=None)], intake_columns(schema)))))
        assert all(cell == "" for cell in rows[1][3:])
