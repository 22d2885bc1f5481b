# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Bulk Import Pipeline — Unit Tests
==================================
Run:  pytest test_csv_import.py -v
"""
from datetime import date

import pytest

from enrolment.core.errors import ValidationFailed
from enrolment.services.csv_import import (
    generate_template,
    map_header_to_field,
    normalize_date_string,
    normalize_gender,
    normalize_header,
    parse_employee_csv,
    parse_rows,
    rows_to_create_commands,
)

HEADER = "Employee Code,First Name,Last Name,Email,Phone,Date of Birth,Gender,Department,Designation"


# ═══════════════════════════════════════════════════════════════════════════
# HEADER MAPPING
# ═══════════════════════════════════════════════════════════════════════════
class TestHeaderMapping:
    @pytest.mark.parametrize("header", [
        "Employee Code", "employee_code", "EMPLOYEE-CODE", "Emp Code", "  employeecode  ",
    ])
    def test_employee_code_variants(self, header):
        assert map_header_to_field(header) == "employee_code"

    def test_normalize_header_strips_punctuation_and_spaces(self):
        assert normalize_header("  Date   of-Birth! ") == "date ofbirth"
        assert normalize_header("E-mail Address") == "email address"

    def test_aliases(self):
        assert map_header_to_field("DOB") == "date_of_birth"
        assert map_header_to_field("Surname") == "last_name"
        assert map_header_to_field("Job Title") == "designation"
        assert map_header_to_field("Mobile") == "phone"
        assert map_header_to_field("Sex") == "gender"

    def test_unknown_header(self):
        assert map_header_to_field("Favourite Colour") is None
        # no fuzzy matching
        assert map_header_to_field("Employee Cod") is None

    def test_first_matching_column_wins(self):
        results = parse_employee_csv(
            "Employee Code,First Name,Last Name,Email,Emp Code\n"
            "EMP001,John,Doe,john@x.com,OTHER"
        )
        assert results[0].data.employee_code == "EMP001"


# ═══════════════════════════════════════════════════════════════════════════
# VALUE NORMALISATION
# ═══════════════════════════════════════════════════════════════════════════
class TestDates:
    def test_iso_unchanged(self):
        assert normalize_date_string("1990-05-15") == "1990-05-15"

    def test_slash_month_first(self):
        assert normalize_date_string("05/15/1990", "MDY") == "1990-05-15"

    def test_slash_day_first(self):
        assert normalize_date_string("15/05/1990", "DMY") == "1990-05-15"

    def test_single_digit_parts(self):
        assert normalize_date_string("5/7/1990", "MDY") == "1990-05-07"
        assert normalize_date_string("5/7/1990", "DMY") == "1990-07-05"

    @pytest.mark.parametrize("value", ["1990-02-30", "13/01/1990", "15-05-1990", "yesterday"])
    def test_invalid(self, value):
        assert normalize_date_string(value, "MDY") is None

    def test_blank_is_none(self):
        assert normalize_date_string("") is None
        assert normalize_date_string("   ") is None
        assert normalize_date_string(None) is None

    def test_unknown_order_rejected(self):
        with pytest.raises(ValueError):
            normalize_date_string("01/02/1990", "YMD")


class TestGender:
    @pytest.mark.parametrize("value,expected", [
        ("male", "Male"), ("M", "Male"), (" FEMALE ", "Female"), ("f", "Female"),
        ("Other", "Other"),
    ])
    def test_known(self, value, expected):
        assert normalize_gender(value) == expected

    def test_unknown(self):
        assert normalize_gender("x") is None
        assert normalize_gender("") is None


# ═══════════════════════════════════════════════════════════════════════════
# PARSING & ROW VALIDATION
# ═══════════════════════════════════════════════════════════════════════════
class TestParse:
    def test_blank_lines_skipped(self):
        text = f"{HEADER}\n\nEMP001,John,Doe,john@x.com,,,,,\n   \n,,,,,,,,\nEMP002,Jane,Roe,jane@x.com,,,,,\n"
        results = parse_employee_csv(text)
        assert [r.data.employee_code for r in results] == ["EMP001", "EMP002"]

    def test_bom_stripped(self):
        header, rows = parse_rows("\ufeffEmployee Code,Email\nEMP001,a@b.co")
        assert header == ["Employee Code", "Email"]
        assert rows == [["EMP001", "a@b.co"]]

    def test_empty_text(self):
        assert parse_rows("") == ([], [])
        assert parse_employee_csv("") == []
        assert parse_employee_csv(HEADER) == []

    def test_quoted_fields(self):
        results = parse_employee_csv(
            f'{HEADER}\nEMP001,John,Doe,john@x.com,"+91 98765, ext 2",,,"R&D, Core",\n'
        )
        assert results[0].is_valid
        assert results[0].data.phone == "+91 98765, ext 2"
        assert results[0].data.department == "R&D, Core"

    def test_unreadable_csv(self):
        with pytest.raises(ValidationFailed):
            parse_rows("Employee Code\n" + "x" * 200_000)

    def test_row_numbers_start_at_two(self):
        results = parse_employee_csv(f"{HEADER}\nEMP001,John,Doe,john@x.com\nEMP002,Jane,Roe,jane@x.com")
        assert [r.row_number for r in results] == [2, 3]

    def test_short_rows_padded(self):
        results = parse_employee_csv(f"{HEADER}\nEMP001,John,Doe,john@x.com")
        assert results[0].is_valid
        assert results[0].data.phone is None


class TestRowValidation:
    def test_invalid_email_message(self):
        results = parse_employee_csv(f"{HEADER}\nEMP001,John,Doe,bad-email,,,,,")
        assert results[0].is_valid is False
        assert results[0].errors == ["Row 2: Invalid email format 'bad-email'"]

    def test_missing_required_fields(self):
        results = parse_employee_csv(f"{HEADER}\n,John,,john@x.com,,,,,")
        assert results[0].errors == [
            "Row 2: Missing required field 'Employee Code'",
            "Row 2: Missing required field 'Last Name'",
        ]

    def test_missing_column_counts_as_missing_field(self):
        results = parse_employee_csv("Employee Code,First Name,Last Name\nEMP001,John,Doe")
        assert results[0].errors == ["Row 2: Missing required field 'Email'"]

    def test_invalid_date_message(self):
        results = parse_employee_csv(f"{HEADER}\nEMP001,John,Doe,john@x.com,,31/31/1990,,,")
        assert results[0].errors == ["Row 2: Invalid date format '31/31/1990'. Use YYYY-MM-DD"]

    def test_invalid_gender_message(self):
        results = parse_employee_csv(f"{HEADER}\nEMP001,John,Doe,john@x.com,,,Unknown,,")
        assert results[0].errors == ["Row 2: Invalid gender 'Unknown'. Use Male, Female, or Other"]

    def test_every_problem_reported(self):
        results = parse_employee_csv(f"{HEADER}\n,,Doe,nope,,1990-13-01,z,,")
        assert len(results[0].errors) == 5


# ═══════════════════════════════════════════════════════════════════════════
# COMMANDS & TEMPLATE
# ═══════════════════════════════════════════════════════════════════════════
class TestCommands:
    def test_valid_rows_become_commands_with_self_member(self):
        results = parse_employee_csv(
            f"{HEADER}\nEMP001,John,Doe,john@x.com,,05/15/1990,m,Engineering,Dev\n"
            f"EMP002,,Roe,jane@x.com,,,,,"
        )
        commands = rows_to_create_commands(results, policy_id=7)
        assert len(commands) == 1
        command = commands[0]
        assert command["policy_id"] == 7
        assert command["date_of_birth"] == date(1990, 5, 15)
        assert command["gender"] == "Male"
        assert command["self_member"] == {
            "first_name": "John", "last_name": "Doe",
            "date_of_birth": date(1990, 5, 15), "gender": "Male",
            "relationship": "SELF",
        }


class TestTemplate:
    def test_two_lines_nine_columns(self):
        lines = generate_template().split("\n")
        assert len(lines) == 2
        assert lines[0].split(",") == [
            "Employee Code", "First Name", "Last Name", "Email", "Phone",
            "Date of Birth", "Gender", "Department", "Designation",
        ]
        assert len(lines[1].split(",")) == 9

    def test_example_row_is_valid(self):
        results = parse_employee_csv(generate_template())
        assert len(results) == 1
        assert results[0].is_valid
