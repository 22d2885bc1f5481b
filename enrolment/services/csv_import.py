# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Bulk employee import — parsing, header mapping and per-row validation.

Everything here is pure: text in, row reports out. The duplicate cross-check
against the store and the transactional insert live in EmployeeService.
"""
import csv
import io
import re
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from enrolment.core.errors import ValidationFailed
from enrolment.models.domain import EMAIL_PATTERN, Gender, Relationship
from enrolment.schemas import EmployeeRow, RowResult

# canonical field → accepted (already normalised) header spellings
COLUMN_MAPPINGS: Dict[str, Tuple[str, ...]] = {
    "employee_code": ("employee code", "employeecode", "emp code", "empcode", "id", "employee id"),
    "first_name": ("first name", "firstname", "fname", "given name"),
    "last_name": ("last name", "lastname", "lname", "surname", "family name"),
    "email": ("email", "email address", "emailaddress"),
    "phone": ("phone", "phone number", "phonenumber", "mobile", "contact"),
    "date_of_birth": ("date of birth", "dateofbirth", "dob", "birth date", "birthdate"),
    "gender": ("gender", "sex"),
    "department": ("department", "dept", "division", "team"),
    "designation": ("designation", "title", "job title", "position", "role"),
}

REQUIRED_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("employee_code", "Employee Code"),
    ("first_name", "First Name"),
    ("last_name", "Last Name"),
    ("email", "Email"),
)

# (field, template header, example value) in template column order
TEMPLATE_COLUMNS: Tuple[Tuple[str, str, str], ...] = (
    ("employee_code", "Employee Code", "EMP001"),
    ("first_name", "First Name", "John"),
    ("last_name", "Last Name", "Doe"),
    ("email", "Email", "john.doe@company.com"),
    ("phone", "Phone", "+91 98765 43210"),
    ("date_of_birth", "Date of Birth", "1990-05-15"),
    ("gender", "Gender", "Male"),
    ("department", "Department", "Engineering"),
    ("designation", "Designation", "Software Engineer"),
)

SLASH_DATE_ORDERS = ("MDY", "DMY")

_GENDER_ALIASES = {
    "male": Gender.MALE, "m": Gender.MALE,
    "female": Gender.FEMALE, "f": Gender.FEMALE,
    "other": Gender.OTHER,
}

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_SPACES_RE = re.compile(r"\s+")


# ── Header mapping ────────────────────────────────────────────────────────

def normalize_header(header: str) -> str:
    normalized = _NON_ALNUM_RE.sub("", header.lower().strip())
    return _SPACES_RE.sub(" ", normalized).strip()


def map_header_to_field(header: str) -> Optional[str]:
    """Exact match against the alias table or the canonical name; no fuzzing."""
    normalized = normalize_header(header)
    for field, aliases in COLUMN_MAPPINGS.items():
        if normalized in aliases or normalized == field.replace("_", ""):
            return field
    return None


# ── Value normalisation ───────────────────────────────────────────────────

def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def normalize_date_string(value: Optional[str], slash_order: str = "MDY") -> Optional[str]:
    """Return ``YYYY-MM-DD`` for a valid ISO or ``A/B/YYYY`` date, else None.

    ``slash_order`` says whether ``A/B`` is month/day (``MDY``) or day/month
    (``DMY``).
    """
    if slash_order not in SLASH_DATE_ORDERS:
        raise ValueError(f"slash_order must be one of {SLASH_DATE_ORDERS}")
    if not value or not value.strip():
        return None
    value = value.strip()
    if _ISO_DATE_RE.match(value):
        try:
            date.fromisoformat(value)
        except ValueError:
            return None
        return value
    match = _SLASH_DATE_RE.match(value)
    if match:
        first, second, year = (int(p) for p in match.groups())
        month, day = (first, second) if slash_order == "MDY" else (second, first)
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return None
    return None


def normalize_gender(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip():
        return None
    gender = _GENDER_ALIASES.get(value.strip().lower())
    return gender.value if gender else None


# ── Parsing ───────────────────────────────────────────────────────────────

def parse_rows(csv_text: str) -> Tuple[List[str], List[List[str]]]:
    """Split text into (header, data rows), dropping blank lines."""
    if csv_text.startswith("\ufeff"):
        csv_text = csv_text[1:]
    try:
        rows = [row for row in csv.reader(io.StringIO(csv_text))
                if any(cell.strip() for cell in row)]
    except csv.Error as exc:
        raise ValidationFailed(f"Could not read the uploaded CSV: {exc}")
    if not rows:
        return [], []
    return rows[0], rows[1:]


def validate_employee_row(row: EmployeeRow, row_number: int,
                          slash_order: str = "MDY") -> RowResult:
    errors: List[str] = []
    for field, label in REQUIRED_FIELDS:
        if not getattr(row, field).strip():
            errors.append(f"Row {row_number}: Missing required field '{label}'")
    if row.email.strip() and not is_valid_email(row.email):
        errors.append(f"Row {row_number}: Invalid email format '{row.email}'")
    if row.date_of_birth and normalize_date_string(row.date_of_birth, slash_order) is None:
        errors.append(f"Row {row_number}: Invalid date format '{row.date_of_birth}'. Use YYYY-MM-DD")
    if row.gender and normalize_gender(row.gender) is None:
        errors.append(f"Row {row_number}: Invalid gender '{row.gender}'. Use Male, Female, or Other")
    return RowResult(row_number=row_number, data=row, is_valid=not errors, errors=errors)


def parse_employee_csv(csv_text: str, slash_order: str = "MDY") -> List[RowResult]:
    headers, data_rows = parse_rows(csv_text)

    column_fields: Dict[int, str] = {}
    for index, header in enumerate(headers):
        field = map_header_to_field(header)
        if field and field not in column_fields.values():
            column_fields[index] = field

    results: List[RowResult] = []
    for index, cells in enumerate(data_rows):
        values = {field: (cells[col].strip() if col < len(cells) else "")
                  for col, field in column_fields.items()}
        row = EmployeeRow(
            employee_code=values.get("employee_code", ""),
            first_name=values.get("first_name", ""),
            last_name=values.get("last_name", ""),
            email=values.get("email", ""),
            phone=values.get("phone") or None,
            date_of_birth=values.get("date_of_birth") or None,
            gender=values.get("gender") or None,
            department=values.get("department") or None,
            designation=values.get("designation") or None,
        )
        # header occupies line 1, so the first data row is row 2
        results.append(validate_employee_row(row, index + 2, slash_order))
    return results


def rows_to_create_commands(rows: Sequence[RowResult], policy_id: int,
                            slash_order: str = "MDY") -> List[dict]:
    """Employee insert payloads (with a nested SELF member) for valid rows."""
    commands = []
    for result in rows:
        if not result.is_valid:
            continue
        row = result.data
        dob = normalize_date_string(row.date_of_birth, slash_order)
        date_of_birth = date.fromisoformat(dob) if dob else None
        gender = normalize_gender(row.gender)
        commands.append({
            "employee_code": row.employee_code,
            "first_name": row.first_name,
            "last_name": row.last_name,
            "email": row.email,
            "phone": row.phone,
            "date_of_birth": date_of_birth,
            "gender": gender,
            "department": row.department,
            "designation": row.designation,
            "policy_id": policy_id,
            "self_member": {
                "first_name": row.first_name,
                "last_name": row.last_name,
                "date_of_birth": date_of_birth,
                "gender": gender,
                "relationship": Relationship.SELF.value,
            },
        })
    return commands


def generate_template() -> str:
    header = ",".join(label for _, label, _ in TEMPLATE_COLUMNS)
    example = ",".join(value for _, _, value in TEMPLATE_COLUMNS)
    return f"{header}\n{example}"
