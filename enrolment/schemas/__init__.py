# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from enrolment.core.errors import ValidationFailed
from enrolment.models.domain import EMAIL_PATTERN, Gender, Relationship, Role

_EMAIL_RE = re.compile(EMAIL_PATTERN)


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is not None:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError("Invalid email format")
    return v


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PatchModel(BaseModel):
    """Partial update body.

    A field left out of the request is left unchanged; an explicit ``null``
    clears it. Fields named in ``required`` may not be cleared.
    """

    def changes(self, required: tuple = ()) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for name in sorted(self.model_fields_set):
            value = getattr(self, name)
            if value is None and name in required:
                raise ValidationFailed(f"Field '{name}' cannot be cleared")
            values[name] = value.value if isinstance(value, (Gender, Relationship)) else value
        return values


# ── Auth ──────────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    token: str
    user: UserOut


class CurrentUser(UserOut):
    employee: Optional[Dict[str, Any]] = None


# ── Policies ──────────────────────────────────────────────────────────────

class PolicyOut(BaseModel):
    id: int
    policy_number: str
    policy_name: str
    company_name: str
    hr_manager_id: int
    created_at: datetime
    updated_at: datetime
    employee_count: Optional[int] = None
    member_count: Optional[int] = None


class DepartmentCount(BaseModel):
    department: str
    count: int


class PolicyDetail(PolicyOut):
    hr_manager: Optional[Dict[str, Any]] = None
    department_breakdown: List[DepartmentCount] = []


class RelationshipCount(BaseModel):
    relationship: Relationship
    count: int


class PolicyStats(BaseModel):
    policy_id: int
    policy_name: str
    company_name: str
    employee_count: int
    member_count: int
    members_by_relationship: List[RelationshipCount]
    recent_additions: Dict[str, Any]


# ── Members ───────────────────────────────────────────────────────────────

class MemberCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    relationship: Relationship
    employee_id: int

    @field_validator("date_of_birth", "gender", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class MemberUpdate(PatchModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    relationship: Optional[Relationship] = None

    @field_validator("date_of_birth", "gender", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class MemberOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    relationship: Relationship
    employee_id: int
    created_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# ── Employees ─────────────────────────────────────────────────────────────

class EmployeeCreate(BaseModel):
    employee_code: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    policy_id: int

    @field_validator("employee_code", "first_name", "last_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("date_of_birth", "gender", "phone", "department", "designation", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class EmployeeUpdate(PatchModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v)

    @field_validator("date_of_birth", "gender", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class EmployeeOut(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    policy_id: int
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    member_count: Optional[int] = None


class EmployeeDetail(EmployeeOut):
    members: List[MemberOut] = []
    policy: Optional[PolicyOut] = None


class PaginatedEmployees(BaseModel):
    data: List[EmployeeOut]
    total: int
    page: int
    page_size: int
    total_pages: int


class EmployeeDeleted(BaseModel):
    success: bool
    deleted_members_count: int


# ── Bulk import ───────────────────────────────────────────────────────────

class BulkImportRequest(BaseModel):
    csv_content: str
    policy_id: int


class EmployeeRow(BaseModel):
    """One data row of an import file, values as supplied (trimmed)."""
    employee_code: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None


class RowResult(BaseModel):
    row_number: int
    data: EmployeeRow
    is_valid: bool
    errors: List[str] = []


class BulkImportResult(BaseModel):
    success: bool
    committed: bool
    total_rows: int
    success_count: int
    failed_count: int
    errors: List[RowResult]
    message: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
