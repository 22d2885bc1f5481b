# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for employee enrolment, including bulk CSV import."""
import math
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from enrolment.core.config import settings
from enrolment.core.errors import Conflict, EmptyPayload, NotFound, ValidationFailed
from enrolment.core.logging import get_logger
from enrolment.metrics import (
    BULK_IMPORT_BATCHES, BULK_IMPORT_ROWS, EMPLOYEES_CREATED, EMPLOYEES_DELETED,
)
from enrolment.models.domain import Identity, Relationship
from enrolment.repositories import (
    EmployeeRepository, MemberRepository, PolicyRepository,
)
from enrolment.schemas import EmployeeCreate, EmployeeUpdate, RowResult
from enrolment.services import csv_import
from enrolment.services.access import require_access, require_manager

logger = get_logger(__name__)

EMPTY_PAYLOAD_MESSAGE = "The uploaded file is empty or has no valid data"
ROLLBACK_ROW_MESSAGE = "Row {n}: Not imported, the batch could not be saved"
REQUIRED_EMPLOYEE_FIELDS = ("first_name", "last_name", "email")


class EmployeeService:
    def __init__(self, employee_repo: EmployeeRepository, member_repo: MemberRepository,
                 policy_repo: PolicyRepository, slash_date_order: str = None,
                 import_max_bytes: int = None):
        self._employees = employee_repo
        self._members = member_repo
        self._policies = policy_repo
        self._slash_order = slash_date_order or settings.IMPORT_SLASH_DATE_ORDER
        if self._slash_order not in csv_import.SLASH_DATE_ORDERS:
            raise ValueError(
                f"IMPORT_SLASH_DATE_ORDER must be one of {csv_import.SLASH_DATE_ORDERS}, "
                f"got {self._slash_order!r}"
            )
        self._import_max_bytes = import_max_bytes or settings.IMPORT_MAX_BYTES

    # ── Queries ──

    def list_employees(self, identity: Identity, search: Optional[str] = None,
                       department: Optional[str] = None, policy_id: Optional[int] = None,
                       page: int = 1, page_size: int = 10) -> Dict[str, Any]:
        require_manager(identity)
        total, rows = self._employees.list_employees(search, department, policy_id,
                                                     page, page_size)
        return {
            "data": rows,
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size) if total else 0,
        }

    def get_employee(self, identity: Identity, employee_id: int) -> Dict[str, Any]:
        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFound("Employee not found")
        require_access(identity, employee["user_id"], "You can only view your own profile")
        return self._with_children(employee)

    def get_current(self, identity: Identity) -> Dict[str, Any]:
        employee = self._employees.get_by_user(identity.id)
        if employee is None:
            raise NotFound("No employee record found for your account")
        return self._with_children(employee)

    def departments(self) -> List[str]:
        return self._employees.departments()

    # ── Commands ──

    def create_employee(self, identity: Identity, body: EmployeeCreate) -> Dict[str, Any]:
        require_manager(identity)
        if not self._policies.exists(body.policy_id):
            raise NotFound("Insurance policy not found")
        if self._employees.get_by_code(body.policy_id, body.employee_code):
            raise Conflict(f"Employee code '{body.employee_code}' already exists in this policy")

        data = body.model_dump(mode="python")
        if body.gender is not None:
            data["gender"] = body.gender.value
        self_member = {
            "first_name": data["first_name"],
            "last_name": data["last_name"],
            "date_of_birth": data["date_of_birth"],
            "gender": data["gender"],
            "relationship": Relationship.SELF.value,
        }
        try:
            employee = self._employees.create_with_self(data, self_member, identity.id)
        except IntegrityError:
            raise Conflict(f"Employee code '{body.employee_code}' already exists in this policy")

        EMPLOYEES_CREATED.labels(source="single").inc()
        logger.info("Employee created id=%s code=%s policy=%s by=%s",
                    employee["id"], employee["employee_code"], body.policy_id, identity.id)
        return self._with_children(employee)

    def update_employee(self, identity: Identity, employee_id: int,
                        patch: EmployeeUpdate) -> Dict[str, Any]:
        require_manager(identity)
        if self._employees.get(employee_id) is None:
            raise NotFound("Employee not found")
        changes = patch.changes(required=REQUIRED_EMPLOYEE_FIELDS)
        employee = self._employees.update(employee_id, changes)
        logger.info("Employee updated id=%s fields=%s by=%s",
                    employee_id, sorted(changes), identity.id)
        return self._with_children(employee)

    def delete_employee(self, identity: Identity, employee_id: int) -> Dict[str, Any]:
        require_manager(identity)
        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFound("Employee not found")
        removed = self._employees.delete(employee_id)
        EMPLOYEES_DELETED.inc()
        logger.info("Employee deleted id=%s code=%s members_removed=%d by=%s",
                    employee_id, employee["employee_code"], removed, identity.id)
        return {"success": True, "deleted_members_count": removed}

    # ── Bulk import ──

    def bulk_create(self, identity: Identity, csv_content: str, policy_id: int) -> Dict[str, Any]:
        """Validate every row, drop duplicates, insert survivors in one transaction."""
        require_manager(identity)
        if not self._policies.exists(policy_id):
            raise NotFound("Insurance policy not found")
        if len(csv_content.encode("utf-8")) > self._import_max_bytes:
            raise ValidationFailed(
                f"The uploaded file exceeds the {self._import_max_bytes} byte limit"
            )

        results = csv_import.parse_employee_csv(csv_content, self._slash_order)
        if not results:
            BULK_IMPORT_BATCHES.labels(result="empty").inc()
            raise EmptyPayload(EMPTY_PAYLOAD_MESSAGE)

        valid = [r for r in results if r.is_valid]
        invalid = [r for r in results if not r.is_valid]

        existing = self._employees.find_existing_codes(
            policy_id, [r.data.employee_code for r in valid]
        )
        survivors: List[RowResult] = []
        seen_codes = set()
        for result in valid:
            code = result.data.employee_code
            if code in existing:
                invalid.append(self._reject(result, f"Employee code '{code}' already exists"))
            elif code in seen_codes:
                invalid.append(self._reject(
                    result, f"Row {result.row_number}: Duplicate employee code '{code}' in file"
                ))
            else:
                seen_codes.add(code)
                survivors.append(result)

        committed = True
        success_count = 0
        message = ""
        if survivors:
            commands = csv_import.rows_to_create_commands(survivors, policy_id, self._slash_order)
            try:
                success_count = self._employees.create_many_with_self(commands, identity.id)
            except SQLAlchemyError:
                logger.exception("Bulk import rolled back policy=%s rows=%d",
                                 policy_id, len(commands))
                committed = False
                invalid.extend(
                    self._reject(r, ROLLBACK_ROW_MESSAGE.format(n=r.row_number))
                    for r in survivors
                )
                message = "The batch could not be saved; no employees were imported"

        invalid.sort(key=lambda r: r.row_number)
        if committed:
            message = f"{success_count} of {len(results)} rows imported"

        BULK_IMPORT_ROWS.labels(outcome="imported").inc(success_count)
        BULK_IMPORT_ROWS.labels(outcome="rejected").inc(len(invalid))
        BULK_IMPORT_BATCHES.labels(
            result="complete" if not invalid else ("partial" if success_count else "failed")
        ).inc()
        if success_count:
            EMPLOYEES_CREATED.labels(source="bulk").inc(success_count)
        logger.info("Bulk import policy=%s by=%s created=%d failed=%d committed=%s",
                    policy_id, identity.id, success_count, len(invalid), committed)
        return {
            "success": not invalid,
            "committed": committed,
            "total_rows": len(results),
            "success_count": success_count,
            "failed_count": len(invalid),
            "errors": invalid,
            "message": message,
        }

    def bulk_template(self, identity: Identity) -> str:
        require_manager(identity)
        return csv_import.generate_template()

    # ── Private ──

    @staticmethod
    def _reject(result: RowResult, error: str) -> RowResult:
        return result.model_copy(update={"is_valid": False, "errors": [*result.errors, error]})

    def _with_children(self, employee: Dict[str, Any]) -> Dict[str, Any]:
        members = self._members.list_by_employee(employee["id"], by_name=False)
        return {
            **employee,
            "member_count": len(members),
            "members": members,
            "policy": self._policies.get(employee["policy_id"]),
        }
