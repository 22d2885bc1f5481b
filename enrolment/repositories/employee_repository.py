# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for employees and their SELF member."""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import delete, func, insert, or_, select, text, update
from sqlalchemy.engine import Connection, Engine

from enrolment.core.database import employees, members
from enrolment.core.logging import get_logger
from enrolment.models.domain import Relationship

logger = get_logger(__name__)

# columns the SELF member mirrors from its employee
SELF_MIRRORED_FIELDS = ("first_name", "last_name", "date_of_birth", "gender")


def _row_to_dict(row) -> Dict[str, Any]:
    return dict(row._mapping)


def _member_count_column():
    return (
        select(func.count(members.c.id))
        .where(members.c.employee_id == employees.c.id)
        .scalar_subquery()
        .label("member_count")
    )


class EmployeeRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def create_with_self(self, data: Dict[str, Any], self_member: Dict[str, Any],
                         created_by_id: Optional[int]) -> Dict[str, Any]:
        """Insert an employee and its SELF member atomically."""
        with self._engine.begin() as conn:
            employee_id = self._insert_with_self(conn, data, self_member, created_by_id)
            row = conn.execute(select(employees).where(employees.c.id == employee_id)).fetchone()
        return _row_to_dict(row)

    def create_many_with_self(self, commands: List[Dict[str, Any]],
                              created_by_id: Optional[int]) -> int:
        """Insert every command inside one transaction; all or nothing."""
        with self._engine.begin() as conn:
            for command in commands:
                data = {k: v for k, v in command.items() if k != "self_member"}
                self._insert_with_self(conn, data, command["self_member"], created_by_id)
        logger.debug("Inserted %d employees in one transaction", len(commands))
        return len(commands)

    def update(self, employee_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        mirrored = {k: v for k, v in changes.items() if k in SELF_MIRRORED_FIELDS}
        with self._engine.begin() as conn:
            conn.execute(
                update(employees).where(employees.c.id == employee_id)
                .values(**changes, updated_at=now)
            )
            if mirrored:
                conn.execute(
                    update(members)
                    .where(members.c.employee_id == employee_id)
                    .where(members.c.relationship == Relationship.SELF.value)
                    .values(**mirrored, updated_at=now)
                )
            row = conn.execute(select(employees).where(employees.c.id == employee_id)).fetchone()
        if row is None:
            raise KeyError(f"Employee {employee_id} not found")
        return _row_to_dict(row)

    def delete(self, employee_id: int) -> int:
        """Delete the employee and exactly its members; returns members removed."""
        with self._engine.begin() as conn:
            removed = conn.execute(
                delete(members).where(members.c.employee_id == employee_id)
            ).rowcount
            deleted = conn.execute(
                delete(employees).where(employees.c.id == employee_id)
            ).rowcount
            if not deleted:
                raise KeyError(f"Employee {employee_id} not found")
        return removed

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, employee_id: int) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(employees, _member_count_column()).where(employees.c.id == employee_id)
            ).fetchone()
        return _row_to_dict(row) if row else None

    def get_by_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(employees).where(employees.c.user_id == user_id)
            ).fetchone()
        return _row_to_dict(row) if row else None

    def get_by_code(self, policy_id: int, employee_code: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(employees)
                .where(employees.c.policy_id == policy_id)
                .where(employees.c.employee_code == employee_code)
            ).fetchone()
        return _row_to_dict(row) if row else None

    def find_existing_codes(self, policy_id: int, codes: Iterable[str]) -> Set[str]:
        """Subset of ``codes`` already used inside ``policy_id`` (one query)."""
        codes = list(set(codes))
        if not codes:
            return set()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(employees.c.employee_code)
                .where(employees.c.policy_id == policy_id)
                .where(employees.c.employee_code.in_(codes))
            ).fetchall()
        return {r[0] for r in rows}

    def list_employees(self, search: Optional[str] = None, department: Optional[str] = None,
                       policy_id: Optional[int] = None, page: int = 1,
                       page_size: int = 10) -> Tuple[int, List[Dict[str, Any]]]:
        conditions = []
        if search:
            conditions.append(or_(
                employees.c.first_name.icontains(search, autoescape=True),
                employees.c.last_name.icontains(search, autoescape=True),
                employees.c.email.icontains(search, autoescape=True),
                employees.c.employee_code.icontains(search, autoescape=True),
            ))
        if department:
            conditions.append(employees.c.department == department)
        if policy_id:
            conditions.append(employees.c.policy_id == policy_id)

        with self._engine.connect() as conn:
            total = conn.execute(
                select(func.count()).select_from(employees).where(*conditions)
            ).scalar() or 0
            rows = conn.execute(
                select(employees, _member_count_column())
                .where(*conditions)
                .order_by(employees.c.created_at.desc(), employees.c.id.desc())
                .limit(page_size)
                .offset((page - 1) * page_size)
            ).fetchall()
        return total, [_row_to_dict(r) for r in rows]

    def departments(self) -> List[str]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(employees.c.department)
                .where(employees.c.department.is_not(None))
                .distinct()
                .order_by(employees.c.department)
            ).fetchall()
        return [r[0] for r in rows]

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    # ── Private ────────────────────────────────────────────────────────

    def _insert_with_self(self, conn: Connection, data: Dict[str, Any],
                          self_member: Dict[str, Any], created_by_id: Optional[int]) -> int:
        now = datetime.now(timezone.utc)
        employee_id = conn.execute(
            insert(employees).values(**data, created_at=now, updated_at=now)
        ).inserted_primary_key[0]
        conn.execute(
            insert(members).values(
                **self_member, employee_id=employee_id, created_by_id=created_by_id,
                created_at=now, updated_at=now,
            )
        )
        return employee_id
