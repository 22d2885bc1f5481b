# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for insurance policies and their aggregate counts."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.engine import Engine

from enrolment.core.database import employees, members, policies


def _row_to_dict(row) -> Dict[str, Any]:
    return dict(row._mapping)


def _employee_count_column():
    return (
        select(func.count(employees.c.id))
        .where(employees.c.policy_id == policies.c.id)
        .scalar_subquery()
        .label("employee_count")
    )


def _member_count_column():
    return (
        select(func.count(members.c.id))
        .select_from(members.join(employees, members.c.employee_id == employees.c.id))
        .where(employees.c.policy_id == policies.c.id)
        .scalar_subquery()
        .label("member_count")
    )


class PolicyRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create(self, policy_number: str, policy_name: str, company_name: str,
               hr_manager_id: int) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        with self._engine.begin() as conn:
            policy_id = conn.execute(
                insert(policies).values(
                    policy_number=policy_number, policy_name=policy_name,
                    company_name=company_name, hr_manager_id=hr_manager_id,
                    created_at=now, updated_at=now,
                )
            ).inserted_primary_key[0]
            row = conn.execute(select(policies).where(policies.c.id == policy_id)).fetchone()
        return _row_to_dict(row)

    def get(self, policy_id: int) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(policies, _employee_count_column(), _member_count_column())
                .where(policies.c.id == policy_id)
            ).fetchone()
        return _row_to_dict(row) if row else None

    def get_by_number(self, policy_number: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(policies).where(policies.c.policy_number == policy_number)
            ).fetchone()
        return _row_to_dict(row) if row else None

    def exists(self, policy_id: int) -> bool:
        with self._engine.connect() as conn:
            return conn.execute(
                select(policies.c.id).where(policies.c.id == policy_id)
            ).fetchone() is not None

    def list_by_manager(self, hr_manager_id: int) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(policies, _employee_count_column(), _member_count_column())
                .where(policies.c.hr_manager_id == hr_manager_id)
                .order_by(policies.c.created_at.desc(), policies.c.id.desc())
            ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def department_breakdown(self, policy_id: int) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(employees.c.department, func.count(employees.c.id))
                .where(employees.c.policy_id == policy_id)
                .where(employees.c.department.is_not(None))
                .group_by(employees.c.department)
                .order_by(employees.c.department)
            ).fetchall()
        return [{"department": r[0], "count": r[1]} for r in rows]

    def members_by_relationship(self, policy_id: int) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(members.c.relationship, func.count(members.c.id))
                .select_from(members.join(employees, members.c.employee_id == employees.c.id))
                .where(employees.c.policy_id == policy_id)
                .group_by(members.c.relationship)
            ).fetchall()
        return [{"relationship": r[0], "count": r[1]} for r in rows]

    def count_recent(self, policy_id: int, since: datetime) -> Dict[str, int]:
        """Employees and members added to the policy at or after ``since``."""
        with self._engine.connect() as conn:
            new_employees = conn.execute(
                select(func.count(employees.c.id))
                .where(employees.c.policy_id == policy_id)
                .where(employees.c.created_at >= since)
            ).scalar() or 0
            new_members = conn.execute(
                select(func.count(members.c.id))
                .select_from(members.join(employees, members.c.employee_id == employees.c.id))
                .where(employees.c.policy_id == policy_id)
                .where(members.c.created_at >= since)
            ).scalar() or 0
        return {"employees": new_employees, "members": new_members}
