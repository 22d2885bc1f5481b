# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for members (dependents)."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import case, delete, insert, select, update
from sqlalchemy.engine import Engine

from enrolment.core.database import members
from enrolment.models.domain import RELATIONSHIP_ORDER


def _row_to_dict(row) -> Dict[str, Any]:
    return dict(row._mapping)


def _relationship_rank():
    return case(RELATIONSHIP_ORDER, value=members.c.relationship, else_=len(RELATIONSHIP_ORDER))


class MemberRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        with self._engine.begin() as conn:
            member_id = conn.execute(
                insert(members).values(**data, created_at=now, updated_at=now)
            ).inserted_primary_key[0]
            row = conn.execute(select(members).where(members.c.id == member_id)).fetchone()
        return _row_to_dict(row)

    def update(self, member_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        with self._engine.begin() as conn:
            conn.execute(
                update(members).where(members.c.id == member_id)
                .values(**changes, updated_at=datetime.now(timezone.utc))
            )
            row = conn.execute(select(members).where(members.c.id == member_id)).fetchone()
        if row is None:
            raise KeyError(f"Member {member_id} not found")
        return _row_to_dict(row)

    def delete(self, member_id: int) -> bool:
        with self._engine.begin() as conn:
            return conn.execute(delete(members).where(members.c.id == member_id)).rowcount > 0

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, member_id: int) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(select(members).where(members.c.id == member_id)).fetchone()
        return _row_to_dict(row) if row else None

    def list_by_employee(self, employee_id: int, by_name: bool = True) -> List[Dict[str, Any]]:
        """Members ordered SELF, SPOUSE, CHILD, PARENT, then by name or age of record."""
        secondary = members.c.first_name if by_name else members.c.created_at
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(members)
                .where(members.c.employee_id == employee_id)
                .order_by(_relationship_rank(), secondary, members.c.id)
            ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def relationships_for(self, employee_id: int) -> List[str]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(members.c.relationship).where(members.c.employee_id == employee_id)
            ).fetchall()
        return [r[0] for r in rows]
