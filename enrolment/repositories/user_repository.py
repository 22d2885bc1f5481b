# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for login accounts."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from enrolment.core.database import users


def _row_to_dict(row) -> Dict[str, Any]:
    return dict(row._mapping)


class UserRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create(self, username: str, password_hash: str, first_name: str,
               last_name: str, email: str, role: str) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        with self._engine.begin() as conn:
            user_id = conn.execute(
                insert(users).values(
                    username=username, password=password_hash,
                    first_name=first_name, last_name=last_name, email=email,
                    role=role, created_at=now, updated_at=now,
                )
            ).inserted_primary_key[0]
            row = conn.execute(select(users).where(users.c.id == user_id)).fetchone()
        return _row_to_dict(row)

    def get(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(select(users).where(users.c.id == user_id)).fetchone()
        return _row_to_dict(row) if row else None

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(select(users).where(users.c.username == username)).fetchone()
        return _row_to_dict(row) if row else None
