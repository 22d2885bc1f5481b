# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine factory and table definitions."""
from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Index, Integer, MetaData, String, Table,
    UniqueConstraint, create_engine, event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from enrolment.core.config import settings

metadata = MetaData()

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(150), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

policies = Table(
    "policies", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("policy_number", String(50), nullable=False, unique=True),
    Column("policy_name", String(255), nullable=False),
    Column("company_name", String(255), nullable=False),
    Column("hr_manager_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

employees = Table(
    "employees", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("employee_code", String(50), nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(50)),
    Column("date_of_birth", Date),
    Column("gender", String(10)),
    Column("department", String(100)),
    Column("designation", String(100)),
    Column("policy_id", Integer, ForeignKey("policies.id"), nullable=False, index=True),
    Column("user_id", Integer, ForeignKey("users.id"), unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("policy_id", "employee_code", name="uq_employees_policy_code"),
)

members = Table(
    "members", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("date_of_birth", Date),
    Column("gender", String(10)),
    Column("relationship", String(10), nullable=False),
    Column("employee_id", Integer, ForeignKey("employees.id", ondelete="CASCADE"),
           nullable=False, index=True),
    Column("created_by_id", Integer, ForeignKey("users.id")),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

# at most one SELF and one SPOUSE per employee
Index(
    "uq_members_single_relationship",
    members.c.employee_id, members.c.relationship,
    unique=True,
    sqlite_where=members.c.relationship.in_(["SELF", "SPOUSE"]),
    postgresql_where=members.c.relationship.in_(["SELF", "SPOUSE"]),
)


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str = None) -> Engine:
    """Build the engine for ``url``; called once at process start."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


def create_schema(engine: Engine) -> None:
    metadata.create_all(engine)
