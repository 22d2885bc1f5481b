# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared fixtures: a seeded in-memory store and per-role auth headers."""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "enrolment-test-suite-signing-key-0123456789"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["IMPORT_SLASH_DATE_ORDER"] = "MDY"

import pytest
from fastapi.testclient import TestClient

from enrolment import seed
from enrolment.core import dependencies
from enrolment.core.database import create_db_engine, create_schema
from enrolment.core.security import create_access_token, hash_password
from enrolment.repositories import EmployeeRepository, PolicyRepository, UserRepository
from main import app


def _fast_hash(password: str) -> str:
    return hash_password(password, rounds=4)


@pytest.fixture
def engine(monkeypatch):
    monkeypatch.setattr(seed, "hash_password", _fast_hash)
    eng = create_db_engine("sqlite://")
    create_schema(eng)
    seed.seed_demo_data(eng)
    dependencies.init_store(eng)
    yield eng
    dependencies.close_store()


@pytest.fixture
def client(engine):
    # one client per test; login sets a cookie
    return TestClient(app)


@pytest.fixture
def users(engine):
    repo = UserRepository(engine)
    return {name: repo.get_by_username(name) for name in ("hr_admin", "john.doe", "jane.smith")}


@pytest.fixture
def demo(engine):
    """Ids of the seeded policy and employees, keyed by employee code."""
    employees = EmployeeRepository(engine)
    policy_id = PolicyRepository(engine).get_by_number(seed.DEMO_POLICY_NUMBER)["id"]
    return {
        "policy_id": policy_id,
        **{code: employees.get_by_code(policy_id, code)["id"]
           for code in ("EMP001", "EMP002", "EMP003")},
    }


def _auth(user) -> dict:
    token = create_access_token(user["id"], user["username"], user["role"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def hr_headers(users):
    return _auth(users["hr_admin"])


@pytest.fixture
def john_headers(users):
    return _auth(users["john.doe"])


@pytest.fixture
def jane_headers(users):
    return _auth(users["jane.smith"])
