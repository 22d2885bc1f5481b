# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — store lifecycle, services, caller identity.

The engine is created in the app lifespan, handed to ``init_store`` and
released by ``close_store`` on shutdown.
"""
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine

from enrolment.core.config import settings
from enrolment.core.errors import Unauthenticated
from enrolment.core.security import decode_access_token, extract_bearer_token
from enrolment.models.domain import Identity
from enrolment.repositories import (
    EmployeeRepository, MemberRepository, PolicyRepository, UserRepository,
)
from enrolment.services.auth_service import AuthService
from enrolment.services.employee_service import EmployeeService
from enrolment.services.member_service import MemberService
from enrolment.services.policy_service import PolicyService

_engine: Optional[Engine] = None
_employee_repo: Optional[EmployeeRepository] = None
_auth_service: Optional[AuthService] = None
_employee_service: Optional[EmployeeService] = None
_member_service: Optional[MemberService] = None
_policy_service: Optional[PolicyService] = None


def init_store(engine: Engine):
    global _engine, _employee_repo, _auth_service, _employee_service
    global _member_service, _policy_service
    _engine = engine
    user_repo = UserRepository(engine)
    policy_repo = PolicyRepository(engine)
    member_repo = MemberRepository(engine)
    _employee_repo = EmployeeRepository(engine)

    _auth_service = AuthService(user_repo, _employee_repo, policy_repo)
    _employee_service = EmployeeService(_employee_repo, member_repo, policy_repo)
    _member_service = MemberService(member_repo, _employee_repo)
    _policy_service = PolicyService(policy_repo, _employee_repo, user_repo)


def close_store():
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


# ── FastAPI dependency functions ──
def get_employee_repo() -> EmployeeRepository:
    assert _employee_repo is not None, "store not initialised"
    return _employee_repo


def get_auth_service() -> AuthService:
    assert _auth_service is not None, "store not initialised"
    return _auth_service


def get_employee_service() -> EmployeeService:
    assert _employee_service is not None, "store not initialised"
    return _employee_service


def get_member_service() -> MemberService:
    assert _member_service is not None, "store not initialised"
    return _member_service


def get_policy_service() -> PolicyService:
    assert _policy_service is not None, "store not initialised"
    return _policy_service


def get_current_identity(request: Request) -> Identity:
    """Resolve the caller from the ``token`` cookie or a Bearer header."""
    token = request.cookies.get(settings.TOKEN_COOKIE_NAME)
    if not token:
        token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise Unauthenticated("You must be logged in to perform this action")
    identity = decode_access_token(token)
    request.state.identity = identity
    return identity
