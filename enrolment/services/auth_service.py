# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Authentication service — credential check, token issue, profile lookup."""
from typing import Any, Dict

from enrolment.core.errors import NotFound, Unauthenticated
from enrolment.core.logging import get_logger
from enrolment.core.security import create_access_token, verify_password
from enrolment.metrics import LOGIN_ATTEMPTS
from enrolment.models.domain import Identity
from enrolment.repositories import EmployeeRepository, PolicyRepository, UserRepository

logger = get_logger(__name__)

_PUBLIC_USER_FIELDS = ("id", "username", "first_name", "last_name", "email",
                       "role", "created_at", "updated_at")


def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: user[k] for k in _PUBLIC_USER_FIELDS}


class AuthService:
    def __init__(self, user_repo: UserRepository, employee_repo: EmployeeRepository,
                 policy_repo: PolicyRepository):
        self._users = user_repo
        self._employees = employee_repo
        self._policies = policy_repo

    def login(self, username: str, password: str) -> Dict[str, Any]:
        user = self._users.get_by_username(username)
        # one message for unknown user and bad password
        if user is None or not verify_password(password, user["password"]):
            LOGIN_ATTEMPTS.labels(outcome="rejected").inc()
            logger.info("Login rejected username=%s", username)
            raise Unauthenticated("Invalid username or password")

        token = create_access_token(user["id"], user["username"], user["role"])
        LOGIN_ATTEMPTS.labels(outcome="accepted").inc()
        logger.info("User logged in id=%s username=%s", user["id"], user["username"])
        return {"token": token, "user": _public_user(user)}

    def logout(self, identity: Identity) -> Dict[str, Any]:
        logger.info("User logged out id=%s username=%s", identity.id, identity.username)
        return {"success": True}

    def me(self, identity: Identity) -> Dict[str, Any]:
        user = self._users.get(identity.id)
        if user is None:
            raise NotFound("User account not found")
        profile = _public_user(user)
        employee = self._employees.get_by_user(identity.id)
        profile["employee"] = None
        if employee:
            profile["employee"] = {
                "id": employee["id"],
                "employee_code": employee["employee_code"],
                "department": employee["department"],
                "designation": employee["designation"],
                "policy_id": employee["policy_id"],
                "policy": self._policies.get(employee["policy_id"]),
            }
        return profile
