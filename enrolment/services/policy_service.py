# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for insurance policy views and statistics."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from enrolment.core.errors import Forbidden, NotFound
from enrolment.models.domain import Identity
from enrolment.repositories import EmployeeRepository, PolicyRepository, UserRepository
from enrolment.services.access import is_manager, require_manager

RECENT_WINDOW_DAYS = 30


class PolicyService:
    def __init__(self, policy_repo: PolicyRepository, employee_repo: EmployeeRepository,
                 user_repo: UserRepository):
        self._policies = policy_repo
        self._employees = employee_repo
        self._users = user_repo

    def list_policies(self, identity: Identity) -> List[Dict[str, Any]]:
        require_manager(identity)
        return self._policies.list_by_manager(identity.id)

    def get_policy(self, identity: Identity, policy_id: int) -> Dict[str, Any]:
        policy = self._policies.get(policy_id)
        if policy is None:
            raise NotFound("Insurance policy not found")
        if not is_manager(identity):
            employee = self._employees.get_by_user(identity.id)
            if employee is None or employee["policy_id"] != policy_id:
                raise Forbidden("You can only view your own policy")

        manager = self._users.get(policy["hr_manager_id"])
        return {
            **policy,
            "hr_manager": {
                "id": manager["id"],
                "first_name": manager["first_name"],
                "last_name": manager["last_name"],
                "email": manager["email"],
            } if manager else None,
            "department_breakdown": self._policies.department_breakdown(policy_id),
        }

    def get_current(self, identity: Identity) -> Dict[str, Any]:
        employee = self._employees.get_by_user(identity.id)
        if employee is None:
            raise NotFound("No employee record found for your account")
        policy = self._policies.get(employee["policy_id"])
        if policy is None:
            raise NotFound("No policy found for your employee record")
        return policy

    def stats(self, identity: Identity, policy_id: int) -> Dict[str, Any]:
        require_manager(identity)
        policy = self._policies.get(policy_id)
        if policy is None:
            raise NotFound("Policy not found")
        since = datetime.now(timezone.utc) - timedelta(days=RECENT_WINDOW_DAYS)
        recent = self._policies.count_recent(policy_id, since)
        return {
            "policy_id": policy_id,
            "policy_name": policy["policy_name"],
            "company_name": policy["company_name"],
            "employee_count": policy["employee_count"],
            "member_count": policy["member_count"],
            "members_by_relationship": self._policies.members_by_relationship(policy_id),
            "recent_additions": {**recent, "period": f"{RECENT_WINDOW_DAYS} days"},
        }
