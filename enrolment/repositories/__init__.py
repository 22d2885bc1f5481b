# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package — re-exports the store repositories."""
from enrolment.repositories.employee_repository import EmployeeRepository
from enrolment.repositories.member_repository import MemberRepository
from enrolment.repositories.policy_repository import PolicyRepository
from enrolment.repositories.user_repository import UserRepository

__all__ = ["EmployeeRepository", "MemberRepository", "PolicyRepository", "UserRepository"]
