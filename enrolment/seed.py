# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Idempotent demo data: one HR manager, one policy, three employees."""
from datetime import date
from typing import Any, Dict

from sqlalchemy.engine import Engine

from enrolment.core.logging import get_logger
from enrolment.core.security import hash_password
from enrolment.models.domain import Relationship, Role
from enrolment.repositories import (
    EmployeeRepository, MemberRepository, PolicyRepository, UserRepository,
)

logger = get_logger(__name__)

DEMO_PASSWORD = "password123"
DEMO_POLICY_NUMBER = "POL-2024-001"

DEMO_EMPLOYEES = (
    {
        "username": "john.doe",
        "employee": {
            "employee_code": "EMP001", "first_name": "John", "last_name": "Doe",
            "email": "john.doe@techcorp.com", "phone": "+91 98765 43210",
            "date_of_birth": date(1990, 5, 15), "gender": "Male",
            "department": "Engineering", "designation": "Senior Software Engineer",
        },
        "dependents": (
            {"first_name": "Sarah", "last_name": "Doe", "date_of_birth": date(1992, 8, 20),
             "gender": "Female", "relationship": Relationship.SPOUSE.value},
            {"first_name": "Emma", "last_name": "Doe", "date_of_birth": date(2018, 3, 10),
             "gender": "Female", "relationship": Relationship.CHILD.value},
        ),
    },
    {
        "username": "jane.smith",
        "employee": {
            "employee_code": "EMP002", "first_name": "Jane", "last_name": "Smith",
            "email": "jane.smith@techcorp.com", "phone": "+91 98765 43211",
            "date_of_birth": date(1988, 11, 22), "gender": "Female",
            "department": "Product", "designation": "Product Manager",
        },
        "dependents": (
            {"first_name": "Robert", "last_name": "Smith", "date_of_birth": date(1958, 1, 5),
             "gender": "Male", "relationship": Relationship.PARENT.value},
        ),
    },
    {
        "username": None,
        "employee": {
            "employee_code": "EMP003", "first_name": "Mike", "last_name": "Johnson",
            "email": "mike.johnson@techcorp.com", "phone": None,
            "date_of_birth": date(1995, 2, 14), "gender": "Male",
            "department": "Engineering", "designation": "Software Engineer",
        },
        "dependents": (),
    },
)


def _ensure_user(users: UserRepository, username: str, first_name: str, last_name: str,
                 email: str, role: Role) -> Dict[str, Any]:
    user = users.get_by_username(username)
    if user is None:
        user = users.create(username, hash_password(DEMO_PASSWORD), first_name,
                            last_name, email, role.value)
        logger.info("Seeded user %s (%s)", username, role.value)
    return user


def seed_demo_data(engine: Engine) -> Dict[str, Any]:
    users = UserRepository(engine)
    policies = PolicyRepository(engine)
    employees = EmployeeRepository(engine)
    members = MemberRepository(engine)

    manager = _ensure_user(users, "hr_admin", "Admin", "HR Manager",
                           "hr@prishapolicy.com", Role.HR_MANAGER)
    policy = policies.get_by_number(DEMO_POLICY_NUMBER)
    if policy is None:
        policy = policies.create(DEMO_POLICY_NUMBER, "Group Health Insurance - Premium",
                                 "TechCorp Solutions Pvt. Ltd.", manager["id"])
        logger.info("Seeded policy %s", DEMO_POLICY_NUMBER)

    for entry in DEMO_EMPLOYEES:
        data = entry["employee"]
        if employees.get_by_code(policy["id"], data["employee_code"]):
            continue
        user_id = None
        if entry["username"]:
            user_id = _ensure_user(users, entry["username"], data["first_name"],
                                   data["last_name"], data["email"], Role.EMPLOYEE)["id"]
        employee = employees.create_with_self(
            {**data, "policy_id": policy["id"], "user_id": user_id},
            {
                "first_name": data["first_name"], "last_name": data["last_name"],
                "date_of_birth": data["date_of_birth"], "gender": data["gender"],
                "relationship": Relationship.SELF.value,
            },
            manager["id"],
        )
        for dependent in entry["dependents"]:
            members.create({**dependent, "employee_id": employee["id"],
                            "created_by_id": user_id or manager["id"]})
        logger.info("Seeded employee %s", data["employee_code"])

    return {"manager": manager, "policy": policy}


if __name__ == "__main__":
    from enrolment.core.database import create_db_engine, create_schema

    _engine = create_db_engine()
    create_schema(_engine)
    seed_demo_data(_engine)
    _engine.dispose()
