# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: dependents of an employee.

Keeps the per-employee invariants: exactly one SELF member, at most one
SPOUSE, and the SELF member only disappears together with its employee.
"""
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError

from enrolment.core.errors import Conflict, NotFound, ValidationFailed
from enrolment.core.logging import get_logger
from enrolment.metrics import MEMBERS_CREATED
from enrolment.models.domain import Identity, Relationship
from enrolment.repositories import EmployeeRepository, MemberRepository
from enrolment.schemas import MemberCreate, MemberUpdate
from enrolment.services.access import require_access, require_manager

logger = get_logger(__name__)

SINGLE_RELATIONSHIPS = {
    Relationship.SELF.value: "Employee already has a SELF record",
    Relationship.SPOUSE.value: "Employee already has a spouse registered",
}
REQUIRED_MEMBER_FIELDS = ("first_name", "last_name", "relationship")


class MemberService:
    def __init__(self, member_repo: MemberRepository, employee_repo: EmployeeRepository):
        self._members = member_repo
        self._employees = employee_repo

    # ── Queries ──

    def list_by_employee(self, identity: Identity, employee_id: int) -> List[Dict[str, Any]]:
        employee = self._get_employee(employee_id)
        require_access(identity, employee["user_id"], "You can only view your own dependents")
        return self._members.list_by_employee(employee_id)

    def get_member(self, identity: Identity, member_id: int) -> Dict[str, Any]:
        member = self._get_member(member_id)
        employee = self._get_employee(member["employee_id"])
        require_access(identity, employee["user_id"], "You do not have access to this member")
        return member

    def stats(self, identity: Identity, employee_id: int) -> Dict[str, int]:
        employee = self._get_employee(employee_id)
        require_access(identity, employee["user_id"], "You do not have access to this data")
        relationships = self._members.relationships_for(employee_id)
        return {
            "self": relationships.count(Relationship.SELF.value),
            "spouse": relationships.count(Relationship.SPOUSE.value),
            "children": relationships.count(Relationship.CHILD.value),
            "parents": relationships.count(Relationship.PARENT.value),
            "total": len(relationships),
        }

    # ── Commands ──

    def create_member(self, identity: Identity, body: MemberCreate) -> Dict[str, Any]:
        employee = self._get_employee(body.employee_id)
        require_access(identity, employee["user_id"],
                       "You can only add dependents to your own policy")

        relationship = body.relationship.value
        if relationship in SINGLE_RELATIONSHIPS and \
                relationship in self._members.relationships_for(body.employee_id):
            raise Conflict(SINGLE_RELATIONSHIPS[relationship])

        try:
            member = self._members.create({
                "first_name": body.first_name,
                "last_name": body.last_name,
                "date_of_birth": body.date_of_birth,
                "gender": body.gender.value if body.gender else None,
                "relationship": relationship,
                "employee_id": body.employee_id,
                "created_by_id": identity.id,
            })
        except IntegrityError:
            if relationship not in SINGLE_RELATIONSHIPS:
                raise
            raise Conflict(SINGLE_RELATIONSHIPS[relationship])
        MEMBERS_CREATED.labels(relationship=relationship).inc()
        logger.info("Member created id=%s employee=%s relationship=%s by=%s",
                    member["id"], body.employee_id, relationship, identity.id)
        return member

    def update_member(self, identity: Identity, member_id: int,
                      patch: MemberUpdate) -> Dict[str, Any]:
        member = self._get_member(member_id)
        employee = self._get_employee(member["employee_id"])
        require_access(identity, employee["user_id"], "You can only update your own dependents")

        changes = patch.changes(required=REQUIRED_MEMBER_FIELDS)
        new_relationship = changes.get("relationship", member["relationship"])
        if new_relationship != member["relationship"]:
            if member["relationship"] == Relationship.SELF.value:
                raise ValidationFailed(
                    "The SELF record's relationship cannot be changed"
                )
            if new_relationship in SINGLE_RELATIONSHIPS and \
                    new_relationship in self._members.relationships_for(member["employee_id"]):
                raise Conflict(SINGLE_RELATIONSHIPS[new_relationship])

        try:
            updated = self._members.update(member_id, changes)
        except IntegrityError:
            if new_relationship not in SINGLE_RELATIONSHIPS:
                raise
            raise Conflict(SINGLE_RELATIONSHIPS[new_relationship])
        logger.info("Member updated id=%s fields=%s by=%s",
                    member_id, sorted(changes), identity.id)
        return updated

    def delete_member(self, identity: Identity, member_id: int) -> Dict[str, Any]:
        member = self._get_member(member_id)
        # refused for every role, ahead of the manager gate
        if member["relationship"] == Relationship.SELF.value:
            raise ValidationFailed(
                "Cannot delete the employee's own (SELF) record. Delete the employee instead."
            )
        require_manager(identity)
        self._members.delete(member_id)
        logger.info("Member deleted id=%s employee=%s by=%s",
                    member_id, member["employee_id"], identity.id)
        return {"success": True}

    # ── Private ──

    def _get_employee(self, employee_id: int) -> Dict[str, Any]:
        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFound("Employee not found")
        return employee

    def _get_member(self, member_id: int) -> Dict[str, Any]:
        member = self._members.get(member_id)
        if member is None:
            raise NotFound("Member not found")
        return member
