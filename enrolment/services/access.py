# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Access-control evaluator.

Pure decisions over (caller role, caller id, resource owner id). Nothing here
touches storage or the request; callers pass the identity in explicitly.
"""
from typing import Optional

from enrolment.core.errors import Forbidden
from enrolment.models.domain import Identity, Role


def is_manager(identity: Identity) -> bool:
    return identity.role == Role.HR_MANAGER


def can_access_resource(role: Role, caller_id: int, owner_id: Optional[int]) -> bool:
    """HR managers see everything; anyone else only what is linked to them.

    A resource with no owner link is invisible to non-managers.
    """
    if role == Role.HR_MANAGER:
        return True
    if owner_id is None:
        return False
    return owner_id == caller_id


def require_manager(identity: Identity,
                    message: str = "Only HR Managers can perform this action") -> None:
    if not is_manager(identity):
        raise Forbidden(message)


def require_access(identity: Identity, owner_id: Optional[int],
                   message: str = "You do not have access to this resource") -> None:
    if not can_access_resource(identity.role, identity.id, owner_id):
        raise Forbidden(message)
