# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Members (dependents)."""
from fastapi import APIRouter, Depends

from enrolment.core.dependencies import get_current_identity, get_member_service
from enrolment.models.domain import Identity
from enrolment.schemas import MemberCreate, MemberOut, MemberUpdate
from enrolment.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Members"])


@router.post("/members", status_code=201, response_model=MemberOut)
def create_member(body: MemberCreate,
                  identity: Identity = Depends(get_current_identity),
                  service: MemberService = Depends(get_member_service)):
    return MemberOut(**service.create_member(identity, body))


@router.get("/members/{member_id}", response_model=MemberOut)
def get_member(member_id: int,
               identity: Identity = Depends(get_current_identity),
               service: MemberService = Depends(get_member_service)):
    return MemberOut(**service.get_member(identity, member_id))


@router.patch("/members/{member_id}", response_model=MemberOut)
def update_member(member_id: int, body: MemberUpdate,
                  identity: Identity = Depends(get_current_identity),
                  service: MemberService = Depends(get_member_service)):
    return MemberOut(**service.update_member(identity, member_id, body))


@router.delete("/members/{member_id}")
def delete_member(member_id: int,
                  identity: Identity = Depends(get_current_identity),
                  service: MemberService = Depends(get_member_service)):
    return service.delete_member(identity, member_id)
