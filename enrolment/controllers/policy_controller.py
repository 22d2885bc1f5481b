# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Insurance policies and policy statistics."""
from typing import List

from fastapi import APIRouter, Depends

from enrolment.core.dependencies import get_current_identity, get_policy_service
from enrolment.models.domain import Identity
from enrolment.schemas import PolicyDetail, PolicyOut, PolicyStats
from enrolment.services.policy_service import PolicyService

router = APIRouter(prefix="/api/v1", tags=["Policies"])


@router.get("/policies", response_model=List[PolicyOut])
def list_policies(identity: Identity = Depends(get_current_identity),
                  service: PolicyService = Depends(get_policy_service)):
    return [PolicyOut(**p) for p in service.list_policies(identity)]


@router.get("/policies/current", response_model=PolicyOut)
def get_current_policy(identity: Identity = Depends(get_current_identity),
                       service: PolicyService = Depends(get_policy_service)):
    return PolicyOut(**service.get_current(identity))


@router.get("/policies/{policy_id}", response_model=PolicyDetail)
def get_policy(policy_id: int,
               identity: Identity = Depends(get_current_identity),
               service: PolicyService = Depends(get_policy_service)):
    return PolicyDetail(**service.get_policy(identity, policy_id))


@router.get("/policies/{policy_id}/stats", response_model=PolicyStats)
def get_policy_stats(policy_id: int,
                     identity: Identity = Depends(get_current_identity),
                     service: PolicyService = Depends(get_policy_service)):
    return PolicyStats(**service.stats(identity, policy_id))
