# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Employee CRUD, bulk CSV import, dependents of an employee."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response

from enrolment.core.dependencies import (
    get_current_identity, get_employee_service, get_member_service,
)
from enrolment.models.domain import Identity
from enrolment.schemas import (
    BulkImportRequest, BulkImportResult, EmployeeCreate, EmployeeDeleted,
    EmployeeDetail, EmployeeUpdate, MemberOut, PaginatedEmployees,
)
from enrolment.services.employee_service import EmployeeService
from enrolment.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Employees"])


@router.get("/employees", response_model=PaginatedEmployees)
def list_employees(
    search: Optional[str] = None,
    department: Optional[str] = None,
    policy_id: Optional[int] = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    identity: Identity = Depends(get_current_identity),
    service: EmployeeService = Depends(get_employee_service),
):
    return PaginatedEmployees(
        **service.list_employees(identity, search, department, policy_id, page, page_size)
    )


# Static paths are declared before /employees/{employee_id}.

@router.get("/employees/me", response_model=EmployeeDetail)
def get_my_employee(identity: Identity = Depends(get_current_identity),
                    service: EmployeeService = Depends(get_employee_service)):
    return EmployeeDetail(**service.get_current(identity))


@router.get("/employees/departments", response_model=List[str])
def list_departments(identity: Identity = Depends(get_current_identity),
                     service: EmployeeService = Depends(get_employee_service)):
    return service.departments()


@router.get("/employees/bulk/template")
def download_template(identity: Identity = Depends(get_current_identity),
                      service: EmployeeService = Depends(get_employee_service)):
    return Response(
        content=service.bulk_template(identity),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="employee_template.csv"'},
    )


@router.post("/employees/bulk", response_model=BulkImportResult)
def bulk_import(body: BulkImportRequest,
                identity: Identity = Depends(get_current_identity),
                service: EmployeeService = Depends(get_employee_service)):
    return BulkImportResult(**service.bulk_create(identity, body.csv_content, body.policy_id))


@router.post("/employees", status_code=201, response_model=EmployeeDetail)
def create_employee(body: EmployeeCreate,
                    identity: Identity = Depends(get_current_identity),
                    service: EmployeeService = Depends(get_employee_service)):
    return EmployeeDetail(**service.create_employee(identity, body))


@router.get("/employees/{employee_id}", response_model=EmployeeDetail)
def get_employee(employee_id: int,
                 identity: Identity = Depends(get_current_identity),
                 service: EmployeeService = Depends(get_employee_service)):
    return EmployeeDetail(**service.get_employee(identity, employee_id))


@router.patch("/employees/{employee_id}", response_model=EmployeeDetail)
def update_employee(employee_id: int, body: EmployeeUpdate,
                    identity: Identity = Depends(get_current_identity),
                    service: EmployeeService = Depends(get_employee_service)):
    return EmployeeDetail(**service.update_employee(identity, employee_id, body))


@router.delete("/employees/{employee_id}", response_model=EmployeeDeleted)
def delete_employee(employee_id: int,
                    identity: Identity = Depends(get_current_identity),
                    service: EmployeeService = Depends(get_employee_service)):
    return EmployeeDeleted(**service.delete_employee(identity, employee_id))


@router.get("/employees/{employee_id}/members", response_model=List[MemberOut])
def list_employee_members(employee_id: int,
                          identity: Identity = Depends(get_current_identity),
                          service: MemberService = Depends(get_member_service)):
    return [MemberOut(**m) for m in service.list_by_employee(identity, employee_id)]


@router.get("/employees/{employee_id}/members/stats")
def employee_member_stats(employee_id: int,
                          identity: Identity = Depends(get_current_identity),
                          service: MemberService = Depends(get_member_service)):
    return service.stats(identity, employee_id)
