# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Ops endpoints: liveness, database readiness, Prometheus scrape."""
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from enrolment.core.config import settings
from enrolment.core.dependencies import get_employee_repo
from enrolment.core.errors import StoreFailure
from enrolment.core.logging import get_logger
from enrolment.schemas import ErrorResponse

logger = get_logger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health")
def liveness():
    return {"status": "ok", "service": settings.SERVICE_NAME}


@router.get("/health/ready")
def readiness():
    try:
        get_employee_repo().verify_connection()
    except SQLAlchemyError as exc:
        logger.warning("Readiness probe failed: %s", exc)
        return JSONResponse(
            status_code=StoreFailure.status_code,
            content=ErrorResponse(error=StoreFailure.kind,
                                  detail=f"Database unavailable: {exc}").model_dump(),
        )
    return {"status": "ok", "database": "connected", "version": settings.SERVICE_VERSION}


@router.get("/metrics")
def prometheus_scrape():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
