# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Digital Enrolment Service
==========================
HR managers enrol employees and their dependents under group insurance
policies; employees view their own record and manage their dependents.

Layers:
    controllers ─► services ─► repositories ─► SQLAlchemy engine

Port: 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from enrolment.controllers import (
    auth_controller, employee_controller, member_controller, policy_controller,
    system_controller,
)
from enrolment.core.config import settings
from enrolment.core.database import create_db_engine, create_schema
from enrolment.core.dependencies import close_store, init_store
from enrolment.core.errors import EnrolmentError, StoreFailure
from enrolment.core.logging import get_logger
from enrolment.middleware import MetricsMiddleware, RequestIDMiddleware
from enrolment.schemas import ErrorResponse
from enrolment.seed import seed_demo_data

logger = get_logger()


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    engine = create_db_engine(settings.DATABASE_URL)
    create_schema(engine)
    init_store(engine)
    if settings.SEED_DEMO_DATA:
        seed_demo_data(engine)
        logger.info("Demo data seeded")
    logger.info("Enrolment service started")
    yield
    close_store()
    logger.info("Shutting down — connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Digital Enrolment Service",
    description="Employee and dependent enrolment for group insurance policies.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


# ── Exception handlers ────────────────────────────────────────────────────
@app.exception_handler(EnrolmentError)
async def enrolment_error_handler(request: Request, exc: EnrolmentError):
    return JSONResponse(status_code=exc.status_code,
                        content=ErrorResponse(error=exc.kind, detail=exc.message).model_dump())


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure")
    return JSONResponse(status_code=StoreFailure.status_code,
                        content=ErrorResponse(error=StoreFailure.kind,
                                              detail="The data store is unavailable").model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(system_controller.router)
app.include_router(auth_controller.router)
app.include_router(employee_controller.router)
app.include_router(member_controller.router)
app.include_router(policy_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
