# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Authentication — login, logout, current user."""
from fastapi import APIRouter, Depends, Response

from enrolment.core.config import settings
from enrolment.core.dependencies import get_auth_service, get_current_identity
from enrolment.models.domain import Identity
from enrolment.schemas import CurrentUser, LoginRequest, LoginResponse
from enrolment.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1", tags=["Auth"])


@router.post("/auth/login", response_model=LoginResponse)
def login(body: LoginRequest, response: Response,
          service: AuthService = Depends(get_auth_service)):
    result = service.login(body.username.strip(), body.password)
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME, result["token"],
        max_age=settings.TOKEN_EXPIRY_HOURS * 3600,
        httponly=True, samesite="lax",
    )
    return LoginResponse(**result)


@router.post("/auth/logout")
def logout(response: Response,
           identity: Identity = Depends(get_current_identity),
           service: AuthService = Depends(get_auth_service)):
    response.delete_cookie(settings.TOKEN_COOKIE_NAME)
    return service.logout(identity)


@router.get("/auth/me", response_model=CurrentUser)
def me(identity: Identity = Depends(get_current_identity),
       service: AuthService = Depends(get_auth_service)):
    return CurrentUser(**service.me(identity))
