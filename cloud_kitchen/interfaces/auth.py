from fastapi import APIRouter, Depends, Response

from cloud_kitchen.core.config import settings
from cloud_kitchen.domain.schemas import LoginRequest, MessageResponse, Principal, PublicUser, RegisterRequest
from cloud_kitchen.interfaces.deps import get_auth_service, require_user

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="none" if settings.COOKIE_SECURE else "lax",
    )


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(payload: RegisterRequest, response: Response, auth=Depends(get_auth_service)):
    _, token = auth.register(payload)
    _set_session_cookie(response, token)
    return {"message": "Registration successful"}


@router.post("/login", response_model=MessageResponse)
def login(payload: LoginRequest, response: Response, auth=Depends(get_auth_service)):
    _, token = auth.login(payload)
    _set_session_cookie(response, token)
    return {"message": "Logged in successfully"}


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, principal: Principal = Depends(require_user), auth=Depends(get_auth_service)):
    auth.logout(principal)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=PublicUser)
def me(principal: Principal = Depends(require_user), auth=Depends(get_auth_service)):
    return auth.current_user(principal)
