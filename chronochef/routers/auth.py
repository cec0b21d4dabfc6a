from fastapi import APIRouter, Depends, Request, Response

from chronochef.core.config import get_settings
from chronochef.core.exceptions import AuthenticationRequired
from chronochef.core.security import get_current_user, session_id_from_request
from chronochef.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from chronochef.services.auth import AuthService, get_auth_service
from chronochef.services.storage import UserStore, get_user_store

router = APIRouter(prefix="/api", tags=["auth"])


def _set_session_cookie(response: Response, sid: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sid,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    data: UserCreate,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """Create an account and sign it in"""
    user = auth.register(data)
    sid = auth.create_session(user.id)
    _set_session_cookie(response, sid)
    return AuthResponse(user=UserResponse.model_validate(user), token=sid)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    user = auth.authenticate(credentials)
    sid = auth.create_session(user.id)
    _set_session_cookie(response, sid)
    return AuthResponse(user=UserResponse.model_validate(user), token=sid)


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """End the current session. Calling it without one is fine."""
    auth.destroy_session(session_id_from_request(request))
    response.delete_cookie(get_settings().session_cookie_name)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserResponse)
def current_user(
    user_id: str = Depends(get_current_user),
    users: UserStore = Depends(get_user_store),
):
    user = users.get_user(user_id)
    if user is None:
        raise AuthenticationRequired()
    return user
