"""Authentication API: login, logout, registration, current user."""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from storefront.api.dependencies import require_authenticated
from storefront.config import get_settings
from storefront.middleware.auth_middleware import SESSION_COOKIE
from storefront.models.base import get_db
from storefront.models.user import User
from storefront.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str | None = None


def _user_out(u: User) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "name": u.display_name,
        "isActive": u.is_active,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
        "lastLogin": u.last_login.isoformat() if u.last_login else None,
    }


# ── Auth endpoints ───────────────────────────────────────

@router.post("/login")
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate and return a session cookie."""
    user = auth_service.authenticate(db, body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    settings = get_settings()
    token = auth_service.create_session(db, user.id)
    response = JSONResponse(content={"success": True, "user": _user_out(user)})
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.environment != "development",
        samesite="lax",
        max_age=60 * 60 * settings.session_duration_hours,
        path="/",
    )
    return response


@router.post("/logout")
async def logout(request: Request, db: Session = Depends(get_db)):
    """Clear session and cookie."""
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        auth_service.delete_session(db, token)
    response = JSONResponse(content={"success": True})
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create a new account."""
    try:
        user = auth_service.create_user(db, body.email, body.password, body.name)
    except ValueError as exc:
        status = 409 if "already registered" in str(exc) else 400
        raise HTTPException(status_code=status, detail=str(exc))
    return _user_out(user)


@router.get("/me")
async def me(current_user: User = Depends(require_authenticated)):
    """Return current authenticated user."""
    return _user_out(current_user)
