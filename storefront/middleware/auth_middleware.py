"""Authentication middleware: resolves the session cookie and protects non-public routes."""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from storefront.models.base import SessionLocal
from storefront.services import auth_service

# Paths that never require authentication
PUBLIC_PREFIXES = (
    "/auth/login",
    "/auth/register",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
)

SESSION_COOKIE = "session_token"


class AuthMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if path == "/" or any(path.startswith(p) for p in PUBLIC_PREFIXES):
            return await call_next(request)

        token = request.cookies.get(SESSION_COOKIE)
        user = None
        if token:
            db = SessionLocal()
            try:
                user = auth_service.validate_session(db, token)
            finally:
                db.close()

        if user:
            request.state.user = user
            return await call_next(request)

        return JSONResponse(
            status_code=401,
            content={"detail": "Not authenticated"},
        )
