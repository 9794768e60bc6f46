"""
Route definitions for authentication.

Endpoints under /auth:
- POST /auth/register : create a user, 201
- POST /auth/login    : exchange credentials for a bearer token
"""

from fastapi import APIRouter

from .schemas import TokenOut, UserCredentials, UserOut
from .service import AuthService


def build_auth_router(auth_service: AuthService) -> APIRouter:
    """Build the /auth router bound to one AuthService instance."""
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/register", status_code=201, response_model=UserOut)
    def register(req: UserCredentials) -> UserOut:
        user = auth_service.register(req.username, req.password)
        return UserOut(**user.to_public(), message="User registered")

    @router.post("/login", response_model=TokenOut)
    def login(req: UserCredentials) -> TokenOut:
        return TokenOut(**auth_service.login(req.username, req.password))

    return router
