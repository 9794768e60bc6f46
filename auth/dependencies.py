"""
FastAPI dependency functions for authentication.

These can be used in routes with Depends() to protect endpoints.
"""

from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog_platform.errors import Unauthorized

from .service import TokenService

# auto_error=False: a missing header must be a 401 from us, not FastAPI's 403.
security = HTTPBearer(auto_error=False)


class BearerGuard:
    """
    Dependency that requires a valid bearer token.

    - no `Authorization: Bearer ...` header -> Unauthorized (401)
    - token present but invalid or expired  -> Forbidden (403)

    Returns the token claims; the request itself is left untouched.
    """

    def __init__(self, tokens: TokenService) -> None:
        self.tokens = tokens

    def __call__(
        self,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    ) -> Dict[str, Any]:
        if credentials is None or not credentials.credentials:
            raise Unauthorized("Access denied. No token provided.")
        return self.tokens.verify(credentials.credentials)
