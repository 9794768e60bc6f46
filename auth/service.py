"""
Core authentication logic.

This module handles registration, credential checks and bearer tokens.
Users live in whichever credential store the app factory injected
(in-memory for tests, Postgres in production).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from catalog_platform.errors import Forbidden, Unauthorized, ValidationError
from catalog_platform.models.user import User, validate_credentials
from catalog_platform.storage.base import BaseCredentialStore

from .config import TOKEN_TYPE, AuthConfig
from .utils import hash_password, verify_password

log = logging.getLogger("catalog.auth")

INVALID_LOGIN = "Invalid username or password"
INVALID_TOKEN = "Invalid or expired token"


class TokenService:
    """Issues and verifies signed JWT bearer tokens."""

    def __init__(self, config: AuthConfig) -> None:
        self.config = config

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.config.expire_minutes * 60

    def issue(self, user: User, now: Optional[datetime] = None) -> str:
        """
        Create a signed token for a user.

        Claims:
            sub       user id
            username  user name (informational)
            iat, exp  issue and expiry times
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.config.expire_minutes),
        }
        return jwt.encode(claims, self.config.secret, algorithm=self.config.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            Forbidden: Bad signature, malformed token, expired, or no subject.
        """
        try:
            claims = jwt.decode(token, self.config.secret, algorithms=[self.config.algorithm])
        except JWTError as exc:
            log.warning("Rejected bearer token: %s", exc)
            raise Forbidden(INVALID_TOKEN) from exc
        if not claims.get("sub"):
            raise Forbidden(INVALID_TOKEN)
        return claims


class AuthService:
    """Registration and login on top of a credential store."""

    def __init__(self, store: BaseCredentialStore, tokens: TokenService) -> None:
        self.store = store
        self.tokens = tokens

    def register(self, username: Any, password: Any) -> User:
        """
        Create a user with a hashed password.

        Raises:
            ValidationError: Empty username/password, or username already taken.
        """
        result = validate_credentials({"username": username, "password": password})
        if not result.ok:
            raise ValidationError(result.message)
        creds = result.value
        user = self.store.create_user(creds.username, hash_password(creds.password))
        log.info("User registered id=%s username=%r", user.id, user.username)
        return user

    def login(self, username: Any, password: Any) -> Dict[str, Any]:
        """
        Check credentials and issue a bearer token.

        Returns:
            dict: `{token, token_type, expires_in}`.

        Raises:
            ValidationError: Empty username/password.
            Unauthorized: Unknown user or wrong password.
        """
        result = validate_credentials({"username": username, "password": password})
        if not result.ok:
            raise ValidationError(result.message)
        creds = result.value

        user = self.store.get_user_by_username(creds.username)
        if user is None or not verify_password(creds.password, user.password_hash):
            log.warning("Failed login for username=%r", creds.username)
            raise Unauthorized(INVALID_LOGIN)

        return {
            "token": self.tokens.issue(user),
            "token_type": TOKEN_TYPE,
            "expires_in": self.tokens.expires_in,
        }
