"""
Configuration for the auth module.

Token settings come from the platform settings object (env-driven, see
`catalog_platform.config`). Tests build an `AuthConfig` directly.
"""

from dataclasses import dataclass

TOKEN_TYPE = "bearer"


@dataclass(frozen=True)
class AuthConfig:
    secret: str
    algorithm: str = "HS256"
    expire_minutes: int = 60

    @classmethod
    def from_settings(cls, settings) -> "AuthConfig":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.TOKEN_EXPIRE_MINUTES,
        )
