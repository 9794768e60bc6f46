"""
Pydantic schemas for request/response models in the auth module.
"""

from pydantic import BaseModel


class UserCredentials(BaseModel):
    """Schema for register and login request payloads."""
    username: str
    password: str


class UserOut(BaseModel):
    """Schema for responses containing user info."""
    id: str
    username: str
    message: str


class TokenOut(BaseModel):
    """Schema for a successful login."""
    token: str
    token_type: str
    expires_in: int
