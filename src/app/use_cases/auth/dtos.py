"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
"""

from typing import Optional

from pydantic import BaseModel

from src.api.utils.jwt import UserTokenClaims


# ============================================================================
# Command DTOs
# ============================================================================


class LoginCommand(BaseModel):
    """
    Login command - one of the supported grants

    password grant needs username/password, refresh_token grant needs
    refresh_token.
    """

    grant_type: str
    username: Optional[str] = None
    password: Optional[str] = None
    refresh_token: Optional[str] = None
    client_id: Optional[str] = None
    device_id: Optional[str] = None


class RegisterUserCommand(BaseModel):
    username: str
    password: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    tenant_code: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Token pair returned by login and refresh"""

    token_type: str = "bearer"
    access_token: str
    refresh_token: str


class RegisterUserResponse(BaseModel):
    id: int
    username: str
    tenant_id: int


class LogoutResponse(BaseModel):
    status: str
    revoked_tokens: int


class ValidateTokenResponse(BaseModel):
    is_valid: bool
    claims: Optional[UserTokenClaims] = None


class WhoAmIResponse(BaseModel):
    user_id: int
    username: str
