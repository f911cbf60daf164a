from datetime import UTC, datetime, timedelta
from typing import List, Optional
from uuid import uuid4

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from config import ApplicationConfig
from src.domain.entities import DataScope, TokenKind


class UserTokenClaims(BaseModel):
    """Identity plus effective authority carried by an access token"""

    user_id: int
    username: str
    tenant_id: int = 0
    org_unit_id: int = 0
    data_scope: Optional[DataScope] = None
    is_platform_admin: bool = False
    is_tenant_admin: bool = False
    roles: List[str] = []
    client_id: Optional[str] = None
    device_id: Optional[str] = None


class RefreshTokenClaims(BaseModel):
    user_id: int
    tenant_id: int = 0


def _encode(payload: dict, kind: TokenKind, expires_delta: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        **payload,
        "typ": kind.value,
        "jti": uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(
        payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM
    )


def create_access_token(
    claims: UserTokenClaims, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed access token carrying the resolved authority

    Args:
        claims: Identity and effective authority
        expires_delta: Token lifetime, ACCESS_TOKEN_EXPIRE_MINUTES by default

    Returns:
        JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(claims.user_id),
        "uname": claims.username,
        "tid": claims.tenant_id,
        "ouid": claims.org_unit_id,
        "ds": claims.data_scope.value if claims.data_scope else None,
        "pad": claims.is_platform_admin,
        "tad": claims.is_tenant_admin,
        "roles": claims.roles,
        "cid": claims.client_id,
        "did": claims.device_id,
    }
    return _encode(payload, TokenKind.access, expires_delta)


def create_refresh_token(
    user_id: int, tenant_id: int, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed refresh token

    Every call yields a distinct token (random jti), so a rotated token never
    collides with the one it replaces.
    """
    if expires_delta is None:
        expires_delta = timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(
        {"sub": str(user_id), "tid": tenant_id}, TokenKind.refresh, expires_delta
    )


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=[ApplicationConfig.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def decode_user_claims(token: str) -> Optional[UserTokenClaims]:
    """
    Validate an access token and rebuild its claims without touching storage

    Returns:
        UserTokenClaims, or None if the token is invalid, expired or not an
        access token
    """
    payload = verify_jwt(token)
    if payload is None or payload.get("typ") != TokenKind.access.value:
        return None
    try:
        return UserTokenClaims(
            user_id=payload["sub"],
            username=payload.get("uname") or "",
            tenant_id=payload.get("tid") or 0,
            org_unit_id=payload.get("ouid") or 0,
            data_scope=payload.get("ds"),
            is_platform_admin=bool(payload.get("pad")),
            is_tenant_admin=bool(payload.get("tad")),
            roles=payload.get("roles") or [],
            client_id=payload.get("cid"),
            device_id=payload.get("did"),
        )
    except (KeyError, ValidationError):
        return None


def decode_refresh_token(token: str) -> Optional[RefreshTokenClaims]:
    payload = verify_jwt(token)
    if payload is None or payload.get("typ") != TokenKind.refresh.value:
        return None
    try:
        return RefreshTokenClaims(user_id=payload["sub"], tenant_id=payload.get("tid") or 0)
    except (KeyError, ValidationError):
        return None
