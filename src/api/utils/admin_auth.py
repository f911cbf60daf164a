"""
Admin API Key Authentication

Guards the bootstrap endpoints (tenants, roles, org units, memberships) that
exist before any user holds authority.
"""

import hmac

from fastapi import Header, status
from libs.result import Error
from src.api.error import ClientError
from config import ApplicationConfig


async def verify_admin_api_key(x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Raises:
        ClientError: 401 UNAUTHORIZED if the key is missing, 401
            INVALID_API_KEY if it does not match ADMIN_API_KEY
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not hmac.compare_digest(x_admin_api_key, ApplicationConfig.ADMIN_API_KEY):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
