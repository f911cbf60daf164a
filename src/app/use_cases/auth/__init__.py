"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .validate_token_use_case import ValidateTokenUseCase
from .whoami_use_case import WhoAmIUseCase
from .register_user_use_case import RegisterUserUseCase
from .dtos import (
    LoginCommand,
    RegisterUserCommand,
    LoginResponse,
    RegisterUserResponse,
    LogoutResponse,
    ValidateTokenResponse,
    WhoAmIResponse,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "ValidateTokenUseCase",
    "WhoAmIUseCase",
    "RegisterUserUseCase",
    # DTOs - Commands
    "LoginCommand",
    "RegisterUserCommand",
    # DTOs - Responses
    "LoginResponse",
    "RegisterUserResponse",
    "LogoutResponse",
    "ValidateTokenResponse",
    "WhoAmIResponse",
]
