from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.operator_metadata import OperatorMetadata
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterUserCommand,
    RegisterUserResponse,
    RegisterUserUseCase,
    ValidateTokenResponse,
    ValidateTokenUseCase,
    WhoAmIResponse,
    WhoAmIUseCase,
)
from src.depends import get_operator, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])

TOKEN_ERROR_STATUS = {
    "INVALID_GRANT_TYPE": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INCORRECT_REFRESH_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "USER_DISABLED": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_AUTHORITY": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_DATA_SCOPE": status.HTTP_403_FORBIDDEN,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_token_error(error):
    status_code = TOKEN_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)


class RegisterRequest(BaseModel):
    """Registration HTTP request payload"""

    username: str = Field(..., min_length=1, max_length=64, description="Login name")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")
    nickname: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    tenant_code: Optional[str] = Field(
        None, description="Home tenant code; the platform tenant when omitted"
    )


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterUserResponse
)
async def register(request: RegisterRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    User Registration

    Creates a login identity without any membership. Authority has to be
    granted through /admin/memberships before the user can log in.

    Raises:
        - 409 Conflict: Username already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterUserCommand(**request.model_dump())
    result = await RegisterUserUseCase(uow).execute(command)

    if result.is_err():
        error = result.error
        if error.code == "USERNAME_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    grant_type selects which of the other fields are required.
    """

    grant_type: str = Field("password", description="password | refresh_token")
    username: Optional[str] = None
    password: Optional[str] = None
    refresh_token: Optional[str] = None
    client_id: Optional[str] = None
    device_id: Optional[str] = None


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(request: LoginRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Login

    Resolves the user's effective authority and issues a token pair.

    Raises:
        - 400 Bad Request: Unsupported grant type (client_credentials included)
        - 401 Unauthorized: Invalid credentials or refresh token
        - 403 Forbidden: Disabled user, insufficient authority or data scope
        - 503 Service Unavailable: Membership lookup failed
    """
    result = await LoginUseCase(uow).execute(LoginCommand(**request.model_dump()))

    if result.is_err():
        raise_token_error(result.error)

    return result.value


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., description="Refresh token")
    client_id: Optional[str] = None
    device_id: Optional[str] = None


@router.post("/refresh-token", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def refresh_token(request: RefreshRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Refresh Token

    Rotates the refresh token: the presented one stops working and a new pair
    is issued against freshly resolved authority.

    Raises:
        - 401 Unauthorized: Unknown, expired or already rotated refresh token
        - 403 Forbidden: Authority no longer sufficient
        - 503 Service Unavailable: Membership lookup failed
    """
    result = await RefreshTokenUseCase(uow).execute(
        request.refresh_token, client_id=request.client_id, device_id=request.device_id
    )

    if result.is_err():
        raise_token_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    operator: OperatorMetadata = Depends(get_operator),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Revokes all tokens of the operator identified by x-md-operator.

    Raises:
        - 401 Unauthorized: Missing or invalid operator metadata
    """
    result = await LogoutUseCase(uow).execute(operator.user_id, operator.tenant_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ValidateTokenRequest(BaseModel):
    token: str


@router.post(
    "/validate-token", status_code=status.HTTP_200_OK, response_model=ValidateTokenResponse
)
async def validate_token(request: ValidateTokenRequest):
    """
    Validate Token

    Checks signature and expiry only; answers is_valid=false instead of an
    error for bad tokens.
    """
    result = await ValidateTokenUseCase().execute(request.token)
    return result.value


@router.get("/whoami", status_code=status.HTTP_200_OK, response_model=WhoAmIResponse)
async def whoami(operator: OperatorMetadata = Depends(get_operator)):
    """
    Who Am I

    Raises:
        - 401 Unauthorized: Missing or invalid operator metadata
    """
    result = await WhoAmIUseCase().execute(operator)
    return result.value
