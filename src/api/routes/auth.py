"""Authentication routes (register, login, current user)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_password_hasher, get_user_repo
from api.models import (
    ApiKeyResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from api.security import get_current_user_required
from domain.model.errors import (
    AccountDeactivatedError,
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from domain.model.user import User
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services import account_service, auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _to_http_exception(error: DomainError) -> HTTPException:
    """Map a domain error to the HTTP status the client sees."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, DuplicateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, InvalidCredentialsError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(error))
    if isinstance(error, AccountDeactivatedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    # InternalError, PersistenceError, HashingError: don't echo internals
    logger.error("Auth request failed", extra={"errorType": type(error).__name__, "error": str(error)})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Register a new user and issue an API key.

    Raises:
        HTTPException: 400 invalid input, 409 email already registered, 500 store/hash failure
    """
    # bcrypt is CPU-bound; keep it off the event loop
    try:
        result = await run_in_threadpool(
            auth_service.register,
            repo,
            hasher,
            email=request.email,
            name=request.name,
            password=request.password,
        )
    except DomainError as e:
        raise _to_http_exception(e) from e

    return RegisterResponse(
        user_id=result.user_id,
        email=result.email,
        name=result.name,
        api_key=result.api_key,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Verify email + password and return the user's API key.

    Raises:
        HTTPException: 401 invalid credentials, 403 account deactivated
    """
    try:
        result = await run_in_threadpool(
            auth_service.authenticate,
            repo,
            hasher,
            email=request.email,
            password=request.password,
        )
    except DomainError as e:
        raise _to_http_exception(e) from e

    return LoginResponse(
        user_id=result.user_id,
        email=result.email,
        name=result.name,
        api_key=result.api_key,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get the profile of the user owning the API key."""
    return UserResponse.from_domain(current_user)


@router.post("/me/api-key", response_model=ApiKeyResponse)
async def regenerate_my_api_key(
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Rotate the caller's API key. The key used for this request stops working."""
    try:
        user = await run_in_threadpool(account_service.regenerate_api_key, repo, current_user.id)
    except DomainError as e:
        raise _to_http_exception(e) from e
    return ApiKeyResponse(api_key=user.api_key)
