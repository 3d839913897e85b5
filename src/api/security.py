"""API key authentication dependency."""

import logging

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_user_repo
from domain.model.errors import AccountDeactivatedError, InvalidCredentialsError, PersistenceError
from domain.model.user import User
from port.user_repository import UserRepository
from services import account_service

logger = logging.getLogger(__name__)

# Header name shown in the OpenAPI docs; API_KEY_HEADER may override at runtime
DEFAULT_API_KEY_HEADER = "X-API-Key"
api_key_header = APIKeyHeader(
    name=DEFAULT_API_KEY_HEADER,
    description="API key issued at registration",
    auto_error=False,
)


def _configured_header(request: Request) -> str:
    context = getattr(request.app.state, 'context', None)
    if context is None:
        return DEFAULT_API_KEY_HEADER
    return context.settings.api_key_header or DEFAULT_API_KEY_HEADER


async def get_current_user_required(
    request: Request,
    api_key: str | None = Security(api_key_header),
    repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Resolve the caller's API key to an active user. Raises 401/403 otherwise."""
    if not api_key:
        api_key = request.headers.get(_configured_header(request))

    try:
        return await run_in_threadpool(account_service.resolve_api_key, repo, api_key)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "API-Key"},
        ) from e
    except AccountDeactivatedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except PersistenceError as e:
        logger.error("API key validation failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication unavailable",
        ) from e
