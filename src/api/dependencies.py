from fastapi import Depends, HTTPException, Request

from api.context import AppContext
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository


def get_context(request: Request) -> AppContext:
    """Get the AppContext created by the lifespan, raising 503 before startup."""
    context = getattr(request.app.state, 'context', None)
    if context is None:
        raise HTTPException(status_code=503, detail="Service not initialised")
    return context


def get_user_repo(context: AppContext = Depends(get_context)) -> UserRepository:
    """Get the user repository, raising 503 if MongoDB is unavailable."""
    repo = context.user_repo()
    if repo is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return repo


def get_password_hasher(context: AppContext = Depends(get_context)) -> PasswordHasher:
    return context.password_hasher
