"""FastAPI dependencies for authentication and storage."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ecolog.auth.jwt import get_user_id_from_token
from ecolog.models.user import User
from ecolog.storage.base import Storage

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> Storage:
    """Storage selected at application startup."""
    return request.app.state.storage


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    storage: Storage = Depends(get_storage),
) -> User:
    """Get current authenticated user from JWT token.
    
    Raises:
        HTTPException: If token is missing/invalid or user not found
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = get_user_id_from_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    return user
