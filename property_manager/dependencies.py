import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from property_manager.core.security import extract_user_id
from property_manager.core.exceptions import UnauthorizedException
from property_manager.database import get_db
from property_manager.repositories.user_repository import UserRepository
from property_manager.models.tenant_context import TenantContext
from property_manager.models.user import User

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to validate JWT and get/create user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Extract auth_user_id from 'sub' claim
    4. Get or auto-create User record (and its Account)
    5. Return User object for use in endpoints

    Raises:
        HTTPException 401: If token missing, invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        auth_user_id = extract_user_id(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_repo = UserRepository(db)
    return user_repo.get_or_create_by_auth_id(auth_user_id)


async def get_tenant_context(user: User = Depends(get_current_user)) -> TenantContext:
    """
    FastAPI dependency resolving the caller's tenant.

    Binds account_id and user_id into the structlog context so every log
    event of the request carries them.
    """
    context = TenantContext(user=user, account=user.account)
    structlog.contextvars.bind_contextvars(
        account_id=str(context.account_id), user_id=str(context.user_id)
    )
    return context
