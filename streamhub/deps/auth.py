# streamhub/deps/auth.py
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.errors import AuthenticationError, PermissionDeniedError
from streamhub.models.user_model import User, UserRole, UserStatus
from streamhub.utils.token_utils import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_async_session),
) -> User:
    user_id = decode_access_token(token)
    user = await session.get(User, user_id)
    if not user:
        raise AuthenticationError("Could not validate credentials")
    if user.status != UserStatus.ACTIVE.value:
        raise PermissionDeniedError(f"Account is {user.status}")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Requires the authenticated user to have role=ADMIN.
    Raises 403 if not an admin.
    """
    if user.role != UserRole.ADMIN.value:
        raise PermissionDeniedError("Admin access required")
    return user


async def require_creator(user: User = Depends(get_current_user)) -> User:
    """Creators upload content; admins may act on their behalf."""
    if user.role not in (UserRole.CREATOR.value, UserRole.ADMIN.value):
        raise PermissionDeniedError("Creator access required")
    return user


def ensure_self_or_admin(caller: User, user_id: int) -> None:
    if caller.role != UserRole.ADMIN.value and caller.id != user_id:
        raise PermissionDeniedError("Cannot act on another user's account")
