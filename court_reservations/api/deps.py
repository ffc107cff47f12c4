"""Request dependencies: the calling user.

Authentication happens upstream; the gateway forwards the authenticated
user id in the ``X-User-Id`` header.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.core.database import get_db
from court_reservations.models.user import User


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the authenticated user or fail with 401."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await db.get(User, x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")

    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Current user, who must be an administrator."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
