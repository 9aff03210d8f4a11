from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.models import User
from hr_portal.auth.schemas import ActorContext
from hr_portal.auth.security import user_id_from_token
from hr_portal.core.enums import Role
from hr_portal.core.models import Employee
from hr_portal.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth")


async def get_current_actor(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> ActorContext:
    """Resolve the authenticated user and their employee profile from the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = user_id_from_token(token)
    if user_id is None:
        raise credentials_exception

    user = await db.get(User, user_id)
    if not user:
        raise credentials_exception

    # Role is read from the account, not the token, so a role change applies immediately
    employee_id = (
        await db.execute(select(Employee.id).where(Employee.user_id == user.id))
    ).scalar_one_or_none()

    return ActorContext(user_id=user.id, role=Role(user.role), employee_id=employee_id)
