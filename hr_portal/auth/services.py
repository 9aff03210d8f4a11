import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.models import User
from hr_portal.auth.schemas import (
    ActorContext,
    LoginRequest,
    LoginResponse,
    PasswordUpdate,
    ProfileUpdate,
    UserInfo,
)
from hr_portal.auth.security import hash_password, token_for_user, verify_password
from hr_portal.core.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ServiceError,
)
from hr_portal.core.models import Employee

logger = logging.getLogger(__name__)


async def _user_info(db: AsyncSession, user: User) -> UserInfo:
    employee_id = (
        await db.execute(select(Employee.id).where(Employee.user_id == user.id))
    ).scalar_one_or_none()
    return UserInfo(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        employee_id=employee_id,
    )


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    user_stmt = select(User).where(func.lower(User.email) == func.lower(payload.email))
    user: Optional[User] = (await db.execute(user_stmt)).scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise ServiceError("Invalid credentials", 401)

    issued_at = datetime.now(timezone.utc)
    return LoginResponse(
        access_token=token_for_user(user.id, user.role),
        user=await _user_info(db, user),
        issued_at=issued_at,
    )


async def get_me(db: AsyncSession, actor: ActorContext) -> UserInfo:
    user = await db.get(User, actor.user_id)
    if not user:
        raise NotFoundError("User not found")
    return await _user_info(db, user)


async def update_profile(db: AsyncSession, actor: ActorContext, payload: ProfileUpdate) -> UserInfo:
    user = await db.get(User, actor.user_id)
    if not user:
        raise NotFoundError("User not found")
    if payload.email is not None and payload.email.lower() != user.email.lower():
        taken = (
            await db.execute(
                select(User.id).where(func.lower(User.email) == payload.email.lower(), User.id != user.id)
            )
        ).scalar_one_or_none()
        if taken:
            raise ConflictError("Email is already in use")
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name.strip()
    await db.commit()
    await db.refresh(user)
    return await _user_info(db, user)


async def update_password(db: AsyncSession, actor: ActorContext, payload: PasswordUpdate) -> None:
    user = await db.get(User, actor.user_id)
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(payload.current_password, user.password_hash):
        raise AuthorizationError("Current password is incorrect")
    if payload.new_password == payload.current_password:
        raise BusinessRuleError("New password must differ from the current password")
    user.password_hash = hash_password(payload.new_password)
    await db.commit()
    logger.info("Password changed for user %s", user.id)
