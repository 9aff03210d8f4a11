from fastapi import APIRouter, Depends
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.schemas import ActorContext, LoginRequest, LoginResponse, PasswordUpdate, ProfileUpdate, UserInfo
from hr_portal.auth.services import get_me, login_user, update_password, update_profile
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse, MessageResponse
from hr_portal.db.session import get_db

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[LoginResponse]:
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Login successful", data=result)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """OAuth2 password flow for the interactive docs; username is the e-mail address."""
    payload = LoginRequest(
        email=form_data.username.strip(),
        password=form_data.password,
    )
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
    }


@router.get("/me", response_model=ApiResponse[UserInfo])
async def me(
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[UserInfo]:
    try:
        user = await get_me(db, actor)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=user)


@router.put("/profile", response_model=ApiResponse[UserInfo])
async def profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[UserInfo]:
    try:
        user = await update_profile(db, actor, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Profile updated successfully", data=user)


@router.put("/password", response_model=MessageResponse)
async def password(
    payload: PasswordUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> MessageResponse:
    try:
        await update_password(db, actor, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Password updated successfully")
