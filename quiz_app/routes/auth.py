import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_app.auth.dependencies import get_current_user
from quiz_app.auth.jwt import create_token_pair, verify_token
from quiz_app.auth.password_security import hash_password, verify_and_upgrade
from quiz_app.database import get_db
from quiz_app.errors import Unauthorized, ValidationFailed
from quiz_app.helpers.quiz_store import parse_id
from quiz_app.helpers.rate_limiter import AUTH_RULE, rate_limit
from quiz_app.models import User
from quiz_app.schemas.common import ApiResponse, success_response
from quiz_app.schemas.user import (
    RefreshRequest, TokenResponse, UserCreate, UserCreated, UserLoginRequest, UserProfile
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserCreated],
    status_code=201,
    dependencies=[Depends(rate_limit(AUTH_RULE))],
)
async def register_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == data.email))
    if result.scalars().first():
        raise ValidationFailed("Email already registered")

    user = User(
        name=data.name,
        email=data.email,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user %s", user.id)
    return success_response({"user_id": user.id, "email": user.email})


# ---------------------------
# Login (email + password)
# ---------------------------
@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    dependencies=[Depends(rate_limit(AUTH_RULE))],
)
async def login(request: UserLoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Authenticate with email and password.
    Returns access and refresh JWT tokens on success; 401 otherwise.
    """
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalars().first()

    if not user:
        raise Unauthorized("Invalid email or password")

    valid, new_hash = verify_and_upgrade(request.password, user.password_hash)
    if not valid:
        logger.warning("Failed login for %s", request.email)
        raise Unauthorized("Invalid email or password")

    if new_hash:
        user.password_hash = new_hash
    user.last_login = datetime.utcnow()
    await db.commit()

    return success_response(TokenResponse(**create_token_pair(str(user.id))))


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh_tokens(request: RefreshRequest, db: AsyncSession = Depends(get_db)):
    try:
        payload = verify_token(request.refresh_token, expected_type="refresh")
    except JWTError:
        raise Unauthorized("Invalid or expired refresh token")

    user_id = parse_id(payload.get("user_id") or "")
    user = await db.get(User, user_id) if user_id else None
    if not user:
        raise Unauthorized("User not found")

    return success_response(TokenResponse(**create_token_pair(str(user.id))))


@router.get("/me", response_model=ApiResponse[UserProfile])
async def get_my_profile(current_user: User = Depends(get_current_user)):
    return success_response(UserProfile.model_validate(current_user))

