from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError
import uuid


from quiz_app.database import get_db
from quiz_app.errors import Unauthorized
from quiz_app.models import User
from quiz_app.auth.jwt import verify_token


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the current logged-in User from the JWT access token.
    Raises 401 if the header is missing, the token is invalid or expired,
    or the user no longer exists.
    """
    if credentials is None:
        raise Unauthorized("You must be logged in to access this resource")

    try:
        payload = verify_token(credentials.credentials, expected_type="access")
        user_id_str: Optional[str] = payload.get("user_id")
        if not user_id_str:
            raise Unauthorized("Invalid token payload")

        user_id = uuid.UUID(user_id_str)

    except (JWTError, ValueError):  # ValueError for invalid UUID string
        raise Unauthorized("Invalid or expired token")

    user = await db.get(User, user_id)
    if not user:
        raise Unauthorized("User not found")
    return user
