from typing import Optional, Tuple

from passlib.context import CryptContext

# ---------------------------
# Password hashing context
# ---------------------------
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Returns a securely hashed password using Argon2.
    """
    return pwd_context.hash(password)


def verify_and_upgrade(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """
    Verifies the password and, when the stored hash uses outdated
    parameters, also returns a replacement hash (None otherwise).
    """
    return pwd_context.verify_and_update(plain_password, hashed_password)
