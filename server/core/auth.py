# server/core/auth.py

from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from server.config import ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, get_settings
from server.errors import AuthenticationError, InvalidTokenError


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenClaims(BaseModel):
    """
    Identity carried by a signed token.
    """
    user_id: int
    username: str
    email: str
    exp: int


# -------------------------------
# Password hashing
# -------------------------------

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unknown or corrupt hash format
        return False


# -------------------------------
# Tokens
# -------------------------------

def sign_token(username: str, email: str, user_id: int, expires_delta: timedelta | None = None) -> str:
    """
    Signs a token for the given identity, valid for one hour unless
    `expires_delta` says otherwise.
    Raises ConfigurationError when JWT_SECRET_KEY is unset.
    """
    secret = get_settings().require_secret()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "username": username,
        "email": email,
        "user_id": user_id,
        "exp": expire,
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_token(token: str | None) -> TokenClaims:
    """
    Checks signature and expiry and returns the embedded claims.
    """
    if not token:
        raise AuthenticationError("Authentication token is required")

    secret = get_settings().require_secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        return TokenClaims(**payload)
    except (JWTError, PydanticValidationError):
        raise InvalidTokenError("Invalid or expired token")
