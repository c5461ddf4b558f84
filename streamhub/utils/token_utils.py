from datetime import timedelta

from jose import JWTError, jwt

from streamhub.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from streamhub.errors import AuthenticationError
from streamhub.models.user_model import User
from streamhub.utils.clock import utcnow


def _get_secret_key() -> str:
    if not SECRET_KEY:
        # Fail fast with a clear message instead of a generic 500
        raise RuntimeError("SECRET_KEY is not configured in the backend environment")
    if len(SECRET_KEY) < 32:
        raise RuntimeError("SECRET_KEY is too short; use at least 32 characters")
    return SECRET_KEY


def create_access_token(user: User) -> str:
    expire = utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "id": user.id,
        "sub": user.email or user.phone or str(user.id),
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(to_encode, _get_secret_key(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> int:
    """Returns the user id carried by ``token``."""
    try:
        payload = jwt.decode(token, _get_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Could not validate credentials")

    user_id = payload.get("id")
    if user_id is None:
        raise AuthenticationError("Could not validate credentials")
    return int(user_id)
