"""JWT session token encoding and decoding."""
import datetime
from typing import Dict, Optional

from jose import JWTError, jwt

from config import settings


class TokenDecodeError(Exception):
    """Raised when a session token cannot be verified."""


def create_token(data: Dict, expires_delta: datetime.timedelta, secret: str) -> str:
    """Create a signed JWT with issue and expiry timestamps."""
    to_encode = data.copy()
    now = datetime.datetime.now(datetime.timezone.utc)
    to_encode.update(
        {
            "iat": now,
            "exp": now + expires_delta,
        }
    )
    return jwt.encode(to_encode, secret, algorithm=settings.algorithm)


def decode_token(token: str, secret: Optional[str]) -> Dict:
    """Verify a session JWT and return its claims."""
    if not token or not secret:
        raise TokenDecodeError("Missing token or secret.")
    try:
        return jwt.decode(token, secret, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise TokenDecodeError(str(exc)) from exc


async def jwt_callback(token: Dict, user: Optional[Dict] = None, account: Optional[Dict] = None) -> Dict:
    """Default claims builder: keeps the token skeleton as-is."""
    return dict(token)


async def encode(claims: Dict, secret: str, max_age: int) -> str:
    """Default token encoder: HS256 JWT valid for max_age seconds."""
    return create_token(claims, datetime.timedelta(seconds=max_age), secret)
