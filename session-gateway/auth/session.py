"""Session token minting and session cookie management."""
import datetime
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Union

from fastapi import Response

from config import settings
from models import CookieDescriptor, SessionUser

from .cookies import get_session_token_cookie, serialize_cookie
from .jwt import encode, jwt_callback
from .origin import SourceLike, use_secure_cookies

logger = logging.getLogger("session-gateway.auth.session")

ClaimsBuilder = Callable[..., Awaitable[Dict]]
TokenEncoder = Callable[..., Awaitable[str]]


@dataclass(frozen=True)
class MintedSession:
    """A freshly minted session token and the cookie it travels in."""

    descriptor: CookieDescriptor
    token: str
    expires: datetime.datetime

    @property
    def cookie(self) -> str:
        return serialize_cookie(self.descriptor, self.token)


async def mint_session(
    obj: SourceLike,
    user: Union[SessionUser, Dict],
    *,
    secret: Optional[str],
    max_age: Optional[int] = None,
    claims_builder: ClaimsBuilder = jwt_callback,
    token_encoder: TokenEncoder = encode,
) -> MintedSession:
    """Build a new session token for user; empty when no secret is configured."""
    if not isinstance(user, SessionUser):
        user = SessionUser(**user)
    if max_age is None:
        max_age = settings.session_max_age

    session_cookie = get_session_token_cookie(use_secure_cookies(obj))
    default_token = {
        "name": user.name,
        "email": user.email,
        "picture": user.image,
        "sub": user.id,
    }
    # not oauth
    token = await claims_builder(token=default_token, user=user.model_dump(), account=None)

    new_token = ""
    if secret:
        new_token = await token_encoder(claims=token, secret=secret, max_age=max_age)
    else:
        logger.warning("session_token_not_signed reason=missing_secret sub=%s", user.id)

    expires = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(seconds=max_age)
    return MintedSession(descriptor=session_cookie, token=new_token, expires=expires)


async def make_new_session_jwt(
    obj: SourceLike,
    user: Union[SessionUser, Dict],
    *,
    secret: Optional[str],
    max_age: Optional[int] = None,
    claims_builder: ClaimsBuilder = jwt_callback,
    token_encoder: TokenEncoder = encode,
) -> str:
    """Mint a session token and return it as a ready-to-emit cookie string."""
    minted = await mint_session(
        obj,
        user,
        secret=secret,
        max_age=max_age,
        claims_builder=claims_builder,
        token_encoder=token_encoder,
    )
    return minted.cookie


def set_session_cookie(response: Response, minted: MintedSession) -> None:
    """Set the minted session token as an HTTP-only cookie on the response."""
    options = minted.descriptor.options
    response.set_cookie(
        key=minted.descriptor.name,
        value=minted.token,
        httponly=options.http_only,
        secure=options.secure,
        samesite=options.same_site,
        max_age=options.max_age,
        expires=minted.expires,
        path=options.path,
    )
