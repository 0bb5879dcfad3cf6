"""Cookie policy table and Cookie header codec."""
import logging
from typing import Dict, Mapping, Optional
from urllib.parse import unquote

from starlette.datastructures import Headers

from models import CookieDescriptor, CookieOptions

from .constants import HANDSHAKE_COOKIE_MAX_AGE, PASSWORD_RESET_MAX_AGE, SECURE_COOKIE_PREFIX
from .origin import SourceLike, origin_source, use_secure_cookies

logger = logging.getLogger("session-gateway.auth.cookies")


def _cookie(base_name: str, secure: bool, max_age: Optional[int] = None) -> CookieDescriptor:
    prefix = SECURE_COOKIE_PREFIX if secure else ""
    return CookieDescriptor(
        name=f"{prefix}{base_name}",
        options=CookieOptions(
            http_only=True,
            same_site="lax",
            path="/",
            secure=secure,
            max_age=max_age,
        ),
    )


# this cookie does not go through the auth framework
def get_password_reset_cookie(secure: bool) -> CookieDescriptor:
    return _cookie("nile.reset", secure, PASSWORD_RESET_MAX_AGE)


def get_callback_cookie(secure: bool) -> CookieDescriptor:
    return _cookie("nile.callback-url", secure)


def get_csrf_token_cookie(secure: bool) -> CookieDescriptor:
    return _cookie("nile.csrf-token", secure)


def get_session_token_cookie(secure: bool) -> CookieDescriptor:
    return _cookie("nile.session-token", secure)


def default_cookies(secure: bool) -> Dict[str, CookieDescriptor]:
    """Cookie descriptors for every role, keyed by the auth framework's role names."""
    return {
        "sessionToken": get_session_token_cookie(secure),
        "callbackUrl": get_callback_cookie(secure),
        "csrfToken": get_csrf_token_cookie(secure),
        "pkceCodeVerifier": _cookie("nile.pkce.code_verifier", secure, HANDSHAKE_COOKIE_MAX_AGE),
        "state": _cookie("nile.state", secure, HANDSHAKE_COOKIE_MAX_AGE),
        "nonce": _cookie("nile.nonce", secure),
        "webauthnChallenge": _cookie("nile.challenge", secure, HANDSHAKE_COOKIE_MAX_AGE),
        "passwordReset": get_password_reset_cookie(secure),
    }


def parse_cookies(header: Optional[str]) -> Dict[str, str]:
    """Parse a Cookie header into a name -> value mapping."""
    cookies: Dict[str, str] = {}
    if not header:
        return cookies
    for segment in header.split("; "):
        name, _, value = segment.partition("=")
        if name:
            cookies[name] = value
    return cookies


def get_cookie(cookie_key: Optional[str], headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Return one cookie value from the cookie header of a headers mapping."""
    if not cookie_key or headers is None:
        return None
    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))
    return parse_cookies(headers.get("cookie")).get(cookie_key)


def _attribute_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_cookie(descriptor: CookieDescriptor, value: str) -> str:
    """Build a cookie string in the auth framework's attribute notation."""
    attributes = descriptor.options.model_dump(by_alias=True, exclude_none=True)
    parts = [f"{descriptor.name}={value}"]
    parts.extend(f"{key}={_attribute_value(attr)}" for key, attr in attributes.items())
    return "; ".join(parts)


def find_callback_cookie(obj: SourceLike) -> str:
    """Return the decoded callback URL cookie without its trailing slash."""
    source = origin_source(obj)
    cookie_name = get_callback_cookie(use_secure_cookies(source)).name
    value = unquote(get_cookie(cookie_name, source.headers) or "")
    if value.endswith("/"):
        value = value[:-1]
    logger.debug("callback_cookie_read name=%s", cookie_name)
    return value
