"""Origin and secure-cookie policy resolution."""
import logging
from typing import Mapping, Optional, Union
from urllib.parse import urlsplit

from starlette.datastructures import Headers
from starlette.requests import HTTPConnection
from starlette.responses import Response

from .constants import HEADER_ORIGIN, HEADER_SECURE_COOKIES, X_NILE_ORIGIN, X_SECURE_COOKIES

logger = logging.getLogger("session-gateway.auth.origin")

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


class OriginError(ValueError):
    """Raised when no origin can be derived from a URL."""


class MalformedRedirectError(OriginError):
    """Raised when a redirect carries a location that is not an absolute URL."""


class OriginSource:
    """Headers and URL of a request or response, as seen by the origin resolver."""

    def __init__(self, headers: Optional[Mapping[str, str]] = None, url: Optional[str] = None) -> None:
        if headers is None:
            headers = Headers()
        elif not isinstance(headers, Headers):
            headers = Headers(headers=dict(headers))
        self.headers = headers
        self.url = url

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    def redirect_location(self) -> Optional[str]:
        return None


class RequestOriginSource(OriginSource):
    """An inbound request; never a redirect."""


class RedirectOriginSource(OriginSource):
    """A redirect response whose target lives in its location header."""

    def redirect_location(self) -> Optional[str]:
        return self.headers.get("location")


SourceLike = Union[OriginSource, HTTPConnection, Response]


def origin_source(obj: SourceLike) -> OriginSource:
    """Adapt a Starlette request or response to an OriginSource."""
    if isinstance(obj, OriginSource):
        return obj
    if isinstance(obj, HTTPConnection):
        headers, url = obj.headers, str(obj.url)
    elif isinstance(obj, Response):
        headers, url = obj.headers, None
    else:
        raise TypeError(f"Cannot derive an origin from {type(obj).__name__}")
    if headers.get("location"):
        return RedirectOriginSource(headers, url)
    return RequestOriginSource(headers, url)


def url_origin(url: str) -> str:
    """Return scheme://host[:port] of an absolute URL, dropping default ports."""
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    try:
        host = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise OriginError(f"Invalid URL: {url!r}") from exc
    if not scheme or not host:
        raise OriginError(f"Not an absolute URL: {url!r}")
    if ":" in host:
        host = f"[{host}]"
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


def get_origin(obj: SourceLike) -> str:
    """Return the best-known logical origin of a request or redirect."""
    source = origin_source(obj)

    real_origin = source.header(HEADER_ORIGIN)
    if real_origin:
        return real_origin

    forwarded = source.header(X_NILE_ORIGIN)
    if forwarded:
        return forwarded

    location = source.redirect_location()
    if location:
        try:
            return url_origin(location)
        except OriginError as exc:
            raise MalformedRedirectError(f"Malformed redirect location: {location!r}") from exc

    if not source.url:
        raise OriginError("No URL to derive an origin from.")
    return url_origin(source.url)


def use_secure_cookies(obj: SourceLike) -> bool:
    """Decide whether cookies issued for this request must be secure."""
    source = origin_source(obj)

    header_secure = source.header(HEADER_SECURE_COOKIES)
    if header_secure is not None:
        return header_secure == "true"

    legacy_secure = source.header(X_SECURE_COOKIES)
    if legacy_secure is not None:
        return legacy_secure == "true"

    try:
        origin = get_origin(source)
    except MalformedRedirectError as exc:
        logger.warning("secure_cookies_redirect_fallback error=%s", exc)
        try:
            origin = url_origin(source.url) if source.url else ""
        except OriginError:
            origin = ""
    except OriginError as exc:
        logger.warning("secure_cookies_no_origin error=%s", exc)
        origin = ""
    return origin.startswith("https://")
