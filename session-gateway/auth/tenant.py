"""Tenant selection cookie: read and reconcile against tenant memberships."""
import logging
import re
from typing import Mapping, Optional, Sequence

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

from models import TenantRow

from .constants import EXPIRED_COOKIE_DATE, TENANT_COOKIE
from .cookies import get_cookie

logger = logging.getLogger("session-gateway.auth.tenant")

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-8][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value) -> bool:
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.match(value) is not None


def get_tenant_cookie(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Return the selected tenant id, or None when absent or malformed."""
    cookie = get_cookie(TENANT_COOKIE, headers)
    if cookie and is_valid_uuid(cookie):
        return cookie
    return None


def _row_id(row) -> Optional[str]:
    if isinstance(row, TenantRow):
        return row.id
    return row.get("id")


def _tenant_headers(value: str) -> MutableHeaders:
    headers = MutableHeaders()
    headers["set-cookie"] = value
    return headers


def set_tenant_cookie(headers: Optional[Mapping[str, str]], rows: Sequence) -> Optional[MutableHeaders]:
    """Decide how to correct the tenant cookie given the user's tenant rows.

    Returns headers carrying a single set-cookie value, or None when the
    cookie should be left alone. The tenant cookie only helps the UI pick a
    tenant; it does not authorize anything.
    """
    cookie = get_cookie(TENANT_COOKIE, headers)
    first_id = _row_id(rows[0]) if rows else None

    if not cookie:
        if first_id:
            logger.debug("tenant_cookie_set tenant_id=%s", first_id)
            return _tenant_headers(f"{TENANT_COOKIE}={first_id}; Path=/; SameSite=lax")
        return None

    if any(_row_id(row) == cookie for row in rows):
        return None

    if first_id:
        logger.info("tenant_cookie_replaced stale=%s tenant_id=%s", cookie, first_id)
        return _tenant_headers(f"{TENANT_COOKIE}={first_id}; Path=/; SameSite=lax")

    # no membership left for the selected tenant
    logger.info("tenant_cookie_cleared stale=%s", cookie)
    return _tenant_headers(f"{TENANT_COOKIE}=; Path=/; SameSite=Lax; Expires={EXPIRED_COOKIE_DATE}")


def reconcile_tenant_cookie(response: Response, headers: Optional[Mapping[str, str]], rows: Sequence) -> bool:
    """Apply the reconciler's decision to a response; True if a cookie was emitted."""
    outgoing = set_tenant_cookie(headers, rows)
    if outgoing is None:
        return False
    for value in outgoing.getlist("set-cookie"):
        response.headers.append("set-cookie", value)
    return True
