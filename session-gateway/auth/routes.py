"""Auth route handlers for cookie policy, tenant selection and session refresh."""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Request, Response

from config import settings
from models import CookiePolicy, SessionUser, TenantRow, TenantSelection, tenant_rows
from tenants import TenantRepository

from .constants import TENANT_COOKIE
from .cookies import default_cookies, get_cookie
from .dependencies import get_current_session, get_tenant_repo
from .origin import OriginError, get_origin, use_secure_cookies
from .session import mint_session, set_session_cookie
from .tenant import reconcile_tenant_cookie

logger = logging.getLogger("session-gateway.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _selected_tenant(cookie: Optional[str], rows: List[TenantRow]) -> Optional[str]:
    if cookie and any(row.id == cookie for row in rows):
        return cookie
    return rows[0].id if rows else None


@router.get("/cookies", response_model=CookiePolicy)
def cookie_policy(request: Request) -> CookiePolicy:
    """Report the cookie names and attributes in effect for this request."""
    secure = use_secure_cookies(request)
    try:
        origin = get_origin(request)
    except OriginError:
        origin = ""
    return CookiePolicy(secure=secure, origin=origin, cookies=default_cookies(secure))


@router.get("/tenant", response_model=TenantSelection)
def tenant_selection(
    request: Request,
    response: Response,
    claims: Dict = Depends(get_current_session),
    repo: TenantRepository = Depends(get_tenant_repo),
) -> TenantSelection:
    """Reconcile the tenant cookie with the caller's tenant memberships."""
    rows = tenant_rows(repo.list_for_user(claims["sub"]))
    changed = reconcile_tenant_cookie(response, request.headers, rows)
    selected = _selected_tenant(get_cookie(TENANT_COOKIE, request.headers), rows)

    logger.info(
        "tenant_reconciled correlation_id=%s sub=%s tenants=%s changed=%s",
        getattr(request.state, "correlation_id", ""),
        claims["sub"],
        len(rows),
        changed,
    )
    return TenantSelection(tenant_id=selected, tenants=rows)


@router.post("/session/refresh")
async def refresh_session(
    request: Request,
    response: Response,
    claims: Dict = Depends(get_current_session),
) -> Dict[str, str]:
    """Replace the current session token with a freshly minted one."""
    user = SessionUser(
        id=claims["sub"],
        name=claims.get("name"),
        email=claims.get("email"),
        image=claims.get("picture"),
    )
    minted = await mint_session(request, user, secret=settings.secret_key, max_age=settings.session_max_age)
    set_session_cookie(response, minted)

    logger.info(
        "session_refreshed correlation_id=%s sub=%s",
        getattr(request.state, "correlation_id", ""),
        user.id,
    )
    return {"status": "ok", "expires": minted.expires.isoformat()}
