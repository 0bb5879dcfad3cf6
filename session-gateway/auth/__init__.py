"""Authentication module for cookie policy, tenant selection and sessions."""
from .cookies import default_cookies, find_callback_cookie, get_cookie, serialize_cookie
from .dependencies import get_current_session
from .origin import get_origin, use_secure_cookies
from .routes import router as auth_router
from .session import make_new_session_jwt, mint_session, set_session_cookie
from .tenant import get_tenant_cookie, reconcile_tenant_cookie, set_tenant_cookie

__all__ = [
    "default_cookies",
    "find_callback_cookie",
    "get_cookie",
    "serialize_cookie",
    "get_current_session",
    "get_origin",
    "use_secure_cookies",
    "auth_router",
    "make_new_session_jwt",
    "mint_session",
    "set_session_cookie",
    "get_tenant_cookie",
    "reconcile_tenant_cookie",
    "set_tenant_cookie",
]
