"""Header and cookie names shared by the auth modules."""

# Inbound headers
HEADER_ORIGIN = "niledb-origin"
X_NILE_ORIGIN = "x-nile-origin"
HEADER_SECURE_COOKIES = "niledb-usesecurecookies"
X_SECURE_COOKIES = "x-nile-usesecurecookies"

# Cookies
SECURE_COOKIE_PREFIX = "__Secure-"
TENANT_COOKIE = "nile.tenant"
EXPIRED_COOKIE_DATE = "Thu, 01 Jan 1970 00:00:00 GMT"

# Lifetimes in seconds
HANDSHAKE_COOKIE_MAX_AGE = 60 * 15
PASSWORD_RESET_MAX_AGE = 60 * 60 * 4
