import datetime
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from jose import jwt

ROOT = Path(__file__).resolve().parents[2] / "session-gateway"
sys.path.append(str(ROOT))

import main  # type: ignore  # noqa: E402
from main import app  # type: ignore  # noqa: E402
from auth.dependencies import set_tenant_repo_provider  # type: ignore  # noqa: E402
from auth.jwt import create_token  # type: ignore  # noqa: E402
from config import settings  # type: ignore  # noqa: E402
from tenants import InMemoryTenantRepository  # type: ignore  # noqa: E402

SECRET = "test-secret"
TENANT_A = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
TENANT_B = "0190f2d4-7c1e-7a3b-9d2e-5f6a7b8c9d0e"


@pytest.fixture
def repo(monkeypatch) -> InMemoryTenantRepository:
    repo = InMemoryTenantRepository()
    main.tenant_repo = repo
    set_tenant_repo_provider(repo)
    monkeypatch.setattr(settings, "secret_key", SECRET)
    return repo


def session_token(sub: str = "user-1") -> str:
    return create_token(
        {"sub": sub, "name": "Bob", "email": "bob@example.com", "picture": None},
        datetime.timedelta(minutes=5),
        SECRET,
    )


def test_health():
    client = TestClient(app)
    response = client.get("/healthz", headers={"X-Correlation-ID": "corr-1"})
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Correlation-ID"] == "corr-1"


def test_cookie_policy_plain_http(repo):
    client = TestClient(app)
    body = client.get("/auth/cookies").json()
    assert body["secure"] is False
    assert body["origin"] == "http://testserver"
    assert body["cookies"]["sessionToken"]["name"] == "nile.session-token"
    assert body["cookies"]["state"]["options"]["maxAge"] == 900
    assert body["cookies"]["passwordReset"]["options"]["maxAge"] == 14400
    assert body["cookies"]["nonce"]["options"]["httpOnly"] is True


def test_cookie_policy_behind_https_proxy(repo):
    client = TestClient(app)
    body = client.get("/auth/cookies", headers={"x-nile-origin": "https://app.example.com"}).json()
    assert body["secure"] is True
    assert body["origin"] == "https://app.example.com"
    assert all(c["name"].startswith("__Secure-") for c in body["cookies"].values())


def test_tenant_requires_session(repo):
    client = TestClient(app)
    assert client.get("/auth/tenant").status_code == 401
    bad = client.get("/auth/tenant", headers={"cookie": "nile.session-token=garbage"})
    assert bad.status_code == 401


def test_tenant_cookie_set_for_first_membership(repo):
    repo.add_membership("user-1", TENANT_A, "Alpha")
    repo.add_membership("user-1", TENANT_B, "Beta")
    client = TestClient(app)
    response = client.get("/auth/tenant", headers={"cookie": f"nile.session-token={session_token()}"})
    assert response.status_code == 200
    assert response.headers["set-cookie"] == f"nile.tenant={TENANT_A}; Path=/; SameSite=lax"
    body = response.json()
    assert body["tenant_id"] == TENANT_A
    assert [t["id"] for t in body["tenants"]] == [TENANT_A, TENANT_B]


def test_tenant_cookie_kept_when_member(repo):
    repo.add_membership("user-1", TENANT_A)
    repo.add_membership("user-1", TENANT_B)
    client = TestClient(app)
    response = client.get(
        "/auth/tenant",
        headers={"cookie": f"nile.session-token={session_token()}; nile.tenant={TENANT_B}"},
    )
    assert response.status_code == 200
    assert "set-cookie" not in response.headers
    assert response.json()["tenant_id"] == TENANT_B


def test_tenant_cookie_cleared_after_removal(repo):
    repo.add_membership("user-1", TENANT_A)
    repo.remove_membership("user-1", TENANT_A)
    client = TestClient(app)
    response = client.get(
        "/auth/tenant",
        headers={"cookie": f"nile.session-token={session_token()}; nile.tenant={TENANT_A}"},
    )
    assert response.status_code == 200
    assert response.headers["set-cookie"] == (
        "nile.tenant=; Path=/; SameSite=Lax; Expires=Thu, 01 Jan 1970 00:00:00 GMT"
    )
    assert response.json() == {"tenant_id": None, "tenants": []}


def test_secure_session_cookie_name(repo):
    repo.add_membership("user-1", TENANT_A)
    client = TestClient(app)
    headers = {"niledb-usesecurecookies": "true"}
    plain = client.get(
        "/auth/tenant", headers={**headers, "cookie": f"nile.session-token={session_token()}"}
    )
    assert plain.status_code == 401
    secure = client.get(
        "/auth/tenant", headers={**headers, "cookie": f"__Secure-nile.session-token={session_token()}"}
    )
    assert secure.status_code == 200


def test_refresh_session_mints_new_token(repo):
    client = TestClient(app)
    response = client.post(
        "/auth/session/refresh", headers={"cookie": f"nile.session-token={session_token('user-9')}"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("nile.session-token=")
    token = set_cookie.split(";")[0].split("=", 1)[1]
    claims = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert claims["sub"] == "user-9"
    assert claims["email"] == "bob@example.com"
    assert claims["exp"] - claims["iat"] == settings.session_max_age


def test_refresh_session_requires_session(repo):
    client = TestClient(app)
    assert client.post("/auth/session/refresh").status_code == 401
