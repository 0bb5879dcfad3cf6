import logging
import uuid
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Import settings from config module
from config import settings

# Import repository modules
from tenants import TenantRepository, get_tenant_repository

# Import auth module
from auth import auth_router
from auth.dependencies import set_tenant_repo_provider

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("session-gateway.main")


# Initialize repositories
tenant_repo: TenantRepository = get_tenant_repository()

# Provide repository to auth module
set_tenant_repo_provider(tenant_repo)

if not settings.secret_key:
    logger.warning("AUTH_SECRET is not set; session tokens will be issued empty.")


app = FastAPI(title="Session Gateway", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
    request.state.correlation_id = correlation_id
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


# Register auth router
app.include_router(auth_router)


@app.get("/healthz")
def health() -> Dict[str, str]:
    return {"status": "ok"}
