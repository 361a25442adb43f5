from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from localconnect.api.dev import router as dev_router
from localconnect.api.errors import register_error_handlers
from localconnect.api.v1.router import router as v1_router
from localconnect.core.config import settings
from localconnect.core.logging import configure_logging
from localconnect.db import init_db
from localconnect.middleware.rate_limit import RateLimitMiddleware
from localconnect.middleware.request_id import RequestIdMiddleware
from localconnect.middleware.security_headers import SecurityHeadersMiddleware

configure_logging()

if settings.db_auto_create:
    init_db()

app = FastAPI(title="LocalConnect API")

# Middleware ordering matters.
# Starlette runs the LAST added middleware FIRST (outermost).
# We want:
# - RequestId + SecurityHeaders to apply even to CORS preflight + rate limit responses
# - CORS to handle preflight properly
# - RateLimit to be closest to the app (innermost)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

register_error_handlers(app)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"name": "LocalConnect API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(v1_router, prefix="/v1")

if settings.dev_routes_enabled:
    app.include_router(dev_router)
