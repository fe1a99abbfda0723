"""
FastAPI application entrypoint.
Run with: uvicorn app.main:app --reload --port 3001

API base path: every router is mounted under /api.
  - Auth:        POST /api/auth/register, POST /api/auth/login, GET /api/auth/me
  - Admin:       GET /api/admin/stats|users|stores|store-owners, POST /api/admin/users|stores
  - Stores:      GET /api/stores
  - Ratings:     POST /api/ratings
  - Store owner: GET /api/store-owner/store, GET /api/store-owner/ratings/{store_id}

Every error response is {"message": str}.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings, DEFAULT_SECRET_KEY
from app.errors import AppError
from app.api.auth import router as auth_router
from app.api.admin import router as admin_router
from app.api.stores import router as stores_router
from app.api.ratings import router as ratings_router
from app.api.store_owner import router as store_owner_router

logger = logging.getLogger("app.main")

INTERNAL_ERROR_MSG = "Internal server error"

app = FastAPI(
    title="Store Rating API",
    description="Users rate stores; store owners see their ratings; admins manage users and stores.",
    version="0.1.0",
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(stores_router, prefix="/api")
app.include_router(ratings_router, prefix="/api")
app.include_router(store_owner_router, prefix="/api")


def _describe_validation_error(err: dict) -> str:
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc) or "request"
    kind = err.get("type", "")
    msg = err.get("msg", "Invalid value")
    if kind == "missing":
        return f"{field} is required"
    if kind == "json_invalid":
        return "Request body is not valid JSON"
    if kind == "value_error":
        # Messages from our own field validators are already client-facing
        return msg.removeprefix("Value error, ")
    return f"{field}: {msg}"


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        text = _describe_validation_error(err)
        if text not in messages:
            messages.append(text)
    return JSONResponse(status_code=400, content={"message": "; ".join(messages) or "Invalid request"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MSG})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MSG})


@app.on_event("startup")
def startup():
    """Create tables. Fail fast if production uses default SECRET_KEY."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if settings.is_production and (settings.secret_key or "").strip() == DEFAULT_SECRET_KEY:
        logger.critical("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
        raise RuntimeError("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
    if (settings.secret_key or "").strip() == DEFAULT_SECRET_KEY:
        logger.warning("Using the default SECRET_KEY; tokens are forgeable. Set SECRET_KEY in backend/.env.")
    if settings.allow_admin_self_registration:
        logger.warning("ALLOW_ADMIN_SELF_REGISTRATION is on: anyone can register as admin.")
    from app.database import init_db
    init_db()


@app.get("/api/health")
def health():
    """Health check (JSON)."""
    return {"status": "ok", "message": "Store Rating API"}
