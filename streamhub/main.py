import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from streamhub.config import CORS_ORIGINS, LOG_LEVEL, STORAGE_BACKEND, UPLOAD_DIR, UPLOAD_URL_PREFIX
from streamhub.database import Base, engine
from streamhub.errors import StreamhubError
from streamhub.limiter import limiter
from streamhub.models import otp_model, subscription_model, user_model, video_model, watchlist_model  # noqa: F401
from streamhub.routes import (
    admin_routes,
    analytics_routes,
    auth,
    creator_routes,
    payment_routes,
    profile_routes,
    subscription_routes,
    video_routes,
    watchlist_routes,
)

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Tiny retry so a momentary DB disconnect doesn't crash the app.
    for attempt in range(2):
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            break
        except Exception as e:
            if attempt == 0:
                logger.warning("[startup] DB init failed, retrying once: %r", e)
                await asyncio.sleep(0.5)
            else:
                # Tables should already exist from previous runs.
                logger.error("[startup] Skipping DB init due to error: %r", e)
    yield
    await engine.dispose()


app = FastAPI(title="Streamhub API", lifespan=lifespan)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    missing = [str(err["loc"][-1]) for err in errors if err.get("type") == "missing"]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first["loc"][1:]) or "body"
    return f"Invalid field {field}: {first['msg']}"


@app.exception_handler(StreamhubError)
async def streamhub_error_handler(request: Request, exc: StreamhubError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = {"error": exc.message}
    body.update(getattr(exc, "payload", {}) or {})
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests. Please slow down."}
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(auth.router)
app.include_router(profile_routes.router)
app.include_router(subscription_routes.router)
app.include_router(video_routes.router)
app.include_router(creator_routes.router)
app.include_router(admin_routes.router)
app.include_router(watchlist_routes.router)
app.include_router(analytics_routes.router)
app.include_router(payment_routes.router)

if STORAGE_BACKEND == "local":
    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
async def health_check():
    return {"status": True}
