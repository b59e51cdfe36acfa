import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .domain.appointments.router import router as appointments_router
from .domain.claims.router import router as claims_router
from .domain.communication.router import router as communication_router
from .domain.triage.router import router as triage_router
from .rate_limiter import create_rate_limiter, get_redis_client
from .routes.health import router as health_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{config.BRAND_NAME} API starting up ({config.ENVIRONMENT})...")
    logger.info(f"Clinical gateway: {config.GATEWAY_BASE_URL}")

    if get_redis_client() is not None:
        logger.info("Redis connection established, rate limits are shared")
    else:
        logger.info("Rate limiting uses process memory only")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title=f"{config.BRAND_NAME} API", version="1.0.0", lifespan=lifespan)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with the first readable reason"""
    errors = exc.errors()
    logger.warning(f"Validation error for {request.url.path}: {len(errors)} issue(s)")

    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        reason = first.get("msg", "invalid value")
        message = f"{field}: {reason}" if field else reason
    return error_response(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(404, "Endpoint not found")
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} - Error: {str(exc)}", exc_info=exc)
    return error_response(500, "Internal server error")


if config.SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {config.CORS_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Every /api route shares one per-IP window
api_rate_limit = create_rate_limiter(
    config.RATE_LIMIT_REQUESTS, config.RATE_LIMIT_WINDOW_SECONDS, key_prefix="api"
)

# Routes
app.include_router(health_router)
for api_router in (communication_router, appointments_router, triage_router, claims_router):
    app.include_router(api_router, dependencies=[Depends(api_rate_limit)])


@app.get("/")
def root():
    return {"message": f"{config.BRAND_NAME} API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("medportal.main:app", host="0.0.0.0", port=8000)
