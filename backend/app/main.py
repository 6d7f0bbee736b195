import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import settings
from .errors import NumerologyInputError, NumerologyInvariantError
from .limiter import limiter
from .routers import health, numerology


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    force=True,
)
logger = logging.getLogger("numerology.api")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with a short id echoed in ``X-Request-Id``.

    Bodies are never logged: they carry people's names and birth dates.
    """

    async def dispatch(self, request, call_next):
        request_id = uuid4().hex[:8]
        started_at = time.perf_counter()
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "API %s %s | status=500 | t=%.1fms | req_id=%s",
                request.method,
                target,
                (time.perf_counter() - started_at) * 1000,
                request_id,
            )
            raise

        response.headers["X-Request-Id"] = request_id
        logger.info(
            "API %s %s | status=%s | t=%.1fms | size=%s | req_id=%s",
            request.method,
            target,
            response.status_code,
            (time.perf_counter() - started_at) * 1000,
            response.headers.get("content-length", "-"),
            request_id,
        )
        return response


logging.getLogger("uvicorn.access").disabled = True


app = FastAPI(title="Numerology Engine API", version="1.0.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(NumerologyInputError)
async def numerology_input_error_handler(request: Request, exc: NumerologyInputError) -> JSONResponse:
    logger.warning("Numerology input rejected on %s | code=%s | %s", request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=422, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(NumerologyInvariantError)
async def numerology_invariant_error_handler(request: Request, exc: NumerologyInvariantError) -> JSONResponse:
    logger.error("Numerology invariant broken on %s | code=%s", request.url.path, exc.code, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLogMiddleware)

if settings.cors_origins():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

app.include_router(health.router)
app.include_router(numerology.router)
