import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.routers.events import router as events_router
from app.routers.logs import router as logs_router
from app.routers.scan import limiter, router as scan_router

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
        # The OpenAI client logs every request at INFO
        "loggers": {"httpx": {"level": "WARNING"}},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Spellscan API",
    description=(
        "Scans a site's exported content for spelling mistakes (via a language model), "
        "SEO metadata defects and broken links, and keeps a JSON log per page and scan."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(scan_router)
app.include_router(logs_router)
app.include_router(events_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from Site Spellscan"}
