import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from jobfillr.api.v1.answers import router as answers_router
from jobfillr.api.v1.extension import router as extension_router
from jobfillr.api.v1.health import router as health_router
from jobfillr.api.v1.profile import router as profile_router
from jobfillr.api.v1.templates import router as templates_router
from jobfillr.core.cors import cors_allow_origin_regex, cors_allowed_origins
from jobfillr.core.errors import InvalidInput, StoreUnavailable, UnknownTemplate
from jobfillr.core.rate_limit import limiter
from jobfillr.core.config import settings
from jobfillr.core.lifespan import lifespan

logger = logging.getLogger(__name__)

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="JobFillr Autofill API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(UnknownTemplate)
async def unknown_template_handler(request: Request, exc: UnknownTemplate):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error("store_unavailable path=%s error=%s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Profile store is temporarily unavailable."},
    )


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(templates_router, prefix="/v1", tags=["Templates"])
app.include_router(extension_router, prefix="/v1", tags=["Extension"])
app.include_router(answers_router, prefix="/v1", tags=["Answers"])
app.include_router(profile_router, prefix="/v1", tags=["Profile"])
