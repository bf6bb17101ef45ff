import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from app.api.v1.health import router as health_router
from app.api.v1.analyze import router as analyze_router
from app.api.v1.interview import router as interview_router
from app.api.v1.recommendations import router as recommendations_router
from app.api.v1.users import router as users_router
from app.core.cors import cors_middleware_options
from app.core.errors import register_exception_handlers
from app.core.rate_limit import limiter
from app.core.config import settings
from app.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="RagebaitResume API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **cors_middleware_options())
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
register_exception_handlers(app)


@app.get("/", include_in_schema=False)
async def root():
    return {"message": "RagebaitResume API is running"}


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(analyze_router, prefix="/v1", tags=["Analyze"])
app.include_router(interview_router, prefix="/v1", tags=["Interview"])
app.include_router(recommendations_router, prefix="/v1", tags=["Recommendations"])
app.include_router(users_router, prefix="/v1", tags=["Users"])
# Path used by the original web client.
app.include_router(analyze_router, prefix="/api", include_in_schema=False)
