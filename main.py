# main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from prelovin.core.config import settings
from prelovin.core.error_handlers import setup_error_handlers, add_request_id_middleware, error_body
from prelovin.core.exceptions import ErrorCode
from prelovin.core.rate_limiter import limiter
from prelovin.api.main import api_router
from prelovin.database.core import Base, engine
from prelovin.logging import logger

# Register every table on Base.metadata
from prelovin.database import models  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables if they do not exist")
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("Shutting down, disposing database engine")
    engine.dispose()


def rate_limit_exceeded_handler(request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content=error_body(
            ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "Too many requests. Please try again later.",
            context={"limit": str(exc.detail)},
        ),
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    setup_error_handlers(app)
    app.middleware("http")(add_request_id_middleware)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting {settings.API_TITLE} on {settings.HOST}:{settings.PORT}")
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
