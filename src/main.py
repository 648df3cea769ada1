import logging
import structlog
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from .api.dependencies import get_crawl_pipeline
from .api.v1.endpoints import crawl, health
from .api.v1.router import api_router
from .api.v1.schemas import CrawlErrorResponse, CrawlRunResponse
from .config import get_settings
from .news.catalog import load_catalog
from .news.services.clients import ServiceClients
from .news.services.crawl_pipeline import CrawlPipeline


CLIENT_LOGGERS = ("httpx", "httpcore", "openai")


def apply_logging_preferences(settings):
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    if settings.suppress_client_logs:
        for name in CLIENT_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s"
)

apply_logging_preferences(settings)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    apply_logging_preferences(settings)
    logger.info("Starting News Digest API", version="0.1.0")

    app.state.catalog = load_catalog(settings.news_sites_file)
    app.state.clients = ServiceClients.from_settings(settings)
    logger.info(
        "News digest configured",
        countries=len(app.state.catalog),
        random_countries=settings.random_countries,
        headlines_per_site=settings.headlines_per_site,
        concurrency=settings.concurrency,
    )

    yield

    await app.state.clients.close()
    logger.info("Shutting down News Digest API")


def create_application() -> FastAPI:
    app = FastAPI(
        title="News Digest",
        description="Picks random countries, summarizes their top headlines with an LLM and saves them to Notion",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "An unexpected error occurred. Please try again later.",
                "error": str(exc),
            }
        )

    # Health check at root
    app.include_router(health.router, tags=["health"])

    # Scheduler trigger at root
    @app.get("/", response_model=CrawlRunResponse, responses={500: {"model": CrawlErrorResponse}}, tags=["crawl"])
    async def scheduled_crawl(pipeline: CrawlPipeline = Depends(get_crawl_pipeline)):
        return await crawl.run_crawl(pipeline)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )
