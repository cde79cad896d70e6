from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .catalog import build_registry
from .gateway.client import MarketplaceClient
from .gateway.exceptions import ConfigurationError, MarketplaceError
from .logging_config import configure_logging
from .mcp_transport import router as mcp_router
from .registry.exceptions import ToolNotFoundError


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    # Startup: fail before serving anything if the API key is missing
    http_client = httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT_SECONDS)
    try:
        marketplace_client = MarketplaceClient(settings, http_client=http_client)
    except ConfigurationError:
        await http_client.aclose()
        raise

    app.state.marketplace_client = marketplace_client
    app.state.tool_registry = build_registry(marketplace_client)

    yield

    # Shutdown: close the shared HTTP client
    await http_client.aclose()

app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Global exception handlers
@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(
        status_code=500,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(ToolNotFoundError)
async def tool_not_found_handler(request: Request, exc: ToolNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(MarketplaceError)
async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
    return JSONResponse(
        status_code=502,
        content={"error": exc.code, "message": exc.message}
    )

@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}

# Include routers
app.include_router(mcp_router)
