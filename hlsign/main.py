"""
Hyperliquid Signing Service
FastAPI application for hashing and signing Hyperliquid L1 actions
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from hlsign import __version__
from hlsign.config import settings
from hlsign.middleware import RateLimitMiddleware, LoggingMiddleware
from hlsign.routes import health, signing

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("🚀 Starting Hyperliquid Signing Service")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Hyperliquid Testnet: {settings.hyperliquid_testnet}")
    logger.info(f"Signature self-verification: {settings.verify_signatures}")
    logger.info(f"CORS Origins: {settings.cors_origins}")

    yield

    logger.info("🛑 Shutting down Hyperliquid Signing Service")


app = FastAPI(
    title="Hyperliquid Signing Service",
    description="""
    Signing service for Hyperliquid L1 actions.

    Actions are serialized in the exchange's binary format, hashed together
    with the nonce and optional vault address, wrapped in an EIP-712 phantom
    agent and signed with the caller's key.

    * Private keys are processed in-memory only and never logged
    * Every signature is recovered before it is returned
    * Rate limiting prevents abuse
    """,
    version=__version__,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(RateLimitMiddleware, requests_per_minute=settings.rate_limit_per_minute)

app.include_router(health.router)
app.include_router(signing.router)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint redirect to docs"""
    return {
        "service": "Hyperliquid Signing Service",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


def run():
    import uvicorn

    uvicorn.run(
        "hlsign.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
