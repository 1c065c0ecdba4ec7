"""
Storefront Application

Portfolio e-commerce backend: catalog, per-user server carts, hosted
checkout sessions and webhook-driven order creation.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .config import settings
from .routes import (
    account_router,
    cart_router,
    checkout_router,
    orders_router,
    products_router,
    webhooks_router,
)
from .security.session_auth import SessionAuthMiddleware, get_session_verifier

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront starting up...")
    logger.info(f"Session verification: {'enabled' if session_verifier.enabled else 'disabled'}")
    logger.info(f"Webhooks configured: {settings.webhooks_configured}")
    yield
    logger.info("Storefront shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Portfolio storefront with server-synced carts",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.base_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session middleware
session_verifier = get_session_verifier()
app.add_middleware(SessionAuthMiddleware, verifier=session_verifier)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(orders_router)
app.include_router(account_router)
app.include_router(webhooks_router)


@app.get("/")
async def home():
    """API index"""
    return {
        "message": "Storefront API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "checkout": "/api/checkout/session",
            "orders": "/api/orders",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "storefront"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
