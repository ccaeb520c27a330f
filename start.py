#!/usr/bin/env python3
"""
Startup script for the Canadian Product Lookup backend.
Checks storage connectivity, then starts the server.
"""

import asyncio
import sys

import uvicorn
import structlog
from sqlalchemy import text

from app.core.config import settings
from app.db.database import async_engine
from app.cache.redis_client import redis_client
from app.services.lookup import LookupConfig

logger = structlog.get_logger(__name__)


async def check_database_connection():
    """Check if database is accessible."""
    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
    finally:
        await async_engine.dispose()


async def check_redis_connection():
    """Check if Redis is accessible."""
    try:
        connected = await redis_client.ping()
        if connected:
            logger.info("Redis connection successful")
            await redis_client.disconnect()
        return connected
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        return False


async def initialize_services():
    """Check the persistence backend and report enabled sources."""
    logger.info("Initializing lookup backend services...")

    if settings.persistence_backend == "redis":
        if not await check_redis_connection():
            logger.error("Cannot start without Redis connection")
            return False
    elif not await check_database_connection():
        logger.error("Cannot start without database connection")
        return False

    config = LookupConfig.from_settings(settings)
    logger.info(
        "Lookup sources",
        upc_database=config.upc_database_enabled,
        go_upc=config.go_upc_enabled,
        web_search=config.web_search_enabled
    )

    logger.info("All services initialized successfully")
    return True


def start_development_server():
    """Start the development server with hot reload."""
    logger.info("Starting lookup backend in development mode...")

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        reload_dirs=["app"],
        log_level=settings.log_level.lower(),
        access_log=True,
        use_colors=True,
        loop="asyncio"
    )


def start_production_server():
    """Start the production server."""
    logger.info("Starting lookup backend in production mode...")

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level="warning",
        access_log=False,
        loop="asyncio"
    )


def main():
    """Main startup function."""
    logger.info("Starting Canadian Product Lookup backend")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")

    if not asyncio.run(initialize_services()):
        logger.error("Service initialization failed")
        sys.exit(1)

    if settings.environment == "development":
        start_development_server()
    else:
        start_production_server()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error(f"Server startup failed: {e}")
        sys.exit(1)
