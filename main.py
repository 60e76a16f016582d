"""Main FastAPI application"""
import logging
import logging.config
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from config import get_settings
from routes import router as entries_router
from utils.error_handlers import register_error_handlers

settings = get_settings()

# --- Unified Logging Configuration with Rich ---
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "level": "DEBUG",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
            "markup": False,
        },
    },
    "loggers": {
        "uvicorn": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "": {  # Root logger for our application
            "handlers": ["default"],
            "level": settings.LOG_LEVEL,
            "propagate": False,
        },
    },
}

logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Connect to MongoDB. The client is held for the life of the process.
    logger.info(f"Connecting to MongoDB database '{settings.DB_NAME}'...")
    # tz_aware: stored dates come back as UTC-aware datetimes
    app.state.db_client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
    app.state.entries_collection = None
    try:
        await app.state.db_client.admin.command("ping")
        db = app.state.db_client[settings.DB_NAME]
        app.state.entries_collection = db.get_collection(settings.ENTRIES_COLLECTION)
        logger.info(f"MongoDB ping successful. Using collection '{settings.ENTRIES_COLLECTION}'.")
    except PyMongoError as e:
        # Requests answer 503 until the process is restarted with a reachable database
        logger.error(f"Failed to connect to MongoDB: {e}")

    yield

    logger.info("Closing MongoDB connection...")
    app.state.db_client.close()
    logger.info("MongoDB connection closed.")


app = FastAPI(
    title=settings.APP_NAME,
    description="CRUD API for ledger entries stored in MongoDB.",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entries_router, prefix="/api", tags=["entries"])

register_error_handlers(app)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"server listening on port {settings.PORT}")
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )
