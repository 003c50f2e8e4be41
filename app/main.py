from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from app.routers import health, pages, admin_auth
from app.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

def warn_on_generated_jwt_secret(settings) -> bool:
    """Each worker draws its own secret when none is configured, so tokens do not cross workers."""
    if settings.jwt_secret_generated:
        logger.warning(
            "JWT_SECRET_KEY is not set; using a per-process secret. "
            "Admin tokens will not survive restarts or be shared between workers"
        )
        return True
    return False

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema is provisioned out of band by init_db.py
    logger.info("Starting %s (environment: %s)", settings.APP_NAME, settings.ENVIRONMENT)
    warn_on_generated_jwt_secret(settings)
    yield
    logger.info("Shutting down %s", settings.APP_NAME)

app = FastAPI(
    title=settings.APP_NAME,
    description="Customer information management and QR code check-in demo",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(pages.router)
app.include_router(admin_auth.router)
