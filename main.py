from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import opportunities, accounts, activities, users, config, auth, ai
from app.api.health import router as health_router
from app.core.config import settings
from app.core.database import engine, init_db
from app.core.logging import setup_logging, get_logger
from app.core.middleware import RequestLoggingMiddleware, ErrorHandlingMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Startup - create tables
    await init_db()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")

    yield

    # Shutdown
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Sales pipeline sync gateway with AI lead advisory",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Add middleware (order matters - last added = first executed)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(opportunities.router, prefix="/api/opportunities", tags=["opportunities"])
app.include_router(accounts.router, prefix="/api", tags=["accounts"])
app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(config.router, prefix="/api/config", tags=["config"])
app.include_router(ai.router, prefix="/api/ai", tags=["ai"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
