import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from matchday.api.endpoints import auth as auth_endpoints
from matchday.api.endpoints import users as user_endpoints
from matchday.api.endpoints import matches as match_endpoints
from matchday.api.endpoints import notifications as notification_endpoints
from matchday.api.endpoints import push as push_endpoints
from matchday.api.endpoints import scores as score_endpoints
from matchday.core.config import settings
from matchday.core.database import SessionLocal, init_database
from matchday.services.push_service import PushClient

# Set up logging
numeric_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Matchday API...")
    init_database()
    yield
    logger.info("Shutting down Matchday API")


app = FastAPI(title="Matchday Club API", lifespan=lifespan)

# One messaging client per process, handed to routes through get_push_client
app.state.push_client = PushClient.from_settings(settings, session_factory=SessionLocal)

# Include routers
app.include_router(auth_endpoints.router, prefix="/auth", tags=["Authentication"])
app.include_router(user_endpoints.router, prefix="/users", tags=["Users"])
app.include_router(match_endpoints.router, prefix="/matches", tags=["Matches"])
app.include_router(notification_endpoints.router, prefix="/notifications", tags=["Notifications"])
app.include_router(push_endpoints.router, prefix="/push", tags=["Push"])
app.include_router(score_endpoints.router, prefix="/scores", tags=["Scores"])


@app.get("/")
async def root():
    return {"message": "Matchday Club API"}


if __name__ == "__main__":
    uvicorn.run("matchday.main:app", host="0.0.0.0", port=8000, reload=True)
