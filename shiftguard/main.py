import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from shiftguard.core.config import settings
from shiftguard.core.logging_config import setup_logging
from shiftguard.db.database import engine
from shiftguard.db.models import Base
from shiftguard.api.routes import analytics, shifts, time_off_requests

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info(f"ShiftGuard API started ({settings.ENV})")
    yield


app = FastAPI(title="ShiftGuard API", version="0.1.0", lifespan=lifespan)

app.include_router(analytics.router, prefix="/api/v1")
app.include_router(shifts.router, prefix="/api/v1")
app.include_router(time_off_requests.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
