"""
api.main
========

HTTP layer over the company and user repositories.

Run with ``uvicorn api.main:app``.  When ``JUNGLESALES_API_RUN_SCHEDULER``
is true the daily decay job runs on a background thread for the life of
the process.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from junglesales import __version__
from junglesales.db import create_all
from junglesales.scheduler import DecayScheduler
from junglesales.settings import API_HOST, API_PORT, settings

from .companies import router as companies_router
from .users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_all()
    scheduler = None
    if settings.api_run_scheduler:
        scheduler = DecayScheduler()
        scheduler.start()
        logger.info("decay scheduler running in API process at %s daily", settings.decay_at)
    yield
    if scheduler is not None:
        scheduler.stop(timeout=5)


app = FastAPI(
    title="Jungle Sales API",
    version=__version__,
    description="Register companies and follow their countdown to the graveyard.",
    lifespan=lifespan,
)

# --- Include Routers ----------------------------------------------------------
app.include_router(users_router)
app.include_router(companies_router)


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "Jungle Sales API is alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT)
