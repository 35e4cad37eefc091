import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import bierzmowanie.models  # noqa: F401
from bierzmowanie.core.config import settings
from bierzmowanie.core.db import Database
from bierzmowanie.core.errors import register_exception_handlers
from bierzmowanie.core.logging import configure_logging
from bierzmowanie.routers import accounts as accounts_router
from bierzmowanie.routers import auth as auth_router
from bierzmowanie.routers import candidates as candidates_router
from bierzmowanie.routers import groups as groups_router

configure_logging()

app = FastAPI(title="Bierzmowanie API", version="0.1.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router.router)
app.include_router(candidates_router.router)
app.include_router(accounts_router.router)
app.include_router(groups_router.router)


@app.on_event("startup")
def open_database() -> None:
    app.state.database = Database.from_settings().open()
    logger.info("startup_complete", extra={"environment": settings.ENVIRONMENT})


@app.on_event("shutdown")
def close_database() -> None:
    database = getattr(app.state, "database", None)
    if database is not None:
        database.close()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}
