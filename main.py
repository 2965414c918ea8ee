import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.logging_config import configure_logging
from core.database import SessionLocal, init_db

from jobrole.router import jobrole_router
from employee.router import employee_router
from staffing.router import rule_router
from staffrequest.router import request_router
from schedule.router import schedule_router
from staffing.service import seed_default_rules
import models_bootstrap

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.CREATE_TABLES_ON_STARTUP:
        init_db()
    if settings.SEED_DEFAULT_RULES:
        with SessionLocal() as db:
            seed_default_rules(db)
    logger.info("%s ready", settings.PROJECT_NAME)
    yield


openapi_tags = [
    {
        "name": "Schedule",
        "description": "Weekly schedule generation, edits and reports",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title=settings.PROJECT_NAME, openapi_tags=openapi_tags, lifespan=lifespan)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(jobrole_router, prefix="/api")
app.include_router(employee_router, prefix="/api")
app.include_router(rule_router, prefix="/api")
app.include_router(request_router, prefix="/api")
app.include_router(schedule_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
