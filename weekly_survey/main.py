# weekly_survey/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weekly_survey.core.config import settings
from weekly_survey.core.logging import setup_logging
from weekly_survey.api.v1.endpoints import auth, health, insights, submissions, surveys, users
from weekly_survey.db.session import check_db_connection, init_db

setup_logging()
logger = logging.getLogger("weekly_survey")

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # en dev/SQLite se crean las tablas; en prod las crea Alembic
    if settings.ENV == "dev":
        init_db()
    check_db_connection()
    logger.info("%s iniciada (env=%s)", settings.APP_NAME, settings.ENV)
    yield
    logger.info("%s detenida", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="API de encuestas semanales: preguntas de estrellas y de texto, respuestas y análisis",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS (en prod: restringe orígenes con CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s - %s - %.0fms", request.method, request.url.path, response.status_code, ms)
    return response


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    # nunca devolver detalles internos al cliente
    logger.exception("Error no controlado en %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router,      prefix=API_PREFIX)
app.include_router(auth.router,        prefix=API_PREFIX)
app.include_router(surveys.router,     prefix=API_PREFIX)
app.include_router(submissions.router, prefix=API_PREFIX)
app.include_router(insights.router,    prefix=API_PREFIX)
app.include_router(users.router,       prefix=API_PREFIX)


@app.get("/")
def root():
    return {
        "message": "Weekly Survey API",
        "version": "1.0.0",
        "docs": "/docs",
        "api": API_PREFIX,
    }
