import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from factory_telemetry.api.v1 import alertApi, ruleApi, sensorApi, visionApi
from factory_telemetry.core.config import get_settings
from factory_telemetry.core.db_connect import Database
from factory_telemetry.core.exceptions import TelemetryError
from factory_telemetry.core.logger_config import configure_logging
from factory_telemetry.models import Base

settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.PROJECT_NAME} starting...")
    database = Database.from_settings(settings)
    app.state.database = database
    if database is not None and settings.AUTO_CREATE_TABLES:
        await database.create_all(Base.metadata)
        logger.info("Telemetry tables ready")
    try:
        yield
    finally:
        if database is not None:
            await database.dispose()
        logger.info("Shutdown complete")


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sensorApi.router, prefix=settings.API_PREFIX, tags=["sensorApi"])
app.include_router(ruleApi.router, prefix=settings.API_PREFIX, tags=["ruleApi"])
app.include_router(alertApi.router, prefix=settings.API_PREFIX, tags=["alertApi"])
app.include_router(visionApi.router, prefix=settings.API_PREFIX, tags=["visionApi"])


# every error leaves as {"error": <message>}

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(TelemetryError)
async def telemetry_error_handler(request: Request, exc: TelemetryError):
    logger.error(f"{request.method} {request.url.path} error: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"{request.method} {request.url.path} error")
    return JSONResponse(status_code=500, content={"error": str(exc)})


# database health check
@app.get("/health/db")
async def test_db_connection(request: Request):
    database = getattr(request.app.state, "database", None)
    if database is None:
        return JSONResponse(status_code=500, content={"status": "error", "detail": "Database not configured"})
    try:
        await database.ping()
        return {"status": "ok"}
    except SQLAlchemyError as e:
        return JSONResponse(status_code=500, content={"status": "error", "detail": str(e)})
