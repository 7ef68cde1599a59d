import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.db import Base, engine
from app.core.errors import InvalidValueError, MissingFieldError
from app.core.logging import setup_logging
from app.api.v1.health import router as health_router
from app.api.v1.measurements import router as measurements_router

setup_logging()
logger = logging.getLogger(__name__)


app = FastAPI(title="Health Metrics", version="1.0.0")

if engine:
    Base.metadata.create_all(bind=engine)

app.include_router(health_router, prefix="/api")
app.include_router(measurements_router, prefix="/api")


# Every error body is {"error": <message>}, optionally with the offending field(s)

@app.exception_handler(MissingFieldError)
async def missing_field_handler(request: Request, exc: MissingFieldError):
    return JSONResponse(status_code=400, content={"error": exc.message, "fields": exc.fields})


@app.exception_handler(InvalidValueError)
async def invalid_value_handler(request: Request, exc: InvalidValueError):
    content = {"error": exc.message}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)
