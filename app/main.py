import time
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError

# Load environment variables from .env file before anything else
load_dotenv()

from app.core.config import settings
from app.core.logging import setup_logging, request_id_ctx, user_id_ctx
from app.core.errors import DeadlineExceededError, DomainError, InvalidInputError, UnavailableError, user_message
from app.core.db import init_models
from app.api.router import api_router

setup_logging()
app = FastAPI(title=settings.APP_NAME)

logger = logging.getLogger(__name__)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    formatted_process_time = f"{process_time:.2f}ms"

    # set by get_principal on the shared request state
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        user_id_ctx.set(user_id)

    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {formatted_process_time}"
    )

    return response

# registered last so it runs first and the id is set for everything downstream
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id", "-")
    request_id_ctx.set(rid)
    response = await call_next(request)
    return response

def _operation_for(request: Request) -> str:
    return {"POST": "create", "PATCH": "update", "PUT": "update", "DELETE": "delete"}.get(request.method, "read")

def _error_response(err: DomainError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content={"code": err.code, "message": err.message})

@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} during {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} during {request.method} {request.url.path}")
    return _error_response(exc)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Invalid input for {request.method} {request.url.path}: {exc.errors()}")
    return _error_response(InvalidInputError(operation=_operation_for(request)))

@app.exception_handler(PoolTimeoutError)
async def storage_timeout_handler(request: Request, exc: PoolTimeoutError):
    logger.error(f"Storage timed out for request {request.method} {request.url.path}: {exc}")
    return _error_response(DeadlineExceededError(operation=_operation_for(request)))

@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def storage_unavailable_handler(request: Request, exc: Exception):
    logger.error(f"Storage unavailable for request {request.method} {request.url.path}", exc_info=True)
    return _error_response(UnavailableError(operation=_operation_for(request)))

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"code": "unknown", "message": user_message(None, _operation_for(request))},
    )

@app.on_event("startup")
async def on_startup():
    await init_models()


app.include_router(api_router, prefix=settings.API_PREFIX)
