import logging
from contextlib import AsyncExitStack

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.connections import mongo_lifespan
from app.connections.redis import redis_lifespan
from app.api.admin import router as admin_router
from app.api.task import router as task_router
from app.api.user import router as user_router
from app.utils.config import settings


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def combined_lifespan(app: FastAPI):
    async with AsyncExitStack() as stack:
        await stack.enter_async_context(mongo_lifespan(app))
        await stack.enter_async_context(redis_lifespan(app))

        yield


app = FastAPI(title="Task Manager API", version="1.0.0", lifespan=combined_lifespan)

# Cookie sessions from the browser frontend need credentialed CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report the first offending field, e.g. "email: Field required"
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Something went wrong!"})


app.include_router(user_router, prefix=settings.api_prefix)
app.include_router(task_router, prefix=settings.api_prefix)
app.include_router(admin_router, prefix=settings.api_prefix)
