from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware import Middleware
from contextlib import asynccontextmanager
import time

from app.core.config import settings
from app.core.exceptions import register_exception_handlers, unhandled_error_handler
from app.core.logging_config import setup_logging
from .database import engine, Base
from .routers import customers

logger = setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Startup: Database tables checked/created")
    yield


middleware = [
    Middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS),
    Middleware(CORSMiddleware,
               allow_origins=settings.CORS_ORIGINS,
               allow_credentials=True,
               allow_methods=["*"],
               allow_headers=["*"]),

    Middleware(GZipMiddleware, minimum_size=1000)
]

app = FastAPI(
    title="Customer Accounts Api",
    description="Customer signup, login, OTP verification and profile",
    version="1.0.0",
    lifespan=lifespan,
    middleware=middleware
)

register_exception_handlers(app)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    try:
        response = await call_next(request)
    except Exception as exc:
        response = await unhandled_error_handler(request, exc)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    return response


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info("%s %s -> %s (%.3fs)", request.method, request.url.path, response.status_code, process_time)
    return response


app.include_router(customers.router, prefix="/customer", tags=["Customer"])


@app.get("/")
def health_check():
    return {"status": "ok", "message": "Nice and Healthy"}
