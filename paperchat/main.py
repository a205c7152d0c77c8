import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from paperchat.core.config import settings
from paperchat.core.errors import ConfigurationError
from paperchat.routes import chat, feedback, health, sample, suggestions, upload
from paperchat.services.llm_client import require_api_key

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO), format='%(asctime)s %(levelname)s %(name)s: %(message)s')

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The key is checked again per request; this only surfaces misconfiguration early
    try:
        require_api_key(settings.OPENAI_API_KEY)
    except ConfigurationError as e:
        logger.warning("%s Chat and suggestions will fail until it is set.", e)
    yield


app = FastAPI(title="PaperChat API", version="0.1.0", lifespan=lifespan)


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        detail = "Method not allowed"
    else:
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


# Routers
app.include_router(health.router, tags=["meta"])
app.include_router(upload.router, tags=["documents"])
app.include_router(sample.router, tags=["documents"])
app.include_router(chat.router, tags=["chat"])
app.include_router(suggestions.router, tags=["chat"])
app.include_router(feedback.router, tags=["chat"])


@app.get("/")
async def root():
    return {"name": app.title, "version": app.version}
