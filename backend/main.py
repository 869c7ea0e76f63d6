import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api import mock_ollama
from api.router import limiter, router
from config import OllamaConfig, settings
from db.repository import ResumeRepository
from services.ollama_client import OllamaClient

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = OllamaConfig.from_settings(settings)
    app.state.ollama_client = OllamaClient(config)
    app.state.repository = ResumeRepository(settings.database_path)
    logger.info("Using text-generation endpoint %s (model=%s)", config.url, config.model)
    yield
    app.state.repository.close()


app = FastAPI(
    title="Resume Feedback API",
    description="LLM-backed resume review, job matching and role analysis",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(router)
app.include_router(mock_ollama.router)
