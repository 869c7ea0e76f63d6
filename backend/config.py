import os
from dataclasses import dataclass

from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    ollama_url: str = "http://localhost:11434/api/generate"
    ollama_model: str = "mistral:latest"
    ollama_retries: int = 3
    ollama_timeout_ms: int = 120000

    database_path: str = "data/resume_feedback.db"
    max_upload_size_mb: int = 5
    rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    log_level: str = "INFO"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@dataclass(frozen=True)
class OllamaConfig:
    """Connection settings for the text-generation endpoint.

    Built once at process start and handed to the client constructor.
    """
    url: str
    model: str
    retries: int = 3
    timeout_ms: int = 120000

    @classmethod
    def from_settings(cls, s: "Settings") -> "OllamaConfig":
        return cls(
            url=s.ollama_url,
            model=s.ollama_model,
            retries=s.ollama_retries,
            timeout_ms=s.ollama_timeout_ms,
        )


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
