"""Shared dependencies for API routes."""

from fastapi import Header, HTTPException, Request

from db.repository import ResumeRepository
from services.ollama_client import OllamaClient


def get_ollama_client(request: Request) -> OllamaClient:
    return request.app.state.ollama_client


def get_repository(request: Request) -> ResumeRepository:
    return request.app.state.repository


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity as forwarded by the auth layer in front of this service."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()
