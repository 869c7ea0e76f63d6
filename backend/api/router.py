import asyncio
import logging

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_current_user_id, get_ollama_client, get_repository
from config import settings
from db.repository import ResumeRepository
from models.requests import CompareRequest, RoleAnalysisRequest
from models.responses import (
    AnalysisResult,
    CompareResponse,
    DeleteResponse,
    ResumeRecord,
    ResumeSummary,
    RoleAnalysisResponse,
    UploadResponse,
)
from services import resume_analyzer, text_extractor
from services.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def _owned_resume(repo: ResumeRepository, resume_id: int, user_id: str) -> ResumeRecord:
    resume = repo.get_resume_with_analysis(resume_id)
    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")
    if resume.user_id != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return resume


def _store_upload(
    repo: ResumeRepository,
    user_id: str,
    email: str,
    name: str,
    file_name: str,
    resume_text: str,
    analysis: AnalysisResult,
    suggested_role: str,
) -> int:
    repo.get_or_create_user(user_id, email, name)
    resume_id = repo.create_resume(user_id, file_name, "", resume_text)
    repo.create_analysis(resume_id, analysis, suggested_role)
    return resume_id


@router.get("/health")
async def health(request: Request):
    client: OllamaClient = request.app.state.ollama_client
    return {
        "status": "ok",
        "ollama_url": client.config.url,
        "model": client.config.model,
    }


@router.post("/resumes", response_model=UploadResponse)
@limiter.limit(settings.rate_limit)
async def upload_resume(
    request: Request,
    file: UploadFile | None = File(default=None),
    file_name: str | None = Form(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    user_id: str = Depends(get_current_user_id),
    client: OllamaClient = Depends(get_ollama_client),
    repo: ResumeRepository = Depends(get_repository),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="Missing file or file name")
    name = (file_name or file.filename).strip()

    content = await file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )

    try:
        resume_text = text_extractor.extract_resume_text(file.filename, content)
    except text_extractor.UnsupportedFileType as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Could not parse uploaded file %s", file.filename)
        raise HTTPException(status_code=400, detail="Could not parse resume file")

    if not resume_text.strip():
        raise HTTPException(status_code=400, detail="No text could be extracted from file")

    logger.info("Starting analysis of %s for user %s", name, user_id)
    analysis = await resume_analyzer.analyze_resume(client, resume_text)
    suggested_role = await resume_analyzer.suggest_role(client, resume_text)

    resume_id = await asyncio.to_thread(
        _store_upload, repo, user_id, x_user_email or "", x_user_name or "",
        name, resume_text, analysis, suggested_role,
    )
    logger.info("Stored analysis for resume %d (score=%d, role=%s)", resume_id, analysis.score, suggested_role)

    return UploadResponse(resume_id=resume_id)


@router.get("/resumes", response_model=list[ResumeSummary])
def list_resumes(
    user_id: str = Depends(get_current_user_id),
    repo: ResumeRepository = Depends(get_repository),
):
    return repo.get_user_resumes(user_id)


@router.get("/resumes/{resume_id}", response_model=ResumeRecord)
def get_resume(
    resume_id: int,
    user_id: str = Depends(get_current_user_id),
    repo: ResumeRepository = Depends(get_repository),
):
    return _owned_resume(repo, resume_id, user_id)


@router.post("/resumes/{resume_id}/compare", response_model=CompareResponse)
@limiter.limit(settings.rate_limit)
async def compare_with_job_description(
    request: Request,
    resume_id: int,
    body: CompareRequest,
    user_id: str = Depends(get_current_user_id),
    client: OllamaClient = Depends(get_ollama_client),
    repo: ResumeRepository = Depends(get_repository),
):
    resume = await asyncio.to_thread(_owned_resume, repo, resume_id, user_id)
    if resume.analysis is None:
        raise HTTPException(status_code=404, detail="Resume has no analysis")

    result = await resume_analyzer.job_similarity(client, resume.content, body.job_description)
    await asyncio.to_thread(
        repo.update_analysis_with_job_similarity,
        resume.analysis.id, body.job_description, result.score, result.explanation
    )
    return CompareResponse(score=result.score, explanation=result.explanation)


@router.delete("/resumes/{resume_id}", response_model=DeleteResponse)
def delete_resume(
    resume_id: int,
    user_id: str = Depends(get_current_user_id),
    repo: ResumeRepository = Depends(get_repository),
):
    _owned_resume(repo, resume_id, user_id)
    repo.delete_resume(resume_id)
    return DeleteResponse()


@router.post("/roles/analyze", response_model=RoleAnalysisResponse)
@limiter.limit(settings.rate_limit)
async def analyze_role(
    request: Request,
    body: RoleAnalysisRequest,
    user_id: str = Depends(get_current_user_id),
    client: OllamaClient = Depends(get_ollama_client),
):
    skills = [s.strip() for s in body.skills.split(",") if s.strip()]
    if not skills:
        raise HTTPException(status_code=400, detail="At least one skill is required")

    result = await resume_analyzer.role_analysis(client, skills)
    return RoleAnalysisResponse(role=result.role, analysis=result.analysis, skills=skills)
