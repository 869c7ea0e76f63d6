from pydantic import BaseModel, Field

DEFAULT_ROLE = "Software Developer"


class AnalysisResult(BaseModel):
    score: int = Field(default=70, ge=0, le=100)
    strengths: list[str] = []
    weaknesses: list[str] = []
    suggestions: list[str] = []
    keywords_found: list[str] = []
    keywords_missing: list[str] = []
    full_analysis: str = ""


class SimilarityResult(BaseModel):
    score: float = 0.5
    explanation: str = ""


class RoleAnalysis(BaseModel):
    role: str = DEFAULT_ROLE
    analysis: str = ""


class AnalysisRecord(AnalysisResult):
    """A stored analysis, as returned to the dashboard."""
    id: int
    resume_id: int
    created_at: str = ""
    suggested_role: str = ""
    similarity_score: float | None = None
    similarity_explanation: str | None = None
    job_description: str | None = None


class ResumeRecord(BaseModel):
    id: int
    user_id: str
    file_name: str
    file_url: str = ""
    content: str = ""
    created_at: str = ""
    analysis: AnalysisRecord | None = None


class ResumeSummary(BaseModel):
    id: int
    file_name: str
    created_at: str = ""
    score: int | None = None
    suggested_role: str | None = None


class UploadResponse(BaseModel):
    success: bool = True
    resume_id: int


class CompareResponse(BaseModel):
    success: bool = True
    score: float
    explanation: str


class RoleAnalysisResponse(BaseModel):
    success: bool = True
    role: str
    analysis: str
    skills: list[str] = []


class DeleteResponse(BaseModel):
    success: bool = True
