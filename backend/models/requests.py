from pydantic import BaseModel, Field


class CompareRequest(BaseModel):
    job_description: str = Field(..., min_length=1, max_length=10000, description="Job description text")


class RoleAnalysisRequest(BaseModel):
    skills: str = Field(..., max_length=2000, description="Comma-separated list of skills")


class GenerateRequest(BaseModel):
    """Body of a non-streaming text-generation call."""
    model: str = "mistral:latest"
    prompt: str
    stream: bool = False
