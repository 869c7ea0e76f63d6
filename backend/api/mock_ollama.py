"""Canned text-generation endpoint for local development.

Point ``OLLAMA_URL`` at ``/mock-ollama`` and set ``DEBUG=true`` to run the
service without a live model. Replies are keyed off the prompt wording in
``services.prompt_builder``.
"""

import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from config import settings
from models.requests import GenerateRequest
from models.responses import DEFAULT_ROLE

logger = logging.getLogger(__name__)

router = APIRouter()

# First keyword hit wins.
ROLE_KEYWORDS = [
    ("react", "Frontend Developer"),
    ("node.js", "Backend Developer"),
    ("aws", "DevOps Engineer"),
    ("data", "Data Engineer"),
]

MOCK_ANALYSIS = {
    "score": 75,
    "strengths": ["Relevant technical skills listed", "Clear work history"],
    "weaknesses": ["Few quantified achievements"],
    "suggestions": ["Add measurable outcomes to each role"],
    "keywords_found": [],
    "keywords_missing": ["Testing", "CI/CD"],
    "full_analysis": "Mock analysis generated without a live model.",
}
MOCK_SIMILARITY = {
    "score": 0.55,
    "explanation": "Skills partially match the job requirements",
}
FALLBACK_REPLY = "I'm not sure how to respond to that prompt."


def guess_role(text: str) -> str:
    lowered = text.lower()
    for keyword, role in ROLE_KEYWORDS:
        if keyword in lowered:
            return role
    return DEFAULT_ROLE


def mock_reply(prompt: str) -> str:
    if prompt.startswith("Based on these skills, suggest 1 IT role"):
        return guess_role(prompt.split(":", 1)[1])
    if prompt.startswith("Suggest 1 IT role name for these skills"):
        return guess_role(prompt.split(":", 1)[1])
    if prompt.startswith("Compare resume to job description"):
        return json.dumps(MOCK_SIMILARITY)
    if "Analyze this resume" in prompt:
        resume = prompt.split("Resume:", 1)[-1]
        found = [kw for kw, _ in ROLE_KEYWORDS if kw in resume.lower()]
        return json.dumps({**MOCK_ANALYSIS, "keywords_found": found})
    if prompt.startswith("For the IT role"):
        return "## Technical skills\n- Mock data, no live model configured"
    return FALLBACK_REPLY


@router.post("/mock-ollama")
async def mock_generate(body: GenerateRequest):
    if not settings.debug:
        raise HTTPException(status_code=404, detail="Not Found")
    logger.debug("Mock generation for model %s", body.model)
    return {
        "model": body.model,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "response": mock_reply(body.prompt),
        "done": True,
    }
