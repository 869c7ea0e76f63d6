"""Public entry points: resume review, role suggestion, job match, role deep dive.

Each entry point calls the inference client through ``try_generate`` and
swaps an exhausted call for a fully populated default result. Callers
always get a well-formed object back.
"""

import logging

from models.responses import DEFAULT_ROLE, AnalysisResult, RoleAnalysis, SimilarityResult
from services import prompt_builder
from services.ollama_client import OllamaClient
from services.response_parser import parse_analysis, parse_similarity

logger = logging.getLogger(__name__)

ANALYSIS_TIMEOUT_MS = 180000
ROLE_TIMEOUT_MS = 60000
SIMILARITY_TIMEOUT_MS = 120000
ROLE_ANALYSIS_TIMEOUT_MS = 120000

SIMILARITY_ERROR_EXPLANATION = "Error calculating similarity"
ROLE_ANALYSIS_ERROR = "Failed to generate role analysis. Please try again later."


def failed_analysis() -> AnalysisResult:
    return AnalysisResult(
        score=70,
        strengths=["Could not analyze strengths"],
        weaknesses=["Could not analyze weaknesses"],
        suggestions=["Could not generate suggestions"],
        keywords_found=[],
        keywords_missing=[],
        full_analysis="Failed to analyze the resume. Please try again later.",
    )


async def analyze_resume(client: OllamaClient, resume_text: str) -> AnalysisResult:
    prompt = prompt_builder.build_analysis_prompt(resume_text)
    outcome = await client.try_generate(prompt, timeout_ms=ANALYSIS_TIMEOUT_MS)
    if not outcome.ok:
        logger.warning("Resume analysis unavailable, returning defaults: %s", outcome.error)
        return failed_analysis()
    return parse_analysis(outcome.text)


async def suggest_role(client: OllamaClient, resume_text: str) -> str:
    prompt = prompt_builder.build_role_suggestion_prompt(resume_text)
    outcome = await client.try_generate(prompt, timeout_ms=ROLE_TIMEOUT_MS)
    if not outcome.ok:
        logger.warning("Role suggestion unavailable, using %r: %s", DEFAULT_ROLE, outcome.error)
        return DEFAULT_ROLE
    return outcome.text or DEFAULT_ROLE


async def job_similarity(
    client: OllamaClient, resume_text: str, job_description: str
) -> SimilarityResult:
    prompt = prompt_builder.build_similarity_prompt(resume_text, job_description)
    outcome = await client.try_generate(prompt, timeout_ms=SIMILARITY_TIMEOUT_MS)
    if not outcome.ok:
        logger.warning("Job similarity unavailable, returning defaults: %s", outcome.error)
        return SimilarityResult(score=0.5, explanation=SIMILARITY_ERROR_EXPLANATION)
    return parse_similarity(outcome.text)


async def role_analysis(client: OllamaClient, skills: list[str]) -> RoleAnalysis:
    """Pick a role for the skills, then ask for a markdown breakdown of it.

    A failure in either call yields the default role and error text.
    """
    role_outcome = await client.try_generate(
        prompt_builder.build_role_name_prompt(skills), timeout_ms=ROLE_TIMEOUT_MS
    )
    if not role_outcome.ok:
        logger.warning("Role name unavailable: %s", role_outcome.error)
        return RoleAnalysis(role=DEFAULT_ROLE, analysis=ROLE_ANALYSIS_ERROR)

    role = role_outcome.text or DEFAULT_ROLE
    analysis_outcome = await client.try_generate(
        prompt_builder.build_role_analysis_prompt(role), timeout_ms=ROLE_ANALYSIS_TIMEOUT_MS
    )
    if not analysis_outcome.ok:
        logger.warning("Role analysis for %r unavailable: %s", role, analysis_outcome.error)
        return RoleAnalysis(role=DEFAULT_ROLE, analysis=ROLE_ANALYSIS_ERROR)

    return RoleAnalysis(role=role, analysis=analysis_outcome.text)
