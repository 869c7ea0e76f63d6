"""Entry-point tests: prompts go out, degraded defaults come back on failure."""

import pytest

from services.resume_analyzer import (
    analyze_resume,
    failed_analysis,
    job_similarity,
    role_analysis,
    suggest_role,
)

RESUME = """Jane Roe
Senior Software Engineer
- Led development of a React-based dashboard
SKILLS
JavaScript, TypeScript, React, Node.js, AWS, Docker
"""


@pytest.mark.asyncio
async def test_analyze_resume_json_reply(scripted_client):
    client = scripted_client(
        '{"score": 88, "strengths": ["Clear structure"], "full_analysis": "Good resume"}'
    )
    result = await analyze_resume(client, RESUME)

    assert result.model_dump() == {
        "score": 88,
        "strengths": ["Clear structure"],
        "weaknesses": [],
        "suggestions": [],
        "keywords_found": [],
        "keywords_missing": [],
        "full_analysis": "Good resume",
    }
    prompt = client.requests[0]["prompt"]
    assert "return JSON" in prompt
    assert "React-based dashboard" in prompt


@pytest.mark.asyncio
async def test_analyze_resume_text_reply_uses_heuristics(scripted_client):
    client = scripted_client("Score: 91\nStrengths:\n- Very clear project descriptions\n")
    result = await analyze_resume(client, RESUME)
    assert result.score == 91
    assert result.strengths == ["- Very clear project descriptions"]


@pytest.mark.asyncio
async def test_oversized_scores_degrade_to_defaults(scripted_client):
    client = scripted_client('{"score": 1' + "0" * 400 + "}")
    assert (await analyze_resume(client, RESUME)).score == 70

    client = scripted_client("Score: " + "9" * 5000)
    assert (await analyze_resume(client, RESUME)).score == 70

    client = scripted_client('{"score": 1e400, "explanation": "Too good"}')
    result = await job_similarity(client, RESUME, "React developer")
    assert result.score == 0.5
    assert result.explanation == "Too good"


@pytest.mark.asyncio
async def test_analyze_resume_exhausted_returns_defaults(scripted_client, sleeps):
    client = scripted_client(500)
    result = await analyze_resume(client, RESUME)

    assert result == failed_analysis()
    assert result.score == 70
    assert result.strengths == ["Could not analyze strengths"]
    assert result.keywords_found == []
    assert result.full_analysis == "Failed to analyze the resume. Please try again later."
    assert len(client.requests) == 3
    assert sleeps == [2.0, 4.0]


@pytest.mark.asyncio
async def test_suggest_role(scripted_client):
    client = scripted_client("  Frontend Developer  ")
    assert await suggest_role(client, RESUME) == "Frontend Developer"
    assert "suggest 1 IT role name only" in client.requests[0]["prompt"]


@pytest.mark.asyncio
async def test_suggest_role_empty_reply(scripted_client):
    client = scripted_client("   ")
    assert await suggest_role(client, RESUME) == "Software Developer"


@pytest.mark.asyncio
async def test_suggest_role_failure(scripted_client):
    client = scripted_client(503)
    assert await suggest_role(client, RESUME) == "Software Developer"


@pytest.mark.asyncio
async def test_job_similarity_json(scripted_client):
    client = scripted_client('{"score": 0.66, "explanation": "Missing Kubernetes"}')
    result = await job_similarity(client, RESUME, "Kubernetes platform engineer")
    assert result.score == 0.66
    assert result.explanation == "Missing Kubernetes"
    prompt = client.requests[0]["prompt"]
    assert "Kubernetes platform engineer" in prompt
    assert "Jane Roe" in prompt


@pytest.mark.asyncio
async def test_job_similarity_text_reply(scripted_client):
    client = scripted_client("The match score: 0.73 because the stack overlaps")
    result = await job_similarity(client, RESUME, "React developer")
    assert result.score == 0.73


@pytest.mark.asyncio
async def test_job_similarity_failure(scripted_client):
    client = scripted_client(500)
    result = await job_similarity(client, RESUME, "React developer")
    assert result.score == 0.5
    assert result.explanation == "Error calculating similarity"


@pytest.mark.asyncio
async def test_role_analysis_two_calls(scripted_client):
    body = "## Technical skills\n- Python\n## Soft skills\n- Communication"
    client = scripted_client("Data Engineer", body)
    result = await role_analysis(client, ["Python", "SQL", "Airflow"])

    assert result.role == "Data Engineer"
    assert result.analysis == body
    assert len(client.requests) == 2
    assert "Python, SQL, Airflow" in client.requests[0]["prompt"]
    second = client.requests[1]["prompt"]
    assert '"Data Engineer"' in second
    for heading in ("Technical skills", "Soft skills", "Tools", "Experience level",
                    "Certifications", "Career path", "Key responsibilities"):
        assert heading in second


@pytest.mark.asyncio
async def test_role_analysis_failure_on_second_call(scripted_client):
    client = scripted_client("Data Engineer", 500)
    result = await role_analysis(client, ["Python"])
    assert result.role == "Software Developer"
    assert result.analysis == "Failed to generate role analysis. Please try again later."
    assert len(client.requests) == 4
