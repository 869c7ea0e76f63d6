"""All prompt templates for the text-generation endpoint."""


def build_analysis_prompt(resume_text: str) -> str:
    """Comprehensive resume review, answered as JSON."""
    return f"""
Analyze this resume and return JSON with:
{{
  "score": [0-100],
  "strengths": [3-5 key strengths],
  "weaknesses": [3-5 key weaknesses],
  "suggestions": [3-5 specific improvements],
  "keywords_found": [important skills found],
  "keywords_missing": [important missing skills],
  "full_analysis": [brief paragraph]
}}

Resume:
{resume_text}
"""


def build_role_suggestion_prompt(resume_text: str) -> str:
    return f"""Based on these skills, suggest 1 IT role name only:

{resume_text}"""


def build_similarity_prompt(resume_text: str, job_description: str) -> str:
    return f"""Compare resume to job description. Return JSON:
{{
  "score": [0-1 match score],
  "explanation": "[brief reason]"
}}

Resume:
{resume_text}

Job:
{job_description}
"""


def build_role_name_prompt(skills: list[str]) -> str:
    return f"Suggest 1 IT role name for these skills: {', '.join(skills)}"


def build_role_analysis_prompt(role: str) -> str:
    """Deep dive for a single role, answered as markdown."""
    return f"""For the IT role "{role}", provide markdown with:
- Technical skills
- Soft skills
- Tools
- Experience level
- Certifications
- Career path
- Key responsibilities"""
