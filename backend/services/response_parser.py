"""Turn raw model text into AnalysisResult / SimilarityResult.

Strict JSON decoding is tried first. When the model ignores the requested
format, a set of regex heuristics pulls out whatever it can.
"""

import json
import logging
import math
import re
from typing import Any, NamedTuple

from models.responses import AnalysisResult, SimilarityResult
from services.exceptions import DecodeFallback

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS_SCORE = 70
DEFAULT_SIMILARITY_SCORE = 0.5
FULL_ANALYSIS_FALLBACK = "Analysis not available"
EXPLANATION_FALLBACK = "No explanation provided"
HEURISTIC_EXPLANATION_FALLBACK = "Score based on skill match"
FULL_ANALYSIS_PREVIEW_CHARS = 500


class SectionRule(NamedTuple):
    """A section header and the header that ends its body."""
    header: str
    terminator: str
    keywords: bool = False


# Order matters only for readability; each rule names its own terminator.
ANALYSIS_SECTIONS: dict[str, SectionRule] = {
    "strengths": SectionRule("Strengths", "Weaknesses"),
    "weaknesses": SectionRule("Weaknesses", "Suggestions"),
    "suggestions": SectionRule("Suggestions", "Keywords"),
    "keywords_found": SectionRule("Keywords Found", "Keywords Missing", keywords=True),
    "keywords_missing": SectionRule("Keywords Missing", "Full Analysis", keywords=True),
}

# (exclusive min length, exclusive max length, max items)
_NARRATIVE_BAND = (10, 100, 5)
_KEYWORD_BAND = (2, 30, 10)

_NARRATIVE_SPLIT_RE = re.compile(r"\n|•|\.")
_KEYWORD_SPLIT_RE = re.compile(r"\n|•|,|\.")

_ANALYSIS_SCORE_RE = re.compile(r"score:?\s*(\d+)", re.IGNORECASE)
_SIMILARITY_SCORE_RE = re.compile(r"score[:\s]*([0-9.]+)", re.IGNORECASE)
_FLOAT_PREFIX_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_EXPLANATION_RE = re.compile(r"explanation[:\s]*(.*)", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def decode_json_object(raw: str) -> dict[str, Any]:
    """Strictly decode the whole response as a JSON object.

    Raises DecodeFallback when the text is not a JSON object.
    """
    try:
        data = json.loads(strip_code_fences(raw))
    except (ValueError, TypeError, RecursionError) as e:
        raise DecodeFallback(f"Response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodeFallback(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _section_pattern(rule: SectionRule) -> re.Pattern:
    return re.compile(
        rf"{re.escape(rule.header)}:?(.*?)(?:{re.escape(rule.terminator)}|\Z)",
        re.IGNORECASE | re.DOTALL,
    )


def extract_sections(
    text: str, vocabulary: dict[str, SectionRule] = ANALYSIS_SECTIONS
) -> dict[str, list[str]]:
    """Split free text into item lists keyed by section name.

    A section is only considered when its header appears verbatim in title
    case or upper case. Sections that are absent map to an empty list.
    """
    sections: dict[str, list[str]] = {}
    for name, rule in vocabulary.items():
        sections[name] = []
        if rule.header not in text and rule.header.upper() not in text:
            continue

        match = _section_pattern(rule).search(text)
        if not match or not match.group(1):
            continue

        splitter = _KEYWORD_SPLIT_RE if rule.keywords else _NARRATIVE_SPLIT_RE
        low, high, limit = _KEYWORD_BAND if rule.keywords else _NARRATIVE_BAND
        items = (part.strip() for part in splitter.split(match.group(1)))
        sections[name] = [item for item in items if low < len(item) < high][:limit]

    return sections


def extract_analysis_score(text: str, default: int = DEFAULT_ANALYSIS_SCORE) -> int:
    """First ``score`` followed by digits, accepted only within 0-100."""
    match = _ANALYSIS_SCORE_RE.search(text)
    if match:
        try:
            score = int(match.group(1))
        except ValueError:
            return default
        if 0 <= score <= 100:
            return score
    return default


def extract_similarity_score(text: str, default: float = DEFAULT_SIMILARITY_SCORE) -> float:
    # No range check here; finite out-of-range values pass through unchanged.
    match = _SIMILARITY_SCORE_RE.search(text)
    if match:
        number = _FLOAT_PREFIX_RE.match(match.group(1))
        if number:
            score = float(number.group(0))
            if math.isfinite(score):
                return score
    return default


def extract_explanation(text: str) -> str:
    match = _EXPLANATION_RE.search(text)
    if match:
        return match.group(1).strip()
    return HEURISTIC_EXPLANATION_FALLBACK


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _as_text(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def analysis_from_json(data: dict[str, Any]) -> AnalysisResult:
    """Build an AnalysisResult from a (possibly partial) decoded object."""
    score = _as_number(data.get("score"))
    return AnalysisResult(
        score=DEFAULT_ANALYSIS_SCORE if score is None else min(100, max(0, round(score))),
        strengths=_as_str_list(data.get("strengths")),
        weaknesses=_as_str_list(data.get("weaknesses")),
        suggestions=_as_str_list(data.get("suggestions")),
        keywords_found=_as_str_list(data.get("keywords_found")),
        keywords_missing=_as_str_list(data.get("keywords_missing")),
        full_analysis=_as_text(data.get("full_analysis"), FULL_ANALYSIS_FALLBACK),
    )


def analysis_from_text(text: str) -> AnalysisResult:
    """Heuristic extraction for responses that are not JSON."""
    sections = extract_sections(text, ANALYSIS_SECTIONS)
    return AnalysisResult(
        score=extract_analysis_score(text),
        full_analysis=text[:FULL_ANALYSIS_PREVIEW_CHARS],
        **sections,
    )


def parse_analysis(raw: str) -> AnalysisResult:
    try:
        return analysis_from_json(decode_json_object(raw))
    except DecodeFallback as e:
        logger.warning("Analysis response not JSON, using heuristic extraction: %s", e)
        return analysis_from_text(raw)


def similarity_from_json(data: dict[str, Any]) -> SimilarityResult:
    score = _as_number(data.get("score"))
    return SimilarityResult(
        score=DEFAULT_SIMILARITY_SCORE if score is None else min(1.0, max(0.0, score)),
        explanation=_as_text(data.get("explanation"), EXPLANATION_FALLBACK),
    )


def similarity_from_text(text: str) -> SimilarityResult:
    return SimilarityResult(
        score=extract_similarity_score(text),
        explanation=extract_explanation(text),
    )


def parse_similarity(raw: str) -> SimilarityResult:
    try:
        return similarity_from_json(decode_json_object(raw))
    except DecodeFallback as e:
        logger.warning("Similarity response not JSON, using heuristic extraction: %s", e)
        return similarity_from_text(raw)
