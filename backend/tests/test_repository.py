import pytest

from db.repository import ResumeRepository
from models.responses import AnalysisResult


@pytest.fixture
def repo():
    repository = ResumeRepository(":memory:")
    yield repository
    repository.close()


def _analysis(**overrides) -> AnalysisResult:
    data = {
        "score": 81,
        "strengths": ["Clear impact statements"],
        "weaknesses": ["No summary"],
        "suggestions": ["Add a summary"],
        "keywords_found": ["React"],
        "keywords_missing": ["Kubernetes"],
        "full_analysis": "Solid resume.",
    }
    data.update(overrides)
    return AnalysisResult(**data)


def test_get_or_create_user_is_idempotent(repo):
    assert repo.get_or_create_user("user_1", "a@example.com", "A") == "user_1"
    assert repo.get_or_create_user("user_1", "other@example.com", "B") == "user_1"


def test_resume_round_trip_with_analysis(repo):
    repo.get_or_create_user("user_1")
    resume_id = repo.create_resume("user_1", "cv.pdf", "", "resume text")
    analysis_id = repo.create_analysis(resume_id, _analysis(), "Frontend Developer")

    record = repo.get_resume_with_analysis(resume_id)
    assert record is not None
    assert record.user_id == "user_1"
    assert record.file_name == "cv.pdf"
    assert record.content == "resume text"
    assert record.analysis.id == analysis_id
    assert record.analysis.score == 81
    assert record.analysis.strengths == ["Clear impact statements"]
    assert record.analysis.keywords_missing == ["Kubernetes"]
    assert record.analysis.suggested_role == "Frontend Developer"
    assert record.analysis.similarity_score is None


def test_resume_without_analysis(repo):
    repo.get_or_create_user("user_1")
    resume_id = repo.create_resume("user_1", "cv.txt", "", "text")
    assert repo.get_resume_with_analysis(resume_id).analysis is None


def test_missing_resume(repo):
    assert repo.get_resume_with_analysis(999) is None


def test_update_job_similarity(repo):
    repo.get_or_create_user("user_1")
    resume_id = repo.create_resume("user_1", "cv.pdf", "", "text")
    analysis_id = repo.create_analysis(resume_id, _analysis())

    repo.update_analysis_with_job_similarity(analysis_id, "Python role", 0.73, "Good fit")

    analysis = repo.get_resume_with_analysis(resume_id).analysis
    assert analysis.job_description == "Python role"
    assert analysis.similarity_score == pytest.approx(0.73)
    assert analysis.similarity_explanation == "Good fit"


def test_user_resumes_newest_first_and_scoped(repo):
    repo.get_or_create_user("user_1")
    repo.get_or_create_user("user_2")
    first = repo.create_resume("user_1", "first.pdf", "", "a")
    second = repo.create_resume("user_1", "second.pdf", "", "b")
    repo.create_resume("user_2", "other.pdf", "", "c")
    repo.create_analysis(second, _analysis(score=64), "Data Engineer")

    resumes = repo.get_user_resumes("user_1")
    assert [r.id for r in resumes] == [second, first]
    assert resumes[0].score == 64
    assert resumes[0].suggested_role == "Data Engineer"
    assert resumes[1].score is None


def test_delete_resume_removes_analysis(repo):
    repo.get_or_create_user("user_1")
    resume_id = repo.create_resume("user_1", "cv.pdf", "", "text")
    repo.create_analysis(resume_id, _analysis())

    repo.delete_resume(resume_id)

    assert repo.get_resume_with_analysis(resume_id) is None
    assert repo.get_user_resumes("user_1") == []
