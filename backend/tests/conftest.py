"""
Shared fixtures: canned provider answers and an in-memory database.
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cvintel.database import Base
import cvintel.models  # noqa: F401  (registers tables on Base.metadata)


PARSED_CV = {
    "professional_summary": "Backend engineer with 7 years building payment platforms.",
    "work_experience": [
        {
            "title": "Senior Backend Engineer",
            "company": "Paylane",
            "dates": "2020 - present",
            "bullet_points": [
                "Cut settlement latency by 45% by redesigning the ledger service",
                "Led a team of 5 engineers",
            ],
        },
        {
            "title": "Backend Engineer",
            "company": "Shopwise",
            "dates": "2017 - 2020",
            "bullet_points": ["Maintained the order API"],
        },
    ],
    "education": "BSc Computer Science",
    "skills": ["Python", "PostgreSQL", "Kafka"],
    "certifications": [],
    "tools_and_technologies": ["Docker", "Kubernetes"],
}

# Every bonus condition holds: 20 per dimension, 100 overall
STRONG_SIGNALS = {
    "structure": {
        "missing_sections": [],
        "section_order_quality": "good",
        "formatting_consistency": "good",
        "estimated_cv_length": 2,
        "ats_risk_elements": [],
    },
    "keywords": {
        "core_role_keywords_present": ["python", "postgresql", "kafka", "apis", "microservices", "aws"],
        "missing_critical_keywords": [],
        "keyword_density_level": "moderate",
        "signs_of_keyword_stuffing": "no",
    },
    "impact": {
        "percentage_of_bullets_with_metrics": 60,
        "action_verb_strength": "strong",
        "achievement_framing_level": "high",
        "responsibility_only_bullets": 1,
    },
    "alignment": {
        "title_alignment": "high",
        "experience_relevance": "high",
        "seniority_consistency": "yes",
        "industry_language_presence": "yes",
    },
    "clarity": {
        "grammar_error_frequency": "none",
        "sentence_clarity": "good",
        "tone_professionalism": "professional",
        "tense_consistency": "consistent",
    },
}

REPORT = {
    "strengths": ["Quantified achievements", "Clear structure", "Strong role alignment"],
    "weaknesses": ["Thin education section", "No certifications", "Older role lacks metrics"],
    "ats_risk_explanation": "The CV is well structured and keyword-aligned, so ATS risk is low.",
}


@pytest.fixture
def mock_responses():
    """Provider answers for every stage, keyed by stage name."""
    return {
        "parse_cv": PARSED_CV,
        "structure_signals": STRONG_SIGNALS["structure"],
        "keywords_signals": STRONG_SIGNALS["keywords"],
        "impact_signals": STRONG_SIGNALS["impact"],
        "alignment_signals": STRONG_SIGNALS["alignment"],
        "clarity_signals": STRONG_SIGNALS["clarity"],
        "explain_scores": REPORT,
        "optimize_summary": "Senior backend engineer who cut payment latency by 45%.",
        "optimize_bullets": {"bullets": ["Reduced settlement latency 45% via ledger redesign"]},
    }


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def parsed_cv():
    from cvintel.schemas import ParsedCV
    return ParsedCV.model_validate(PARSED_CV)


@pytest.fixture
def strong_signals():
    from cvintel.schemas import Signals
    return Signals.model_validate(STRONG_SIGNALS)


@pytest.fixture
def report():
    from cvintel.schemas import Report
    return Report.model_validate(REPORT)
