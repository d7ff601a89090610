"""
Canned answers for the mock provider.

Used when LLM_PROVIDER=mock so the API can run end to end without an OpenAI
key. Every provider call the pipeline makes has an entry here; the answers
describe one fixed, mid-strength CV regardless of the text submitted.
"""

from typing import Any, Dict

DEFAULT_MOCK_RESPONSES: Dict[str, Any] = {
    "parse_cv": {
        "professional_summary": "Software engineer with five years of backend experience.",
        "work_experience": [
            {
                "title": "Software Engineer",
                "company": "Example Ltd",
                "dates": "2019 - present",
                "bullet_points": [
                    "Built REST APIs serving 2M requests a day",
                    "Worked on the billing service",
                ],
            }
        ],
        "education": "BSc Computer Science",
        "skills": ["Python", "SQL", "Docker"],
        "certifications": [],
        "tools_and_technologies": ["PostgreSQL", "Git"],
    },
    "structure_signals": {
        "missing_sections": ["certifications"],
        "section_order_quality": "good",
        "formatting_consistency": "average",
        "estimated_cv_length": 1,
        "ats_risk_elements": [],
    },
    "keywords_signals": {
        "core_role_keywords_present": ["python", "sql", "apis"],
        "missing_critical_keywords": ["cloud"],
        "keyword_density_level": "moderate",
        "signs_of_keyword_stuffing": "no",
    },
    "impact_signals": {
        "percentage_of_bullets_with_metrics": 50,
        "action_verb_strength": "moderate",
        "achievement_framing_level": "medium",
        "responsibility_only_bullets": 1,
    },
    "alignment_signals": {
        "title_alignment": "high",
        "experience_relevance": "medium",
        "seniority_consistency": "yes",
        "industry_language_presence": "yes",
    },
    "clarity_signals": {
        "grammar_error_frequency": "none",
        "sentence_clarity": "good",
        "tone_professionalism": "mixed",
        "tense_consistency": "consistent",
    },
    "explain_scores": {
        "strengths": [
            "Clear section order",
            "Half of the bullets are quantified",
            "Title matches the target role",
        ],
        "weaknesses": [
            "Inconsistent formatting",
            "Few core role keywords",
            "Some bullets describe duties, not results",
        ],
        "ats_risk_explanation": "The CV parses cleanly but thin keyword coverage leaves a moderate ATS risk.",
    },
    "optimize_summary": "Backend engineer with five years building high-traffic REST APIs in Python.",
    "optimize_bullets": {
        "bullets": [
            "Built REST APIs handling 2M requests a day",
            "Reworked billing service queries, cutting invoice run time",
        ]
    },
}
