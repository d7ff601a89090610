"""
Prompt templates and output schemas for every model-backed stage.

Each stage has a system instruction, a user prompt template and, for JSON
stages, the schema the answer must follow. Templates use str.format, so
literal braces are doubled.
"""

from typing import Any, Dict

_STRING = {"type": "string"}
_NUMBER = {"type": "number"}
_STRING_LIST = {"type": "array", "items": _STRING}


def _object(properties: Dict[str, Any], required: bool = True) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(properties)
    return schema


def _enum(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


# ==============================================================================
# Stage 1: Parse
# ==============================================================================

PARSE_SYSTEM = (
    "You are an expert CV parser. Extract and structure CV content accurately. "
    "Do not evaluate, score or rewrite anything."
)

PARSE_PROMPT = """Extract the CV below into JSON with these fields:
- professional_summary
- work_experience (list of roles, each with title, company, dates, bullet_points)
- education
- skills
- certifications
- tools_and_technologies (if present)

CV TEXT:
{cv_text}"""

PARSE_SCHEMA = _object(
    {
        "professional_summary": _STRING,
        "work_experience": {
            "type": "array",
            "items": _object(
                {
                    "title": _STRING,
                    "company": _STRING,
                    "dates": _STRING,
                    "bullet_points": _STRING_LIST,
                },
                required=False,
            ),
        },
        "education": _STRING,
        "skills": _STRING_LIST,
        "certifications": _STRING_LIST,
        "tools_and_technologies": _STRING_LIST,
    },
    required=False,
)


# ==============================================================================
# Stage 2: Signal detection (five concurrent requests)
# ==============================================================================

STRUCTURE_SYSTEM = (
    "You are an ATS and recruiter CV analyst. Report structural and formatting "
    "signals only. Do not score and do not give advice."
)

STRUCTURE_PROMPT = """From the structured CV below, identify:
- missing_sections (if any)
- section_order_quality (good / average / poor)
- formatting_consistency (good / average / poor)
- estimated_cv_length (pages)
- ats_risk_elements (tables, icons, columns)

CV STRUCTURE:
{cv_json}"""

STRUCTURE_SCHEMA = _object(
    {
        "missing_sections": _STRING_LIST,
        "section_order_quality": _enum("good / average / poor"),
        "formatting_consistency": _enum("good / average / poor"),
        "estimated_cv_length": _NUMBER,
        "ats_risk_elements": _STRING_LIST,
    }
)

KEYWORDS_SYSTEM = (
    "You are an ATS keyword analysis engine. Detect keyword presence and gaps. "
    "Do not score and do not rewrite."
)

KEYWORDS_PROMPT = """Target Role: {target_role}
Industry: {industry}
Target Country: {target_country}

Identify:
- core_role_keywords_present
- missing_critical_keywords
- keyword_density_level (low / moderate / high)
- signs_of_keyword_stuffing (yes / no)

CV CONTENT:
{cv_json}"""

KEYWORDS_SCHEMA = _object(
    {
        "core_role_keywords_present": _STRING_LIST,
        "missing_critical_keywords": _STRING_LIST,
        "keyword_density_level": _enum("low / moderate / high"),
        "signs_of_keyword_stuffing": _enum("yes / no"),
    }
)

IMPACT_SYSTEM = (
    "You are a CV achievement analysis engine. Detect evidence of impact and "
    "metrics. Do not judge overall quality."
)

IMPACT_PROMPT = """Analyse the work experience bullets and identify:
- percentage_of_bullets_with_metrics
- action_verb_strength (strong / moderate / weak)
- achievement_framing_level (high / medium / low)
- responsibility_only_bullets (count)

WORK EXPERIENCE:
{experience_json}"""

IMPACT_SCHEMA = _object(
    {
        "percentage_of_bullets_with_metrics": _NUMBER,
        "action_verb_strength": _enum("strong / moderate / weak"),
        "achievement_framing_level": _enum("high / medium / low"),
        "responsibility_only_bullets": _NUMBER,
    }
)

ALIGNMENT_SYSTEM = (
    "You are a recruiter evaluating role alignment. Report alignment signals only."
)

ALIGNMENT_PROMPT = """Target Role: {target_role}
Career Level: {career_level}
Industry: {industry}

Identify:
- title_alignment (high / medium / low)
- experience_relevance (high / medium / low)
- seniority_consistency (yes / no)
- industry_language_presence (yes / no)

CV:
{cv_json}"""

ALIGNMENT_SCHEMA = _object(
    {
        "title_alignment": _enum("high / medium / low"),
        "experience_relevance": _enum("high / medium / low"),
        "seniority_consistency": _enum("yes / no"),
        "industry_language_presence": _enum("yes / no"),
    }
)

CLARITY_SYSTEM = (
    "You are a professional CV language reviewer. Report clarity and language "
    "issues only."
)

CLARITY_PROMPT = """Analyse the CV text and identify:
- grammar_error_frequency (none / low / high)
- sentence_clarity (good / average / poor)
- tone_professionalism (professional / mixed / informal)
- tense_consistency (consistent / inconsistent)

CV TEXT:
{cv_json}"""

CLARITY_SCHEMA = _object(
    {
        "grammar_error_frequency": _enum("none / low / high"),
        "sentence_clarity": _enum("good / average / poor"),
        "tone_professionalism": _enum("professional / mixed / informal"),
        "tense_consistency": _enum("consistent / inconsistent"),
    }
)


# ==============================================================================
# Stage 4: Explain
# ==============================================================================

EXPLAIN_SYSTEM = (
    "You explain CV evaluation results clearly and professionally. You never "
    "change the scores, you only explain them. Use a direct, recruiter-aligned tone."
)

EXPLAIN_PROMPT = """Explain these CV scores in simple, recruiter-friendly language.

Scores:
{scores_json}

Detected Signals:
{signals_json}

Provide:
- 3 strengths
- 3 weaknesses
- ATS risk explanation"""

EXPLAIN_SCHEMA = _object(
    {
        "strengths": _STRING_LIST,
        "weaknesses": _STRING_LIST,
        "ats_risk_explanation": _STRING,
    }
)


# ==============================================================================
# Stage 5: Optimize (user-triggered)
# ==============================================================================

REWRITE_SYSTEM = (
    "You are a senior recruiter and CV writer. Rewrite content for ATS and "
    "human readers, focusing on impact and clarity."
)

SUMMARY_PROMPT = """Rewrite the professional summary for:

Target Role: {target_role}
Industry: {industry}
Target Country: {target_country}
Career Level: {career_level}

Original Summary:
{summary}

Requirements:
- ATS-friendly
- Achievement-focused
- Professional tone
- Max 4 lines"""

BULLETS_SYSTEM = (
    "You are a senior recruiter and CV writer. Rewrite experience bullets to be "
    "high-impact, achievement-oriented and ATS-friendly. Return JSON with a "
    "'bullets' list of strings."
)

BULLETS_PROMPT = """Rewrite these experience bullets to emphasise:
- measurable impact
- strong action verbs
- role relevance

Target Role: {target_role}

Original Bullets:
{bullets_json}"""

BULLETS_SCHEMA = _object({"bullets": _STRING_LIST})
