"""
CV Scoring Engine - Deterministic Recruiter/ATS Scoring

Maps the categorical signals detected by the LLM stage into five dimension
scores and a composite ATS risk tier. No model calls happen here: the same
Signals always produce the same Scores.

Score Composition (each dimension 0-20, overall 0-100):
    - Structure (base 10): section order, formatting, ATS risk elements
    - Keyword   (base 5):  keyword density, core role keyword coverage
    - Impact    (base 5):  quantified bullets, action verbs, achievement framing
    - Alignment (base 5):  title alignment, experience relevance, industry language
    - Clarity   (base 5):  grammar, sentence clarity, professional tone

Each dimension's base plus every bonus it can earn adds up to exactly 20, so
no clamping is needed.

ATS Risk Tiers:
    - Low:    overall >= 75
    - Medium: overall >= 50
    - High:   otherwise
"""

from typing import Dict, Tuple

from cvintel.schemas.scores import AtsRisk, Scores
from cvintel.schemas.signals import (
    AlignmentSignals,
    ClaritySignals,
    ImpactSignals,
    KeywordSignals,
    Signals,
    StructureSignals,
)

BASE_SCORES: Dict[str, int] = {
    "structure": 10,
    "keyword": 5,
    "impact": 5,
    "alignment": 5,
    "clarity": 5,
}

# Bonus increments per dimension, in the order the rules are applied
BONUSES: Dict[str, Dict[str, int]] = {
    "structure": {
        "section_order_quality": 4,
        "formatting_consistency": 4,
        "no_ats_risk_elements": 2,
    },
    "keyword": {
        "moderate_density": 5,
        "core_keyword_coverage": 10,
    },
    "impact": {
        "quantified_bullets": 8,
        "strong_action_verbs": 4,
        "high_achievement_framing": 3,
    },
    "alignment": {
        "title_alignment": 6,
        "experience_relevance": 6,
        "industry_language": 3,
    },
    "clarity": {
        "no_grammar_errors": 6,
        "sentence_clarity": 6,
        "professional_tone": 3,
    },
}

MAX_DIMENSION_SCORE = 20

# Keyword coverage bonus needs strictly more than this many core keywords
CORE_KEYWORD_THRESHOLD = 5
# Impact bonus needs strictly more than this share of bullets with metrics
METRICS_PERCENTAGE_THRESHOLD = 40

LOW_RISK_THRESHOLD = 75
MEDIUM_RISK_THRESHOLD = 50


def dimension_range(dimension: str) -> Tuple[int, int]:
    """Return the (minimum, maximum) score a dimension can take."""
    base = BASE_SCORES[dimension]
    return base, base + sum(BONUSES[dimension].values())


def score_structure(signals: StructureSignals) -> int:
    bonus = BONUSES["structure"]
    score = BASE_SCORES["structure"]
    if signals.section_order_quality == "good":
        score += bonus["section_order_quality"]
    if signals.formatting_consistency == "good":
        score += bonus["formatting_consistency"]
    # Only an explicit empty list counts; an unreported list earns nothing
    if signals.ats_risk_elements is not None and len(signals.ats_risk_elements) == 0:
        score += bonus["no_ats_risk_elements"]
    return score


def score_keywords(signals: KeywordSignals) -> int:
    bonus = BONUSES["keyword"]
    score = BASE_SCORES["keyword"]
    if signals.keyword_density_level == "moderate":
        score += bonus["moderate_density"]
    if len(signals.core_role_keywords_present) > CORE_KEYWORD_THRESHOLD:
        score += bonus["core_keyword_coverage"]
    return score


def score_impact(signals: ImpactSignals) -> int:
    bonus = BONUSES["impact"]
    score = BASE_SCORES["impact"]
    if signals.percentage_of_bullets_with_metrics > METRICS_PERCENTAGE_THRESHOLD:
        score += bonus["quantified_bullets"]
    if signals.action_verb_strength == "strong":
        score += bonus["strong_action_verbs"]
    if signals.achievement_framing_level == "high":
        score += bonus["high_achievement_framing"]
    return score


def score_alignment(signals: AlignmentSignals) -> int:
    bonus = BONUSES["alignment"]
    score = BASE_SCORES["alignment"]
    if signals.title_alignment == "high":
        score += bonus["title_alignment"]
    if signals.experience_relevance == "high":
        score += bonus["experience_relevance"]
    if signals.industry_language_presence == "yes":
        score += bonus["industry_language"]
    return score


def score_clarity(signals: ClaritySignals) -> int:
    bonus = BONUSES["clarity"]
    score = BASE_SCORES["clarity"]
    if signals.grammar_error_frequency == "none":
        score += bonus["no_grammar_errors"]
    if signals.sentence_clarity == "good":
        score += bonus["sentence_clarity"]
    if signals.tone_professionalism == "professional":
        score += bonus["professional_tone"]
    return score


def classify_ats_risk(overall: int) -> AtsRisk:
    """
    Map an overall score to its ATS risk tier.

    Example:
        >>> classify_ats_risk(75)
        <AtsRisk.LOW: 'Low'>
        >>> classify_ats_risk(74)
        <AtsRisk.MEDIUM: 'Medium'>
    """
    if overall >= LOW_RISK_THRESHOLD:
        return AtsRisk.LOW
    if overall >= MEDIUM_RISK_THRESHOLD:
        return AtsRisk.MEDIUM
    return AtsRisk.HIGH


def calculate_scores(signals: Signals) -> Scores:
    """
    Calculate dimension scores, overall score and ATS risk tier.

    Args:
        signals: The five signal groups from the detection stage

    Returns:
        Scores with each dimension in [base, 20], overall equal to their sum

    Example:
        >>> scores = calculate_scores(Signals())
        >>> scores.overall, scores.ats_risk
        (30, 'High')
    """
    structure = score_structure(signals.structure)
    keyword = score_keywords(signals.keywords)
    impact = score_impact(signals.impact)
    alignment = score_alignment(signals.alignment)
    clarity = score_clarity(signals.clarity)

    overall = structure + keyword + impact + alignment + clarity

    return Scores(
        structure=structure,
        keyword=keyword,
        impact=impact,
        alignment=alignment,
        clarity=clarity,
        overall=overall,
        ats_risk=classify_ats_risk(overall),
    )
