"""
Signal schemas - categorical judgments produced by the signal-detection stage.

Each group mirrors the JSON schema the provider is asked to fill. Categorical
values are trimmed and lower-cased on input so "Good " and "good" score the
same. Every field has a default, which keeps scoring total when a provider
omits a key; a default never earns a bonus.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class _SignalGroup(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def normalise_categorical(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class StructureSignals(_SignalGroup):
    missing_sections: list[str] = Field(default_factory=list)
    section_order_quality: str = ""  # good / average / poor
    formatting_consistency: str = ""  # good / average / poor
    estimated_cv_length: float = 0.0  # pages
    # None means the provider did not report on risk elements at all
    ats_risk_elements: Optional[list[str]] = None


class KeywordSignals(_SignalGroup):
    core_role_keywords_present: list[str] = Field(default_factory=list)
    missing_critical_keywords: list[str] = Field(default_factory=list)
    keyword_density_level: str = ""  # low / moderate / high
    signs_of_keyword_stuffing: str = ""  # yes / no


class ImpactSignals(_SignalGroup):
    percentage_of_bullets_with_metrics: float = 0.0
    action_verb_strength: str = ""  # strong / moderate / weak
    achievement_framing_level: str = ""  # high / medium / low
    responsibility_only_bullets: int = 0

    @field_validator("percentage_of_bullets_with_metrics", mode="before")
    @classmethod
    def strip_percent_sign(cls, value: Any) -> Any:
        # Providers sometimes answer "45%" instead of 45
        if isinstance(value, str):
            return value.strip().rstrip("%").strip()
        return value


class AlignmentSignals(_SignalGroup):
    title_alignment: str = ""  # high / medium / low
    experience_relevance: str = ""  # high / medium / low
    seniority_consistency: str = ""  # yes / no
    industry_language_presence: str = ""  # yes / no


class ClaritySignals(_SignalGroup):
    grammar_error_frequency: str = ""  # none / low / high
    sentence_clarity: str = ""  # good / average / poor
    tone_professionalism: str = ""  # professional / mixed / informal
    tense_consistency: str = ""  # consistent / inconsistent


class Signals(BaseModel):
    structure: StructureSignals = Field(default_factory=StructureSignals)
    keywords: KeywordSignals = Field(default_factory=KeywordSignals)
    impact: ImpactSignals = Field(default_factory=ImpactSignals)
    alignment: AlignmentSignals = Field(default_factory=AlignmentSignals)
    clarity: ClaritySignals = Field(default_factory=ClaritySignals)
