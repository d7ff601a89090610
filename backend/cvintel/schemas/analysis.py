from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional, Union

from cvintel.schemas.cv import ParsedCV
from cvintel.schemas.signals import Signals
from cvintel.schemas.scores import Scores, Report


class TargetContext(BaseModel):
    target_role: str = Field(default="", alias="targetRole")
    industry: str = ""
    target_country: str = Field(default="", alias="targetCountry")
    career_level: str = Field(default="Mid-level", alias="careerLevel")

    class Config:
        populate_by_name = True


class AnalyzeRequest(BaseModel):
    cv_text: str = Field(alias="cvText", min_length=1)
    context: TargetContext = Field(default_factory=TargetContext)
    # When set, a successful analysis is saved to this user's history
    user_id: Optional[str] = Field(default=None, alias="userId")

    class Config:
        populate_by_name = True


class AnalysisResult(BaseModel):
    parsed_cv: ParsedCV = Field(alias="parsedCv")
    signals: Signals
    scores: Scores
    report: Report
    cv_id: Optional[str] = Field(default=None, alias="cvId")

    class Config:
        populate_by_name = True


class SaveAnalysisRequest(BaseModel):
    user_id: str = Field(alias="userId")
    parsed_cv: ParsedCV = Field(alias="parsedCv")
    scores: Scores
    report: Report

    class Config:
        populate_by_name = True


class SaveAnalysisResponse(BaseModel):
    success: bool
    cv_id: str = Field(alias="cvId")

    class Config:
        populate_by_name = True


class HistoryItem(BaseModel):
    id: str
    cv_id: str
    structure_score: int
    keyword_score: int
    impact_score: int
    alignment_score: int
    clarity_score: int
    overall_score: int
    ats_risk_level: str
    created_at: datetime
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    ats_risk_explanation: Optional[str] = None


OptimizeType = Literal["summary", "bullets"]


class OptimizeRequest(BaseModel):
    content: Union[str, list[str]]
    type: OptimizeType
    context: TargetContext = Field(default_factory=TargetContext)


class OptimizeResponse(BaseModel):
    type: OptimizeType
    result: Union[str, list[str]]


class OptimizeCVRequest(BaseModel):
    parsed_cv: ParsedCV = Field(alias="parsedCv")
    context: TargetContext = Field(default_factory=TargetContext)

    class Config:
        populate_by_name = True


class OptimizedExperience(BaseModel):
    title: str
    bullets: list[str]


class OptimizedCV(BaseModel):
    summary: str
    experience: list[OptimizedExperience]
