from cvintel.schemas.profile import ProfileUpsert, ProfileResponse
from cvintel.schemas.cv import ParsedCV, WorkExperience
from cvintel.schemas.signals import (
    Signals,
    StructureSignals,
    KeywordSignals,
    ImpactSignals,
    AlignmentSignals,
    ClaritySignals,
)
from cvintel.schemas.scores import AtsRisk, Scores, Report
from cvintel.schemas.analysis import (
    TargetContext,
    AnalyzeRequest,
    AnalysisResult,
    SaveAnalysisRequest,
    SaveAnalysisResponse,
    HistoryItem,
    OptimizeRequest,
    OptimizeResponse,
    OptimizeCVRequest,
    OptimizedExperience,
    OptimizedCV,
)

__all__ = [
    "ProfileUpsert",
    "ProfileResponse",
    "ParsedCV",
    "WorkExperience",
    "Signals",
    "StructureSignals",
    "KeywordSignals",
    "ImpactSignals",
    "AlignmentSignals",
    "ClaritySignals",
    "AtsRisk",
    "Scores",
    "Report",
    "TargetContext",
    "AnalyzeRequest",
    "AnalysisResult",
    "SaveAnalysisRequest",
    "SaveAnalysisResponse",
    "HistoryItem",
    "OptimizeRequest",
    "OptimizeResponse",
    "OptimizeCVRequest",
    "OptimizedExperience",
    "OptimizedCV",
]
