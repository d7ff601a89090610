from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cvintel.database import get_db
from cvintel.schemas import (
    AnalysisResult,
    AnalyzeRequest,
    OptimizeCVRequest,
    OptimizedCV,
    OptimizeRequest,
    OptimizeResponse,
)
from cvintel.services.pipeline import CVAnalysisPipeline, get_pipeline
from cvintel.services.store import CVStore

router = APIRouter()


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_cv(
    request: AnalyzeRequest,
    pipeline: CVAnalysisPipeline = Depends(get_pipeline),
    db: AsyncSession = Depends(get_db),
):
    persist = None
    if request.user_id:
        store = CVStore(db)

        async def save(result: AnalysisResult) -> str:
            return await store.save_analysis(
                request.user_id, result.parsed_cv, result.scores, result.report
            )

        persist = save

    return await pipeline.analyze(request.cv_text, request.context, persist=persist)


@router.post("/optimize", response_model=OptimizeResponse)
async def optimize_content(
    request: OptimizeRequest,
    pipeline: CVAnalysisPipeline = Depends(get_pipeline),
):
    result = await pipeline.optimize(request.content, request.type, request.context)
    return OptimizeResponse(type=request.type, result=result)


@router.post("/optimize-cv", response_model=OptimizedCV)
async def optimize_cv(
    request: OptimizeCVRequest,
    pipeline: CVAnalysisPipeline = Depends(get_pipeline),
):
    return await pipeline.optimize_cv(request.parsed_cv, request.context)
