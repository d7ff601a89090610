from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cvintel.database import get_db
from cvintel.schemas import HistoryItem, SaveAnalysisRequest, SaveAnalysisResponse
from cvintel.services.store import CVStore

router = APIRouter()
history_router = APIRouter()


@router.post("/save", response_model=SaveAnalysisResponse)
async def save_analysis(
    request: SaveAnalysisRequest,
    db: AsyncSession = Depends(get_db),
):
    cv_id = await CVStore(db).save_analysis(
        request.user_id, request.parsed_cv, request.scores, request.report
    )
    return SaveAnalysisResponse(success=True, cv_id=cv_id)


@history_router.get("/{user_id}", response_model=list[HistoryItem])
async def get_history(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await CVStore(db).get_history(user_id)
