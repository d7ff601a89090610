from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cvintel.database import get_db
from cvintel.schemas import ProfileResponse, ProfileUpsert
from cvintel.services.store import CVStore

router = APIRouter()


@router.get("/check/{email}", response_model=Optional[ProfileResponse])
async def check_profile(
    email: str,
    db: AsyncSession = Depends(get_db),
):
    user = await CVStore(db).get_user_by_email(email)
    if user is None:
        return None
    return ProfileResponse.model_validate(user)


@router.post("/mock", response_model=ProfileResponse)
async def upsert_profile(
    profile: ProfileUpsert,
    db: AsyncSession = Depends(get_db),
):
    # Lead capture only: no password or session is issued
    user = await CVStore(db).upsert_user(profile)
    return ProfileResponse.model_validate(user)
