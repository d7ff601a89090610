from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ProfileBase(BaseModel):
    email: str
    full_name: Optional[str] = None
    target_role: Optional[str] = None
    industry: Optional[str] = None
    career_level: Optional[str] = None
    target_country: Optional[str] = None


class ProfileUpsert(ProfileBase):
    pass


class ProfileResponse(ProfileBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
