"""
User Model - lead profile captured before an analysis

Upserted by email: a returning user keeps their id, and the profile fields
(name, target role, industry, career level, country) are overwritten with the
latest submission.
"""

from datetime import datetime
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from cvintel.database import Base


class User(Base):
    """
    Profile of a person submitting CVs.

    Attributes:
        id: UUID primary key
        email: Unique lookup key (indexed)
        full_name: Display name
        target_role: Job title the CV is aimed at
        industry: Target industry
        career_level: e.g. "Entry-level", "Mid-level", "Senior"
        target_country: Country the applications are for
    """

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(320), nullable=False, unique=True, index=True)
    full_name = Column(String(500), nullable=True)
    target_role = Column(String(500), nullable=True)
    industry = Column(String(255), nullable=True)
    career_level = Column(String(100), nullable=True)
    target_country = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    cvs = relationship("CV", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', email='{self.email}')>"
