"""
CV Models - submitted CVs and their evaluation results

Each analysis writes three insert-only rows in one transaction:

    cvs (parsed CV JSON)
    ├── cv_scores (five dimension scores, overall, ATS risk tier)
    └── cv_reports (strengths, weaknesses, ATS risk explanation)
"""

from datetime import datetime
import uuid

from sqlalchemy import Column, String, Integer, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship

from cvintel.database import Base


class CV(Base):
    """
    A submitted CV in structured (parsed) form.

    Attributes:
        id: UUID primary key
        user_id: Owning user (indexed)
        parsed_cv: ParsedCV as JSON
    """

    __tablename__ = "cvs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    parsed_cv = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="cvs")
    score = relationship("CVScore", back_populates="cv", uselist=False)
    report = relationship("CVReport", back_populates="cv", uselist=False)


class CVScore(Base):
    """Scores produced by the scoring engine for one CV."""

    __tablename__ = "cv_scores"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    cv_id = Column(String, ForeignKey("cvs.id"), nullable=False, unique=True, index=True)
    structure_score = Column(Integer, nullable=False)
    keyword_score = Column(Integer, nullable=False)
    impact_score = Column(Integer, nullable=False)
    alignment_score = Column(Integer, nullable=False)
    clarity_score = Column(Integer, nullable=False)
    overall_score = Column(Integer, nullable=False, index=True)
    ats_risk_level = Column(String(10), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    cv = relationship("CV", back_populates="score")


class CVReport(Base):
    """Narrative explanation of a CV's scores."""

    __tablename__ = "cv_reports"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    cv_id = Column(String, ForeignKey("cvs.id"), nullable=False, unique=True, index=True)
    strengths = Column(JSON, nullable=False, default=list)
    weaknesses = Column(JSON, nullable=False, default=list)
    ats_risk_explanation = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    cv = relationship("CV", back_populates="report")
