"""
CV Store - Persistence for Profiles and Analysis Results

Wraps the SQLAlchemy session with the handful of operations the API needs:

    - Profile lookup and upsert by email
    - Insert-only saving of an analysis (CV + scores + report)
    - Reverse-chronological history per user
    - A cheap ping used by the keep-alive endpoint

An analysis is written in one transaction: if any of the three inserts fails
the whole write is rolled back, so no CV row exists without its score and
report.

Usage:
    async for db in get_db():
        store = CVStore(db)
        cv_id = await store.save_analysis(user_id, parsed_cv, scores, report)
"""

import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cvintel.exceptions import PersistenceError
from cvintel.middleware.metrics import record_analysis_saved
from cvintel.models import CV, CVReport, CVScore, User
from cvintel.schemas import HistoryItem, ParsedCV, ProfileUpsert, Report, Scores

logger = logging.getLogger(__name__)


class CVStore:
    """
    Store operations on a single database session.

    Attributes:
        session: AsyncSession for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Return the profile registered under an email, or None."""
        try:
            result = await self.session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    async def upsert_user(self, profile: ProfileUpsert) -> User:
        """
        Insert a new profile or update the existing one with the same email.

        The id of an existing profile never changes.
        """
        try:
            user = await self.get_user_by_email(profile.email)
            fields = profile.model_dump(exclude={"email"})

            if user is None:
                user = User(email=profile.email, **fields)
                self.session.add(user)
                logger.info(f"Created profile for {profile.email}")
            else:
                for field, value in fields.items():
                    setattr(user, field, value)

            await self.session.commit()
            await self.session.refresh(user)
            return user
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(str(e)) from e

    async def save_analysis(
        self,
        user_id: str,
        parsed_cv: ParsedCV,
        scores: Scores,
        report: Report,
    ) -> str:
        """
        Persist one analysis atomically.

        Args:
            user_id: Owning user id
            parsed_cv: Structured CV
            scores: Engine output
            report: Narrative report

        Returns:
            The new CV id

        Raises:
            PersistenceError: If the user does not exist or any insert fails
                (nothing is kept)
        """
        # SQLite does not enforce the users foreign key
        if await self.session.get(User, user_id) is None:
            raise PersistenceError(f"Unknown user: {user_id}")

        try:
            cv = CV(user_id=user_id, parsed_cv=parsed_cv.model_dump())
            self.session.add(cv)
            await self.session.flush()

            self.session.add(
                CVScore(
                    cv_id=cv.id,
                    structure_score=scores.structure,
                    keyword_score=scores.keyword,
                    impact_score=scores.impact,
                    alignment_score=scores.alignment,
                    clarity_score=scores.clarity,
                    overall_score=scores.overall,
                    ats_risk_level=scores.ats_risk,
                )
            )
            self.session.add(
                CVReport(
                    cv_id=cv.id,
                    strengths=list(report.strengths),
                    weaknesses=list(report.weaknesses),
                    ats_risk_explanation=report.ats_risk_explanation,
                )
            )
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to save analysis for user {user_id}: {e}")
            raise PersistenceError(str(e)) from e

        record_analysis_saved()
        return cv.id

    async def get_history(self, user_id: str) -> List[HistoryItem]:
        """Return a user's past scores and reports, newest first."""
        query = (
            select(CVScore)
            .join(CV, CVScore.cv_id == CV.id)
            .where(CV.user_id == user_id)
            .options(selectinload(CVScore.cv).selectinload(CV.report))
            .order_by(CVScore.created_at.desc())
        )
        try:
            result = await self.session.execute(query)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

        history = []
        for row in rows:
            report = row.cv.report
            history.append(
                HistoryItem(
                    id=row.id,
                    cv_id=row.cv_id,
                    structure_score=row.structure_score,
                    keyword_score=row.keyword_score,
                    impact_score=row.impact_score,
                    alignment_score=row.alignment_score,
                    clarity_score=row.clarity_score,
                    overall_score=row.overall_score,
                    ats_risk_level=row.ats_risk_level,
                    created_at=row.created_at,
                    strengths=report.strengths if report else [],
                    weaknesses=report.weaknesses if report else [],
                    ats_risk_explanation=report.ats_risk_explanation if report else None,
                )
            )
        return history

    async def ping(self) -> int:
        """Count profiles; used to keep the database connection warm."""
        try:
            result = await self.session.execute(select(func.count(User.id)))
            return result.scalar() or 0
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
