"""
CV Analysis Pipeline - Chained Model Calls Around the Scoring Engine

Runs the dependent stages of a CV analysis:

    1. parse      CV text -> ParsedCV                      (1 provider call)
    2. signals    ParsedCV + target context -> Signals     (5 concurrent calls)
    3. score      Signals -> Scores                        (local, no call)
    4. explain    Scores + Signals -> Report               (1 provider call)
    5. optimize   summary + per-job bullets rewrite        (1 + N concurrent calls,
                                                            user-triggered)

Failure Policy:
    Any stage failure aborts the remaining stages and raises PipelineError
    naming the stage. Nothing is retried. Concurrent calls inside a stage are
    all-or-nothing: one failed sub-request fails the stage. Results are only
    handed to the persist callback after every stage succeeded.

Usage:
    from cvintel.services.pipeline import CVAnalysisPipeline
    from cvintel.services.llm_providers import get_default_provider

    pipeline = CVAnalysisPipeline(get_default_provider())
    result = await pipeline.analyze(cv_text, context)
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from cvintel.exceptions import PipelineError, ProviderResponseError
from cvintel.middleware.metrics import (
    record_overall_score,
    record_pipeline_failure,
    record_provider_latency,
)
from cvintel.schemas import (
    AnalysisResult,
    OptimizedCV,
    OptimizedExperience,
    ParsedCV,
    Report,
    Scores,
    Signals,
    TargetContext,
)
from cvintel.services import prompts
from cvintel.services.llm_providers import TextProvider, get_default_provider
from cvintel.services.scoring import calculate_scores

logger = logging.getLogger(__name__)

PersistCallback = Callable[[AnalysisResult], Awaitable[str]]

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ProviderResponseError(
            f"Provider answer does not match {model.__name__}: {e.error_count()} error(s)"
        ) from e


class CVAnalysisPipeline:
    """
    Orchestrates the provider calls for analysis and optimization.

    Attributes:
        provider: Generative-text provider used by every remote stage
    """

    def __init__(self, provider: TextProvider):
        self.provider = provider

    async def _json_call(
        self, stage: str, name: str, system: str, prompt: str, schema: Dict[str, Any]
    ) -> Any:
        start = time.perf_counter()
        try:
            return await self.provider.generate_json(name, system, prompt, schema)
        finally:
            record_provider_latency(stage, time.perf_counter() - start)

    async def _text_call(self, stage: str, name: str, system: str, prompt: str) -> str:
        start = time.perf_counter()
        try:
            return await self.provider.generate_text(name, system, prompt)
        finally:
            record_provider_latency(stage, time.perf_counter() - start)

    async def _run_stage(self, stage: str, work: Awaitable[Any]) -> Any:
        try:
            return await work
        except PipelineError:
            raise
        except Exception as e:
            logger.error(f"Pipeline stage '{stage}' failed: {e}")
            record_pipeline_failure(stage)
            raise PipelineError(stage, e) from e

    # ------------------------------------------------------------------
    # Individual stages
    # ------------------------------------------------------------------

    async def parse_cv(self, cv_text: str) -> ParsedCV:
        """Stage 1: extract a ParsedCV from free text."""

        async def work() -> ParsedCV:
            data = await self._json_call(
                "parse",
                "parse_cv",
                prompts.PARSE_SYSTEM,
                prompts.PARSE_PROMPT.format(cv_text=cv_text),
                prompts.PARSE_SCHEMA,
            )
            return _validate(ParsedCV, data)

        return await self._run_stage("parse", work())

    async def detect_signals(self, parsed_cv: ParsedCV, context: TargetContext) -> Signals:
        """
        Stage 2: detect the five signal groups concurrently.

        All five requests must succeed; the first failure fails the stage.
        """
        cv_json = parsed_cv.model_dump_json()
        experience_json = json.dumps(
            [job.model_dump() for job in parsed_cv.work_experience]
        )
        fields = {
            "cv_json": cv_json,
            "experience_json": experience_json,
            "target_role": context.target_role,
            "industry": context.industry,
            "target_country": context.target_country,
            "career_level": context.career_level,
        }

        requests = [
            ("structure", prompts.STRUCTURE_SYSTEM, prompts.STRUCTURE_PROMPT, prompts.STRUCTURE_SCHEMA),
            ("keywords", prompts.KEYWORDS_SYSTEM, prompts.KEYWORDS_PROMPT, prompts.KEYWORDS_SCHEMA),
            ("impact", prompts.IMPACT_SYSTEM, prompts.IMPACT_PROMPT, prompts.IMPACT_SCHEMA),
            ("alignment", prompts.ALIGNMENT_SYSTEM, prompts.ALIGNMENT_PROMPT, prompts.ALIGNMENT_SCHEMA),
            ("clarity", prompts.CLARITY_SYSTEM, prompts.CLARITY_PROMPT, prompts.CLARITY_SCHEMA),
        ]

        async def work() -> Signals:
            results = await asyncio.gather(*[
                self._json_call(
                    "signals",
                    f"{group}_signals",
                    system,
                    template.format(**fields),
                    schema,
                )
                for group, system, template, schema in requests
            ])
            return _validate(Signals, {
                group: data for (group, _, _, _), data in zip(requests, results)
            })

        return await self._run_stage("signals", work())

    def score(self, signals: Signals) -> Scores:
        """Stage 3: local scoring, no provider call."""
        scores = calculate_scores(signals)
        record_overall_score(scores.overall)
        return scores

    async def explain_scores(self, scores: Scores, signals: Signals) -> Report:
        """Stage 4: narrative report explaining the scores."""

        async def work() -> Report:
            data = await self._json_call(
                "explain",
                "explain_scores",
                prompts.EXPLAIN_SYSTEM,
                prompts.EXPLAIN_PROMPT.format(
                    scores_json=scores.model_dump_json(by_alias=True),
                    signals_json=signals.model_dump_json(),
                ),
                prompts.EXPLAIN_SCHEMA,
            )
            return _validate(Report, data)

        return await self._run_stage("explain", work())

    async def analyze(
        self,
        cv_text: str,
        context: TargetContext,
        persist: Optional[PersistCallback] = None,
    ) -> AnalysisResult:
        """
        Run parse -> signals -> score -> explain.

        Args:
            cv_text: Raw CV text
            context: Target role, industry, country and career level
            persist: Optional coroutine saving the finished result and
                returning the new CV id; only called when every stage succeeded

        Returns:
            AnalysisResult with parsed CV, signals, scores, report and the
            saved CV id (None when not persisted)

        Raises:
            PipelineError: If any stage fails
        """
        parsed_cv = await self.parse_cv(cv_text)
        signals = await self.detect_signals(parsed_cv, context)
        scores = self.score(signals)
        report = await self.explain_scores(scores, signals)

        result = AnalysisResult(
            parsed_cv=parsed_cv, signals=signals, scores=scores, report=report
        )
        logger.info(f"CV analysis complete: overall={scores.overall} risk={scores.ats_risk}")

        if persist is not None:
            result.cv_id = await persist(result)

        return result

    # ------------------------------------------------------------------
    # Optimization (user-triggered)
    # ------------------------------------------------------------------

    async def optimize_summary(self, summary: str, context: TargetContext) -> str:
        """Rewrite a professional summary for the target context."""
        prompt = prompts.SUMMARY_PROMPT.format(
            summary=summary,
            target_role=context.target_role,
            industry=context.industry,
            target_country=context.target_country,
            career_level=context.career_level,
        )
        return await self._run_stage(
            "optimize",
            self._text_call("optimize", "optimize_summary", prompts.REWRITE_SYSTEM, prompt),
        )

    async def optimize_bullets(self, bullets: List[str], target_role: str) -> List[str]:
        """Rewrite one job's bullet points. An empty list needs no call."""
        # Jobs without bullets get no provider call, so optimize_cv makes one
        # call per work-experience entry that has bullets, not per entry
        if not bullets:
            return []

        async def work() -> List[str]:
            data = await self._json_call(
                "optimize",
                "optimize_bullets",
                prompts.BULLETS_SYSTEM,
                prompts.BULLETS_PROMPT.format(
                    target_role=target_role,
                    bullets_json=json.dumps(bullets),
                ),
                prompts.BULLETS_SCHEMA,
            )
            # Older prompts asked for a bare JSON array; accept both shapes
            rewritten = data.get("bullets") if isinstance(data, dict) else data
            if not isinstance(rewritten, list) or not all(isinstance(b, str) for b in rewritten):
                raise ProviderResponseError("Expected a list of rewritten bullets")
            return rewritten

        return await self._run_stage("optimize", work())

    async def optimize(
        self,
        content: Union[str, List[str]],
        optimize_type: str,
        context: TargetContext,
    ) -> Union[str, List[str]]:
        """Rewrite either a summary or a list of bullets."""
        if optimize_type == "summary":
            summary = content if isinstance(content, str) else "\n".join(content)
            return await self.optimize_summary(summary, context)

        bullets = content if isinstance(content, list) else [
            line.strip() for line in content.splitlines() if line.strip()
        ]
        return await self.optimize_bullets(bullets, context.target_role)

    async def optimize_cv(self, parsed_cv: ParsedCV, context: TargetContext) -> OptimizedCV:
        """
        Rewrite the summary and every job's bullets.

        The summary call and one call per work-experience entry run
        concurrently; any failure fails the whole optimization.
        """
        summary, *rewritten = await asyncio.gather(
            self.optimize_summary(parsed_cv.professional_summary, context),
            *[
                self.optimize_bullets(job.bullet_points, context.target_role)
                for job in parsed_cv.work_experience
            ],
        )

        return OptimizedCV(
            summary=summary,
            experience=[
                OptimizedExperience(title=job.title, bullets=bullets)
                for job, bullets in zip(parsed_cv.work_experience, rewritten)
            ],
        )


def get_pipeline() -> CVAnalysisPipeline:
    """FastAPI dependency returning a pipeline on the shared provider."""
    return CVAnalysisPipeline(get_default_provider())
