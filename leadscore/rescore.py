"""Bulk rescoring of stored prospects."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import ScoringConfig, Settings
from .database import ProspectRecord, SystemJob
from .insights import ScoreStats
from .models import EnhancedScores, Prospect
from .scoring import calculate_enhanced_scores

logger = logging.getLogger(__name__)

JOB_TYPE = "enhanced_scoring"


@dataclass
class RescoreSummary:
    """Outcome of a rescoring run."""

    total: int = 0
    updated: int = 0
    errors: int = 0
    stats: ScoreStats = field(default_factory=ScoreStats)
    job_id: Optional[int] = None


def persist_scores(
    session_factory: sessionmaker,
    prospect: Prospect,
    config: Optional[ScoringConfig] = None,
) -> EnhancedScores:
    """
    Score one prospect and write the result in its own transaction.

    Raises:
        LookupError: If the stored record no longer exists
        SQLAlchemyError: If the write fails (the transaction is rolled back)
    """
    scores = calculate_enhanced_scores(prospect, config)

    db = session_factory()
    try:
        record = db.get(ProspectRecord, prospect.id)
        if record is None:
            raise LookupError(f"Prospect {prospect.id} no longer exists")
        record.apply_scores(scores)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()

    return scores


def load_stored_prospects(session_factory: sessionmaker, unscored_only: bool = False) -> list[Prospect]:
    """Snapshot stored prospects, optionally only those never scored."""
    db = session_factory()
    try:
        query = db.query(ProspectRecord).order_by(ProspectRecord.id)
        if unscored_only:
            query = query.filter(ProspectRecord.high_ticket_score.is_(None))
        return [record.to_prospect() for record in query]
    finally:
        db.close()


def rescore_all(
    session_factory: sessionmaker,
    settings: Optional[Settings] = None,
    unscored_only: bool = False,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> RescoreSummary:
    """
    Rescore every stored prospect in batches.

    Records within a batch are scored and written in parallel. Each write
    is independent, so a failed record is counted and logged without
    affecting the others. A SystemJob row records the run.

    Args:
        session_factory: Session factory from create_session_factory
        settings: Batch size, worker count and scoring config
        unscored_only: Skip prospects that already have scores
        on_progress: Called with (done, total) after each batch

    Returns:
        RescoreSummary with counts and tag/category stats
    """
    settings = settings or Settings()
    batch_size = max(1, settings.batch_size)
    workers = max(1, settings.max_workers)

    prospects = load_stored_prospects(session_factory, unscored_only)
    summary = RescoreSummary(total=len(prospects))
    logger.info("Rescoring %d prospects (batch=%d, workers=%d)", len(prospects), batch_size, workers)

    for start in range(0, len(prospects), batch_size):
        batch = prospects[start:start + batch_size]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(persist_scores, session_factory, prospect, settings.scoring): prospect
                for prospect in batch
            }
            for future in as_completed(futures):
                prospect = futures[future]
                try:
                    scores = future.result()
                except (SQLAlchemyError, LookupError) as e:
                    logger.warning("Failed to save scores for %s (id=%s): %s",
                                   prospect.company_name, prospect.id, e)
                    summary.errors += 1
                    continue
                summary.updated += 1
                summary.stats.add(prospect, scores)

        done = min(start + batch_size, len(prospects))
        logger.info("Progress: %d/%d", done, len(prospects))
        if on_progress:
            on_progress(done, len(prospects))

    summary.job_id = record_job(session_factory, summary)
    return summary


def record_job(session_factory: sessionmaker, summary: RescoreSummary) -> Optional[int]:
    """Persist a SystemJob row for the run; returns its id or None on failure."""
    result = summary.stats.to_dict()
    result.update({"updated": summary.updated, "errors": summary.errors})

    db = session_factory()
    try:
        job = SystemJob(
            job_type=JOB_TYPE,
            status="completed" if not summary.errors else "completed_with_errors",
            result=result,
            completed_at=datetime.utcnow(),
        )
        db.add(job)
        db.commit()
        return job.id
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to record rescoring job: %s", e)
        return None
    finally:
        db.close()
