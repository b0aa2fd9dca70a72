"""
Programmatic API for the lead score engine.

Usage:
    from leadscore import score_prospects, score_file

    results = score_file("prospects.csv")
    goldmines = [r for r in results if r.scores.has_tag("boring_goldmine")]
"""

import logging
from typing import Iterable, List, Optional

from leadscore.config import ScoringConfig, load_config
from leadscore.importer import load_prospects
from leadscore.models import Prospect, ScoredProspect
from leadscore.scoring import calculate_enhanced_scores, generate_score_notes

logger = logging.getLogger(__name__)


def score_prospects(
    prospects: Iterable[Prospect],
    config: Optional[ScoringConfig] = None,
) -> List[ScoredProspect]:
    """
    Score prospects and attach plain-English notes.

    Args:
        prospects: Prospects to score
        config: Scoring configuration (uses defaults if not provided)

    Returns:
        Scored prospects in input order
    """
    results = []
    for prospect in prospects:
        scores = calculate_enhanced_scores(prospect, config)
        results.append(ScoredProspect(
            prospect=prospect,
            scores=scores,
            notes=generate_score_notes(prospect, scores),
        ))
    return results


def score_file(
    path: str,
    config_path: Optional[str] = None,
    min_high_ticket: int = 0,
    min_opportunity: int = 0,
    min_lead_gen: int = 0,
    tags: Optional[Iterable[str]] = None,
) -> List[ScoredProspect]:
    """
    Load, score and filter prospects from a CSV/JSON file.

    Results are sorted by opportunity score, highest first.

    Args:
        path: Prospect file (csv, json or jsonl)
        config_path: Optional YAML config
        min_high_ticket: Minimum high-ticket score
        min_opportunity: Minimum opportunity score
        min_lead_gen: Minimum lead-gen score
        tags: Keep only prospects carrying all of these tags

    Returns:
        Filtered, sorted scored prospects
    """
    settings = load_config(config_path)
    loaded = load_prospects(path)

    results = score_prospects(loaded.prospects, settings.scoring)
    results = filter_scored(results, min_high_ticket, min_opportunity, min_lead_gen, tags)
    results.sort(key=lambda r: r.scores.opportunity_score, reverse=True)

    logger.info("Scored %d prospects from %s", len(results), path)
    return results


def filter_scored(
    results: List[ScoredProspect],
    min_high_ticket: int = 0,
    min_opportunity: int = 0,
    min_lead_gen: int = 0,
    tags: Optional[Iterable[str]] = None,
) -> List[ScoredProspect]:
    """Apply score thresholds and required tags."""
    if min_high_ticket:
        results = [r for r in results if r.scores.high_ticket_score >= min_high_ticket]
    if min_opportunity:
        results = [r for r in results if r.scores.opportunity_score >= min_opportunity]
    if min_lead_gen:
        results = [r for r in results if r.scores.lead_gen_score >= min_lead_gen]
    for tag in tags or ():
        results = [r for r in results if r.scores.has_tag(tag)]
    return results
