"""Combined scoring entry point."""

from typing import Optional

from ..config import ScoringConfig
from ..constants import BORING_GOLDMINE_TYPES, OTHER_CATEGORY
from ..models import EnhancedScores, Prospect, ScoringFactors
from .high_ticket import calculate_high_ticket_score
from .lead_gen import calculate_lead_gen_score
from .opportunity import calculate_opportunity_score
from .tags import determine_opportunity_tags


def calculate_enhanced_scores(
    prospect: Prospect,
    config: Optional[ScoringConfig] = None,
) -> EnhancedScores:
    """
    Calculate all three scores and the opportunity tags for a prospect.

    Pure and deterministic: the same prospect always yields the same result.

    Args:
        prospect: The prospect to score
        config: Scoring configuration (uses defaults if not provided)

    Returns:
        EnhancedScores with totals, tags and per-factor breakdown
    """
    config = config or ScoringConfig()

    high_ticket = calculate_high_ticket_score(prospect, config)
    opportunity = calculate_opportunity_score(prospect)
    lead_gen = calculate_lead_gen_score(prospect)

    tags = determine_opportunity_tags(
        high_ticket.total,
        opportunity.total,
        lead_gen.total,
        prospect,
        config,
    )

    return EnhancedScores(
        high_ticket_score=high_ticket.total,
        opportunity_score=opportunity.total,
        lead_gen_score=lead_gen.total,
        opportunity_tags=tags,
        scoring_factors=ScoringFactors(
            high_ticket=high_ticket,
            opportunity=opportunity,
            lead_gen=lead_gen,
        ),
    )


def classify_category(prospect: Prospect) -> str:
    """First essential service type in the business type, or "other"."""
    text = (prospect.business_type or prospect.categories or "").lower()
    for service in BORING_GOLDMINE_TYPES:
        if service in text:
            return service
    return OTHER_CATEGORY
