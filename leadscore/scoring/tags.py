"""Opportunity tag classification."""

from typing import Optional

from ..config import ScoringConfig
from ..constants import BORING_GOLDMINE_TYPES, OpportunityTag
from ..models import Prospect
from .features import extract_features, matches_any


def determine_opportunity_tags(
    high_ticket_score: int,
    opportunity_score: int,
    lead_gen_score: int,
    prospect: Prospect,
    config: Optional[ScoringConfig] = None,
) -> tuple[OpportunityTag, ...]:
    """
    Derive opportunity tags from the clamped scores and raw field checks.

    Checks are independent; a prospect can carry several tags. Tags are
    returned in evaluation order.

    Args:
        high_ticket_score: Clamped high-ticket total
        opportunity_score: Clamped opportunity total
        lead_gen_score: Clamped lead-gen total
        prospect: The scored prospect
        config: Scoring configuration (uses defaults if not provided)

    Returns:
        Tuple of matching tags
    """
    config = config or ScoringConfig()
    features = extract_features(prospect)
    tags = []

    if high_ticket_score >= config.high_ticket_threshold:
        tags.append(OpportunityTag.HIGH_TICKET)

    is_essential = matches_any(features.category_text, BORING_GOLDMINE_TYPES)
    is_established = features.review_count >= config.goldmine_min_reviews
    has_marketing_gap = opportunity_score >= config.goldmine_min_opportunity
    if is_essential and is_established and has_marketing_gap:
        tags.append(OpportunityTag.BORING_GOLDMINE)

    if lead_gen_score >= config.leadgen_threshold:
        tags.append(OpportunityTag.LEADGEN_OPPORTUNITY)

    if (
        opportunity_score >= config.quick_win_min_opportunity
        and features.rating >= config.quick_win_min_rating
    ):
        tags.append(OpportunityTag.QUICK_WIN)

    if not prospect.website:
        tags.append(OpportunityTag.NEEDS_WEBSITE)

    # Company pages do not count here
    if not prospect.facebook and not prospect.instagram:
        tags.append(OpportunityTag.NEEDS_SOCIAL)

    return tuple(tags)
