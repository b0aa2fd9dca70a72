"""Opportunity score calculation - How big is their marketing gap?"""

from ..constants import (
    BORING_GOLDMINE_TYPES,
    COMPETITOR_WEAKNESS_POINTS,
    FACTOR_CAPS,
    MAX_SCORE,
)
from ..models import OpportunityFactors, Prospect
from .features import extract_features, matches_any


def website_gap_points(prospect: Prospect) -> int:
    """Tiered website gap: first matching tier wins."""
    if not prospect.website:
        return 30
    if prospect.needs_website:
        # Flagged by the tech-stack scraper
        return 25
    if "http" not in prospect.website:
        # Incomplete or broken link
        return 20
    if not prospect.has_cms:
        return 15
    return 5


def marketing_gap_points(prospect: Prospect) -> int:
    """Additive marketing gap checks, uncapped."""
    score = 0
    has_facebook = prospect.facebook or prospect.company_facebook
    has_instagram = prospect.instagram or prospect.company_instagram

    if not prospect.has_any_social:
        score += 15
    elif not has_facebook or not has_instagram:
        score += 8

    # Missing tracking
    if not prospect.has_analytics:
        score += 7

    # No lead capture
    if not prospect.has_live_chat and not prospect.has_booking_widget:
        score += 5

    if not prospect.email and not prospect.additional_emails:
        score += 5

    # Good service but not asking for reviews
    if (
        prospect.google_rating and prospect.google_rating >= 4.0
        and prospect.review_count and prospect.review_count < 20
    ):
        score += 10

    return score


def calculate_opportunity_score(prospect: Prospect) -> OpportunityFactors:
    """
    Calculate the opportunity score for a prospect.

    Opportunity score represents the size of the digital marketing gap.
    Higher score = more gaps = better sales opportunity.

    Args:
        prospect: The prospect to score

    Returns:
        OpportunityFactors with the clamped total (0-100)
    """
    features = extract_features(prospect)

    website_gap = min(website_gap_points(prospect), FACTOR_CAPS["website_gap"])
    marketing_gap = min(marketing_gap_points(prospect), FACTOR_CAPS["marketing_gap"])
    competitor_weakness = COMPETITOR_WEAKNESS_POINTS

    growth = 0
    if features.rating >= 4.5:
        growth += 10
    elif features.rating >= 4.0:
        growth += 5

    if features.review_count >= 50:
        growth += 5

    # Essential services are always in demand
    if matches_any(features.category_text, BORING_GOLDMINE_TYPES):
        growth += 5

    growth_potential = min(growth, FACTOR_CAPS["growth_potential"])

    total = website_gap + marketing_gap + competitor_weakness + growth_potential

    return OpportunityFactors(
        website_gap=website_gap,
        marketing_gap=marketing_gap,
        competitor_weakness=competitor_weakness,
        growth_potential=growth_potential,
        total=max(0, min(total, MAX_SCORE)),
    )
