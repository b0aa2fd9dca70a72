"""High-ticket score calculation - Is this higher-value work?"""

from typing import Optional

from ..config import ScoringConfig
from ..constants import (
    COMMERCIAL_KEYWORDS,
    FACTOR_CAPS,
    HIGH_VALUE_INDUSTRIES,
    INDUSTRY_VALUE_FLOOR,
    MAX_SCORE,
    MEDIUM_VALUE_INDUSTRIES,
    PREMIUM_KEYWORDS,
    SCALE_KEYWORDS,
)
from ..models import HighTicketFactors, Prospect
from .features import count_matches, extract_features, matches_any


def calculate_high_ticket_score(
    prospect: Prospect,
    config: Optional[ScoringConfig] = None,
) -> HighTicketFactors:
    """
    Calculate the high-ticket score for a prospect.

    Estimates how likely the prospect is to have commercial, premium or
    scaled work. Four sub-factors of up to 25 points each.

    Args:
        prospect: The prospect to score
        config: Scoring configuration (uses defaults if not provided)

    Returns:
        HighTicketFactors with the clamped total (0-100)
    """
    config = config or ScoringConfig()
    features = extract_features(prospect)
    text = features.search_text

    # Commercial focus - B2B/commercial keywords
    commercial_hits = count_matches(text, COMMERCIAL_KEYWORDS)
    commercial_focus = min(
        commercial_hits * config.commercial_hit_points,
        FACTOR_CAPS["commercial_focus"],
    )

    # Price indicators - premium keywords
    premium_hits = count_matches(text, PREMIUM_KEYWORDS)
    price_indicators = min(
        premium_hits * config.premium_hit_points,
        FACTOR_CAPS["price_indicators"],
    )

    # Scale signals - keywords plus size of the operation
    scale = count_matches(text, SCALE_KEYWORDS) * config.scale_hit_points

    if features.review_count > 100:
        scale += 10
    elif features.review_count > 50:
        scale += 5

    if features.employee_count > 10:
        scale += 10
    elif features.employee_count > 5:
        scale += 5

    scale_signals = min(scale, FACTOR_CAPS["scale_signals"])

    # Industry value - single tier pick
    if matches_any(features.category_text, HIGH_VALUE_INDUSTRIES):
        industry_value = 25
    elif matches_any(features.category_text, MEDIUM_VALUE_INDUSTRIES):
        industry_value = 15
    else:
        industry_value = INDUSTRY_VALUE_FLOOR
    industry_value = min(industry_value, FACTOR_CAPS["industry_value"])

    total = commercial_focus + price_indicators + scale_signals + industry_value

    return HighTicketFactors(
        commercial_focus=commercial_focus,
        price_indicators=price_indicators,
        scale_signals=scale_signals,
        industry_value=industry_value,
        total=max(0, min(total, MAX_SCORE)),
    )
