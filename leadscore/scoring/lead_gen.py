"""Lead-gen score calculation - Is this niche worth a lead-gen site?"""

from ..constants import (
    BORING_GOLDMINE_TYPES,
    DEFAULT_CATEGORY,
    FACTOR_CAPS,
    LEAD_VALUE_BY_CATEGORY,
    MAX_SCORE,
    MN_METRO_CITIES,
    MN_STATE_MARKERS,
    SMALLER_CITIES,
)
from ..models import LeadGenFactors, Prospect
from .features import extract_features, matches_any


def resolve_lead_value(category_text: str) -> int:
    """Highest lead value among all categories contained in the text."""
    value = LEAD_VALUE_BY_CATEGORY[DEFAULT_CATEGORY]
    for category, category_value in LEAD_VALUE_BY_CATEGORY.items():
        if category in category_text:
            value = max(value, category_value)
    return value


def get_category_lead_value(business_type: str) -> int:
    """
    Get the estimated lead value for a business type.

    Returns the value of the first category (in table order) contained in
    the business type, or the default value.
    """
    text = (business_type or "").lower()
    for category, value in LEAD_VALUE_BY_CATEGORY.items():
        if category in text:
            return value
    return LEAD_VALUE_BY_CATEGORY[DEFAULT_CATEGORY]


def monetization_points(lead_value: int) -> int:
    """Tiered points for the estimated value of a single lead."""
    if lead_value >= 150:
        return 20
    if lead_value >= 100:
        return 15
    if lead_value >= 75:
        return 10
    return 5


def calculate_lead_gen_score(prospect: Prospect) -> LeadGenFactors:
    """
    Calculate the lead-gen score for a prospect's niche.

    Rates the category and location rather than the business itself.

    Args:
        prospect: The prospect to score

    Returns:
        LeadGenFactors with the clamped total (0-100)
    """
    features = extract_features(prospect)
    category = features.category_text
    city = features.city

    # Essential services have consistent search demand
    if matches_any(category, BORING_GOLDMINE_TYPES):
        search_volume = 25
    else:
        search_volume = 10
    search_volume = min(search_volume, FACTOR_CAPS["search_volume"])

    # Smaller suburbs tend to have less SEO competition
    competition = 15
    if matches_any(city, SMALLER_CITIES):
        competition += 10
    competition_level = min(competition, FACTOR_CAPS["competition_level"])

    monetization = min(
        monetization_points(resolve_lead_value(category)),
        FACTOR_CAPS["monetization"],
    )

    if matches_any(city, MN_METRO_CITIES):
        geographic = 20
    elif matches_any(city, MN_STATE_MARKERS):
        geographic = 15
    else:
        geographic = 10
    geographic_opportunity = min(geographic, FACTOR_CAPS["geographic_opportunity"])

    total = search_volume + competition_level + monetization + geographic_opportunity

    return LeadGenFactors(
        search_volume=search_volume,
        competition_level=competition_level,
        monetization=monetization,
        geographic_opportunity=geographic_opportunity,
        total=max(0, min(total, MAX_SCORE)),
    )
