"""Scoring module for prospect prioritisation."""

from .engine import calculate_enhanced_scores, classify_category
from .features import extract_features
from .high_ticket import calculate_high_ticket_score
from .lead_gen import calculate_lead_gen_score, get_category_lead_value
from .notes import generate_outreach_angle, generate_score_notes
from .opportunity import calculate_opportunity_score
from .tags import determine_opportunity_tags

__all__ = [
    "calculate_enhanced_scores",
    "calculate_high_ticket_score",
    "calculate_lead_gen_score",
    "calculate_opportunity_score",
    "classify_category",
    "determine_opportunity_tags",
    "extract_features",
    "generate_outreach_angle",
    "generate_score_notes",
    "get_category_lead_value",
]
