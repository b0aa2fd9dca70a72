"""
Lead Score Engine - Heuristic scoring for local-business prospects.

Scores each prospect on three independent 0-100 scales (high-ticket,
opportunity, lead-gen) and tags the ones worth chasing.

CLI Usage:
    leadscore score prospects.csv --tag boring_goldmine
    leadscore score prospects.json -f json -q | jq '.[:5]'
    leadscore rescore --batch-size 100 --workers 4
    leadscore leadgen prospects.csv

Library Usage:
    from leadscore import Prospect, calculate_enhanced_scores

    scores = calculate_enhanced_scores(
        Prospect(company_name="Acme Roofing", business_type="Roofing Contractor")
    )
    print(scores.high_ticket_score, scores.opportunity_tags)
"""

__version__ = "1.0.0"

# Semantic versioning
# MAJOR.MINOR.PATCH
# - MAJOR: Breaking changes
# - MINOR: New features (backward compatible)
# - PATCH: Bug fixes (backward compatible)
VERSION_INFO = {
    "major": 1,
    "minor": 0,
    "patch": 0,
    "release": "stable",  # stable, beta, alpha
}


def get_version() -> str:
    """Get full version string."""
    version = f"{VERSION_INFO['major']}.{VERSION_INFO['minor']}.{VERSION_INFO['patch']}"
    if VERSION_INFO["release"] != "stable":
        version += f"-{VERSION_INFO['release']}"
    return version


from leadscore.models import Prospect, EnhancedScores, ScoredProspect
from leadscore.scoring import calculate_enhanced_scores
from leadscore.api import score_prospects, score_file

__all__ = [
    "Prospect",
    "EnhancedScores",
    "ScoredProspect",
    "calculate_enhanced_scores",
    "score_prospects",
    "score_file",
    "__version__",
    "get_version",
    "VERSION_INFO",
]
