"""Feature extraction - normalised text and numbers shared by the calculators."""

from dataclasses import dataclass
from typing import Iterable

from ..models import Prospect


@dataclass(frozen=True)
class ProspectFeatures:
    """Lowercased lookup text and safe numeric defaults for one prospect."""

    search_text: str
    category_text: str
    city: str
    rating: float
    review_count: int
    employee_count: int


def extract_features(prospect: Prospect) -> ProspectFeatures:
    """
    Extract the signals the score calculators match against.

    Absent fields are treated as "no signal": empty strings for text and
    zero for numbers.

    Args:
        prospect: The prospect to analyse

    Returns:
        ProspectFeatures for keyword, category and city matching
    """
    parts = [
        prospect.company_name,
        prospect.business_type,
        prospect.categories,
        prospect.recent_reviews,
        prospect.qualification_signals,
    ]
    search_text = " ".join(p for p in parts if p).lower()

    return ProspectFeatures(
        search_text=search_text,
        category_text=(prospect.business_type or prospect.categories or "").lower(),
        city=(prospect.city or "").lower(),
        rating=prospect.google_rating or 0.0,
        review_count=prospect.review_count or 0,
        employee_count=prospect.employee_count or 0,
    )


def count_matches(text: str, keywords: Iterable[str]) -> int:
    """Count keywords contained in text (case-insensitive substring match)."""
    return sum(1 for kw in keywords if kw.lower() in text)


def matches_any(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword is a substring of text."""
    return any(kw in text for kw in keywords)
