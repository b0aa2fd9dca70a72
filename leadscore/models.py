"""Data models for prospects and their scores."""

import math
import re
from dataclasses import dataclass, field, fields
from typing import Any, Optional

from .constants import OpportunityTag


# camelCase keys used by the host application
_CAMEL_ALIASES = {
    "companyName": "company_name",
    "businessType": "business_type",
    "googleRating": "google_rating",
    "reviewCount": "review_count",
    "yelpRating": "yelp_rating",
    "angiRating": "angi_rating",
    "facebookRating": "facebook_rating",
    "hasCMS": "has_cms",
    "hasCms": "has_cms",
    "hasAnalytics": "has_analytics",
    "hasLiveChat": "has_live_chat",
    "hasBookingWidget": "has_booking_widget",
    "needsWebsite": "needs_website",
    "additionalEmails": "additional_emails",
    "companyFacebook": "company_facebook",
    "companyInstagram": "company_instagram",
    "companyLinkedIn": "company_linkedin",
    "companyLinkedin": "company_linkedin",
    "employeeCount": "employee_count",
    "recentReviews": "recent_reviews",
    "qualificationSignals": "qualification_signals",
    "externalId": "external_id",
}

# Scraper export columns, used only when the primary key is missing
_FALLBACK_ALIASES = {
    "name": "company_name",
    "business_name": "company_name",
    "title": "company_name",
    "rating": "google_rating",
    "totalScore": "google_rating",
    "reviewsCount": "review_count",
    "category": "categories",
    "categoryName": "categories",
    "placeId": "external_id",
    "place_id": "external_id",
}

_TRUE_STRINGS = {"true", "yes", "y", "1", "t"}
_FALSE_STRINGS = {"false", "no", "n", "0", "f"}


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        value = str(value).strip().replace(",", "")
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    # nan and inf are not usable ratings or counts
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return None if number is None else int(number)


def _to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return None


def _to_emails(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        parts = re.split(r"[;,\s]+", value)
    else:
        try:
            parts = [str(v) for v in value]
        except TypeError:
            return ()
    return tuple(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class Prospect:
    """A business record as stored by the host application."""

    company_name: Optional[str] = None
    business_type: Optional[str] = None
    categories: Optional[str] = None
    city: Optional[str] = None

    # Reputation
    google_rating: Optional[float] = None
    review_count: Optional[int] = None
    yelp_rating: Optional[float] = None
    angi_rating: Optional[float] = None
    facebook_rating: Optional[float] = None

    # Digital presence
    website: Optional[str] = None
    has_cms: Optional[bool] = None
    has_analytics: Optional[bool] = None
    has_live_chat: Optional[bool] = None
    has_booking_widget: Optional[bool] = None
    needs_website: Optional[bool] = None

    # Contact and social
    email: Optional[str] = None
    additional_emails: tuple[str, ...] = ()
    phone: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    company_facebook: Optional[str] = None
    company_instagram: Optional[str] = None
    company_linkedin: Optional[str] = None

    # Scale and free text
    employee_count: Optional[int] = None
    recent_reviews: Optional[str] = None
    qualification_signals: Optional[str] = None

    # Identity used by import dedup and persistence
    id: Optional[int] = None
    external_id: Optional[str] = None

    @classmethod
    def from_dict(cls, record: dict) -> "Prospect":
        """
        Build a prospect from a loosely-typed record.

        Accepts host-style camelCase keys or snake_case keys. Values that
        cannot be coerced to the field's type become None; unknown keys are
        ignored.

        Args:
            record: Mapping of field names to raw values

        Returns:
            Prospect instance
        """
        record = record or {}
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}

        for key, raw in record.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name in known:
                values[name] = raw

        for key, name in _FALLBACK_ALIASES.items():
            if key in record and _to_text(values.get(name)) is None:
                values[name] = record[key]

        return cls(
            company_name=_to_text(values.get("company_name")),
            business_type=_to_text(values.get("business_type")),
            categories=_to_text(values.get("categories")),
            city=_to_text(values.get("city")),
            google_rating=_to_float(values.get("google_rating")),
            review_count=_to_int(values.get("review_count")),
            yelp_rating=_to_float(values.get("yelp_rating")),
            angi_rating=_to_float(values.get("angi_rating")),
            facebook_rating=_to_float(values.get("facebook_rating")),
            website=_to_text(values.get("website")),
            has_cms=_to_bool(values.get("has_cms")),
            has_analytics=_to_bool(values.get("has_analytics")),
            has_live_chat=_to_bool(values.get("has_live_chat")),
            has_booking_widget=_to_bool(values.get("has_booking_widget")),
            needs_website=_to_bool(values.get("needs_website")),
            email=_to_text(values.get("email")),
            additional_emails=_to_emails(values.get("additional_emails")),
            phone=_to_text(values.get("phone")),
            facebook=_to_text(values.get("facebook")),
            instagram=_to_text(values.get("instagram")),
            linkedin=_to_text(values.get("linkedin")),
            company_facebook=_to_text(values.get("company_facebook")),
            company_instagram=_to_text(values.get("company_instagram")),
            company_linkedin=_to_text(values.get("company_linkedin")),
            employee_count=_to_int(values.get("employee_count")),
            recent_reviews=_to_text(values.get("recent_reviews")),
            qualification_signals=_to_text(values.get("qualification_signals")),
            id=_to_int(values.get("id")),
            external_id=_to_text(values.get("external_id")),
        )

    @property
    def has_any_social(self) -> bool:
        return bool(
            self.facebook or self.instagram or self.linkedin
            or self.company_facebook or self.company_instagram or self.company_linkedin
        )


@dataclass(frozen=True)
class HighTicketFactors:
    """High-ticket score breakdown."""

    commercial_focus: int = 0
    price_indicators: int = 0
    scale_signals: int = 0
    industry_value: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "commercialFocus": self.commercial_focus,
            "priceIndicators": self.price_indicators,
            "scaleSignals": self.scale_signals,
            "industryValue": self.industry_value,
            "total": self.total,
        }


@dataclass(frozen=True)
class OpportunityFactors:
    """Opportunity score breakdown."""

    website_gap: int = 0
    marketing_gap: int = 0
    competitor_weakness: int = 0
    growth_potential: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "websiteGap": self.website_gap,
            "marketingGap": self.marketing_gap,
            "competitorWeakness": self.competitor_weakness,
            "growthPotential": self.growth_potential,
            "total": self.total,
        }


@dataclass(frozen=True)
class LeadGenFactors:
    """Lead-gen score breakdown."""

    search_volume: int = 0
    competition_level: int = 0
    monetization: int = 0
    geographic_opportunity: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "searchVolume": self.search_volume,
            "competitionLevel": self.competition_level,
            "monetization": self.monetization,
            "geographicOpportunity": self.geographic_opportunity,
            "total": self.total,
        }


@dataclass(frozen=True)
class ScoringFactors:
    """Per-score breakdowns."""

    high_ticket: HighTicketFactors = field(default_factory=HighTicketFactors)
    opportunity: OpportunityFactors = field(default_factory=OpportunityFactors)
    lead_gen: LeadGenFactors = field(default_factory=LeadGenFactors)

    def to_dict(self) -> dict:
        return {
            "highTicket": self.high_ticket.to_dict(),
            "opportunity": self.opportunity.to_dict(),
            "leadGen": self.lead_gen.to_dict(),
        }


@dataclass(frozen=True)
class EnhancedScores:
    """Result of scoring a single prospect."""

    high_ticket_score: int
    opportunity_score: int
    lead_gen_score: int
    opportunity_tags: tuple[OpportunityTag, ...]
    scoring_factors: ScoringFactors

    def has_tag(self, tag) -> bool:
        return OpportunityTag(tag) in self.opportunity_tags

    def to_dict(self) -> dict:
        """Convert to the host's JSON shape."""
        return {
            "highTicketScore": self.high_ticket_score,
            "opportunityScore": self.opportunity_score,
            "leadGenScore": self.lead_gen_score,
            "opportunityTags": [tag.value for tag in self.opportunity_tags],
            "scoringFactors": self.scoring_factors.to_dict(),
        }


@dataclass
class ScoredProspect:
    """A prospect paired with its scores and notes."""

    prospect: Prospect
    scores: EnhancedScores
    notes: str = ""

    def to_dict(self) -> dict:
        """Flat dictionary for JSON/CSV export."""
        p = self.prospect
        return {
            "id": p.id,
            "external_id": p.external_id,
            "company_name": p.company_name,
            "business_type": p.business_type or p.categories,
            "city": p.city,
            "website": p.website,
            "phone": p.phone,
            "email": p.email,
            "google_rating": p.google_rating,
            "review_count": p.review_count,
            "high_ticket_score": self.scores.high_ticket_score,
            "opportunity_score": self.scores.opportunity_score,
            "lead_gen_score": self.scores.lead_gen_score,
            "opportunity_tags": [tag.value for tag in self.scores.opportunity_tags],
            "scoring_factors": self.scores.scoring_factors.to_dict(),
            "notes": self.notes,
        }
