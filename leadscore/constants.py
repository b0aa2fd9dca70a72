"""
Static scoring tables.

All tables are immutable: keyword lists are tuples and lookup maps are
read-only mappings. Order is significant where a table is scanned for the
first match (category classification, lead value lookup).
"""

from enum import Enum
from types import MappingProxyType


class OpportunityTag(str, Enum):
    """Categorical labels attached to a scored prospect."""

    HIGH_TICKET = "high_ticket"
    BORING_GOLDMINE = "boring_goldmine"
    LEADGEN_OPPORTUNITY = "leadgen_opportunity"
    QUICK_WIN = "quick_win"
    NEEDS_WEBSITE = "needs_website"
    NEEDS_SOCIAL = "needs_social"


# Keywords that indicate high-ticket/commercial work
COMMERCIAL_KEYWORDS = (
    "commercial", "industrial", "business", "corporate",
    "enterprise", "fleet", "contract", "B2B",
)

PREMIUM_KEYWORDS = (
    "premium", "luxury", "custom", "high-end",
    "professional", "certified", "licensed", "insured",
)

SCALE_KEYWORDS = (
    "24/7", "24 hour", "emergency", "same day",
    "fleet", "multiple locations", "serving", "franchise",
)

HIGH_TICKET_KEYWORDS = MappingProxyType({
    "commercial": COMMERCIAL_KEYWORDS,
    "premium": PREMIUM_KEYWORDS,
    "scale": SCALE_KEYWORDS,
})

HIGH_VALUE_INDUSTRIES = (
    "roofing", "hvac", "foundation", "restoration",
    "commercial", "industrial", "remodel", "construction",
)

MEDIUM_VALUE_INDUSTRIES = (
    "plumbing", "electrical", "concrete", "paving", "excavation",
)

# Essential ("boring but profitable") service types
BORING_GOLDMINE_TYPES = (
    "plumber", "plumbing",
    "hvac", "heating", "cooling", "air conditioning",
    "electrician", "electrical",
    "roofing", "roofer",
    "garage door",
    "pest control",
    "locksmith",
    "septic",
    "foundation",
    "water damage", "restoration",
    "tree service", "tree removal",
    "concrete",
    "excavation",
    "paving", "asphalt",
    "fence", "fencing",
    "gutter",
    "insulation",
    "waterproofing",
)

DEFAULT_CATEGORY = "default"

# Estimated value of a single lead in dollars
LEAD_VALUE_BY_CATEGORY = MappingProxyType({
    "roofing": 150,
    "hvac": 100,
    "plumbing": 80,
    "electrical": 75,
    "foundation": 200,
    "water damage": 175,
    "restoration": 150,
    "garage door": 60,
    "pest control": 40,
    "tree service": 70,
    "concrete": 100,
    "paving": 120,
    "fence": 50,
    "gutter": 45,
    "insulation": 80,
    "waterproofing": 90,
    "septic": 100,
    "excavation": 150,
    "locksmith": 35,
    DEFAULT_CATEGORY: 50,
})

# Suburbs with less SEO competition
SMALLER_CITIES = (
    "burnsville", "lakeville", "shakopee", "brooklyn park", "maple grove",
    "woodbury", "eden prairie", "plymouth", "coon rapids", "blaine",
)

MN_METRO_CITIES = (
    "minneapolis", "st paul", "saint paul", "bloomington", "brooklyn park",
    "plymouth", "maple grove", "woodbury", "eden prairie", "burnsville",
    "lakeville", "eagan", "blaine", "coon rapids", "shakopee",
    "minnetonka", "richfield", "fridley", "brooklyn center",
)

MN_STATE_MARKERS = ("mn", "minnesota")

# Per sub-factor point budgets
FACTOR_CAPS = MappingProxyType({
    "commercial_focus": 25,
    "price_indicators": 25,
    "scale_signals": 25,
    "industry_value": 25,
    "website_gap": 30,
    "marketing_gap": 30,
    "competitor_weakness": 20,
    "growth_potential": 20,
    "search_volume": 30,
    "competition_level": 30,
    "monetization": 20,
    "geographic_opportunity": 20,
})

MAX_SCORE = 100

# Flat until real market data is available
COMPETITOR_WEAKNESS_POINTS = 10

# Industry value when no tier matches
INDUSTRY_VALUE_FLOOR = 8

OTHER_CATEGORY = "other"

# Report sizes
TOP_PROSPECTS_LIMIT = 5
TOP_CATEGORIES_WITH_PROSPECTS = 5

# Minimum lead-gen score for a prospect to be listed under its category
CATEGORY_PROSPECT_MIN_SCORE = 60


# Note templates for plain-English summaries
NOTES = MappingProxyType({
    "no_website": "No website found - needs web presence",
    "needs_website": "Website flagged as needing a rebuild",
    "broken_website": "Website link looks incomplete or broken",
    "no_cms": "Website has no modern CMS",
    "no_socials": "no social media profiles",
    "partial_socials": "missing Facebook or Instagram",
    "no_analytics": "no analytics tracking",
    "no_capture": "no live chat or online booking",
    "no_email": "no email listed",
    "few_reviews": "good rating but not asking for reviews",
    "well_covered": "Digital presence well covered - limited obvious gaps",
})

TAG_LABELS = MappingProxyType({
    OpportunityTag.HIGH_TICKET: "High-ticket",
    OpportunityTag.BORING_GOLDMINE: "Boring goldmine",
    OpportunityTag.LEADGEN_OPPORTUNITY: "Lead-gen niche",
    OpportunityTag.QUICK_WIN: "Quick win",
    OpportunityTag.NEEDS_WEBSITE: "Needs website",
    OpportunityTag.NEEDS_SOCIAL: "Needs social",
})
