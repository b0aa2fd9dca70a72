"""Aggregate scored prospects into category-level insights."""

import heapq
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .constants import (
    CATEGORY_PROSPECT_MIN_SCORE,
    DEFAULT_CATEGORY,
    LEAD_VALUE_BY_CATEGORY,
    OTHER_CATEGORY,
    TOP_CATEGORIES_WITH_PROSPECTS,
    TOP_PROSPECTS_LIMIT,
    OpportunityTag,
)
from .models import EnhancedScores, Prospect, ScoredProspect
from .scoring import classify_category, get_category_lead_value


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (dashboard rounding)."""
    return int(math.floor(value + 0.5))


@dataclass
class CategoryOpportunity:
    """Lead-gen opportunity for one service category."""

    category: str
    count: int
    avg_score: int
    avg_rating: Optional[float]
    estimated_lead_value: int
    top_cities: list[tuple[str, int]]
    market_gap_percent: int

    @property
    def opportunity_index(self) -> float:
        return self.avg_score * self.estimated_lead_value * math.log(self.count + 1)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "count": self.count,
            "avg_score": self.avg_score,
            "avg_rating": self.avg_rating,
            "estimated_lead_value": self.estimated_lead_value,
            "top_cities": [{"city": city, "count": n} for city, n in self.top_cities],
            "market_gap_percent": self.market_gap_percent,
            "opportunity_index": round(self.opportunity_index, 2),
        }


def lead_gen_opportunities(
    entries: Iterable[tuple[Prospect, Optional[int]]],
    top_cities: int = 5,
) -> list[CategoryOpportunity]:
    """
    Group prospects by essential-service category and rank the niches.

    Prospects without a lead-gen score and those outside the essential
    service list are ignored. Niches are ranked by
    avg_score * estimated_lead_value * ln(count + 1).

    Args:
        entries: (prospect, lead_gen_score) pairs
        top_cities: How many cities to list per category

    Returns:
        Categories sorted by opportunity index, best first
    """
    groups: dict[str, dict] = {}

    for prospect, score in entries:
        if score is None:
            continue
        category = classify_category(prospect)
        if category == OTHER_CATEGORY:
            continue

        group = groups.setdefault(category, {
            "count": 0,
            "total_score": 0,
            "total_rating": 0.0,
            "rating_count": 0,
            "no_website": 0,
            "cities": Counter(),
        })
        group["count"] += 1
        group["total_score"] += score
        if prospect.google_rating:
            group["total_rating"] += prospect.google_rating
            group["rating_count"] += 1
        if not prospect.website:
            group["no_website"] += 1
        group["cities"][prospect.city or "Unknown"] += 1

    opportunities = []
    for category, group in groups.items():
        count = group["count"]
        avg_rating = None
        if group["rating_count"]:
            avg_rating = round_half_up(group["total_rating"] / group["rating_count"] * 10) / 10

        opportunities.append(CategoryOpportunity(
            category=category,
            count=count,
            avg_score=round_half_up(group["total_score"] / count),
            avg_rating=avg_rating,
            estimated_lead_value=LEAD_VALUE_BY_CATEGORY.get(
                category, LEAD_VALUE_BY_CATEGORY[DEFAULT_CATEGORY]
            ),
            top_cities=group["cities"].most_common(top_cities),
            market_gap_percent=round_half_up(group["no_website"] / count * 100),
        ))

    opportunities.sort(key=lambda o: o.opportunity_index, reverse=True)
    return opportunities


def category_prospects(
    entries: Iterable[tuple[Prospect, Optional[int]]],
    categories: Iterable[str],
    min_score: int = CATEGORY_PROSPECT_MIN_SCORE,
    limit: int = TOP_PROSPECTS_LIMIT,
) -> dict[str, list[tuple[Prospect, int]]]:
    """
    Best-scoring prospects for each category.

    A prospect belongs to every category contained in its business type or
    categories text, so one prospect can be listed under several categories.

    Args:
        entries: (prospect, lead_gen_score) pairs
        categories: Categories to list prospects for
        min_score: Minimum lead-gen score to be listed
        limit: Prospects per category

    Returns:
        Category -> (prospect, score) pairs, highest score first
    """
    qualified = [
        (prospect, score) for prospect, score in entries
        if score is not None and score >= min_score
    ]

    result = {}
    for category in categories:
        matches = [
            (prospect, score) for prospect, score in qualified
            if category in (prospect.business_type or "").lower()
            or category in (prospect.categories or "").lower()
        ]
        matches.sort(key=lambda item: item[1], reverse=True)
        result[category] = matches[:limit]
    return result


def lead_gen_report(
    entries: Iterable[tuple[Prospect, Optional[int]]],
    top: int = 10,
    top_cities: int = 5,
) -> dict:
    """
    Category opportunities plus the best prospects in the leading categories.

    Args:
        entries: (prospect, lead_gen_score) pairs
        top: How many categories to report
        top_cities: How many cities to list per category

    Returns:
        Dictionary with opportunities, category_prospects and totals
    """
    entries = list(entries)
    opportunities = lead_gen_opportunities(entries, top_cities)
    leading = [o.category for o in opportunities[:TOP_CATEGORIES_WITH_PROSPECTS]]

    return {
        "opportunities": [o.to_dict() for o in opportunities[:top]],
        "category_prospects": {
            category: [prospect_summary(p, lead_gen_score=score) for p, score in matches]
            for category, matches in category_prospects(entries, leading).items()
        },
        "total_categories": len(opportunities),
        "total_prospects": sum(1 for _, score in entries if score is not None),
    }


def prospect_summary(prospect: Prospect, **scores) -> dict:
    """Short identifying fields for report listings, plus the given scores."""
    summary = {
        "id": prospect.id,
        "company_name": prospect.company_name,
        "business_type": prospect.business_type or prospect.categories,
        "city": prospect.city,
        "website": prospect.website,
        "google_rating": prospect.google_rating,
        "review_count": prospect.review_count,
    }
    summary.update(scores)
    return summary


class TopProspects:
    """Keeps the highest-scoring prospects seen so far, up to a limit."""

    def __init__(self, limit: int = TOP_PROSPECTS_LIMIT):
        self.limit = limit
        self._heap: list[tuple[int, int, ScoredProspect]] = []
        self._seen = 0

    def add(self, score: int, entry: ScoredProspect) -> None:
        # Earlier entries win ties
        self._seen += 1
        item = (score, -self._seen, entry)
        if len(self._heap) < self.limit:
            heapq.heappush(self._heap, item)
        elif item[:2] > self._heap[0][:2]:
            heapq.heapreplace(self._heap, item)

    def entries(self) -> list[ScoredProspect]:
        """Kept prospects, best first."""
        ranked = sorted(self._heap, key=lambda item: item[:2], reverse=True)
        return [entry for _, _, entry in ranked]

    def __len__(self) -> int:
        return len(self._heap)


@dataclass
class CategoryTally:
    count: int = 0
    total_score: int = 0
    total_lead_value: int = 0

    @property
    def avg_score(self) -> int:
        return round_half_up(self.total_score / self.count) if self.count else 0

    @property
    def avg_lead_value(self) -> int:
        return round_half_up(self.total_lead_value / self.count) if self.count else 0


@dataclass
class ScoreStats:
    """Running tag counts and per-category lead-gen averages."""

    scored: int = 0
    tag_counts: Counter = field(default_factory=Counter)
    categories: dict[str, CategoryTally] = field(default_factory=dict)
    top_high_ticket: TopProspects = field(default_factory=TopProspects)
    top_goldmines: TopProspects = field(default_factory=TopProspects)
    top_lead_gen: TopProspects = field(default_factory=TopProspects)

    def add(self, prospect: Prospect, scores: EnhancedScores) -> None:
        self.scored += 1
        self.tag_counts.update(scores.opportunity_tags)

        # Goldmines rank by marketing gap, the others by their own score
        entry = ScoredProspect(prospect=prospect, scores=scores)
        if scores.has_tag(OpportunityTag.HIGH_TICKET):
            self.top_high_ticket.add(scores.high_ticket_score, entry)
        if scores.has_tag(OpportunityTag.BORING_GOLDMINE):
            self.top_goldmines.add(scores.opportunity_score, entry)
        if scores.has_tag(OpportunityTag.LEADGEN_OPPORTUNITY):
            self.top_lead_gen.add(scores.lead_gen_score, entry)

        category = classify_category(prospect)
        tally = self.categories.setdefault(category, CategoryTally())
        tally.count += 1
        tally.total_score += scores.lead_gen_score
        business_type = prospect.business_type or prospect.categories or "unknown"
        tally.total_lead_value += get_category_lead_value(business_type)

    def tag_count(self, tag) -> int:
        return self.tag_counts[OpportunityTag(tag)]

    def tag_percent(self, tag) -> int:
        if not self.scored:
            return 0
        return round_half_up(self.tag_count(tag) / self.scored * 100)

    def top_categories(self, limit: int = 10) -> list[tuple[str, CategoryTally]]:
        """Known categories by average lead-gen score, best first."""
        known = [(name, t) for name, t in self.categories.items() if name != OTHER_CATEGORY]
        known.sort(key=lambda item: item[1].avg_score, reverse=True)
        return known[:limit]

    def to_dict(self, limit: int = 5) -> dict:
        return {
            "scored": self.scored,
            "high_ticket": self.tag_count(OpportunityTag.HIGH_TICKET),
            "boring_goldmine": self.tag_count(OpportunityTag.BORING_GOLDMINE),
            "leadgen_opportunity": self.tag_count(OpportunityTag.LEADGEN_OPPORTUNITY),
            "quick_win": self.tag_count(OpportunityTag.QUICK_WIN),
            "top_categories": [
                {"category": name, "count": t.count, "avg_score": t.avg_score}
                for name, t in self.top_categories(limit)
            ],
            "top_high_ticket": [
                prospect_summary(e.prospect, high_ticket_score=e.scores.high_ticket_score)
                for e in self.top_high_ticket.entries()
            ],
            "top_goldmines": [
                prospect_summary(e.prospect, opportunity_score=e.scores.opportunity_score)
                for e in self.top_goldmines.entries()
            ],
            "top_lead_gen": [
                prospect_summary(e.prospect, lead_gen_score=e.scores.lead_gen_score)
                for e in self.top_lead_gen.entries()
            ],
        }
