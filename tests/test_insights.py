"""Tests for category insights and scoring statistics."""

import math

import pytest

from leadscore.insights import (
    ScoreStats,
    TopProspects,
    category_prospects,
    lead_gen_opportunities,
    lead_gen_report,
    round_half_up,
)
from leadscore.models import Prospect, ScoredProspect
from leadscore.scoring import calculate_enhanced_scores


class TestRoundHalfUp:
    """Test dashboard rounding."""

    @pytest.mark.parametrize("value,expected", [
        (75.5, 76),
        (2.5, 3),
        (2.4, 2),
        (0.0, 0),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestLeadGenOpportunities:
    """Test niche grouping and ranking."""

    @pytest.fixture
    def entries(self):
        return [
            (Prospect(business_type="Plumber", city="Minneapolis", google_rating=4.0), 80),
            (Prospect(business_type="Plumber", city="Minneapolis", google_rating=4.5,
                      website="https://p.com"), 71),
            (Prospect(business_type="Roofing", city="Burnsville", website="https://r.com"), 90),
            (Prospect(business_type="Bakery", city="Eagan"), 99),
            (Prospect(business_type="Roofing", city="Eagan"), None),
        ]

    def test_excludes_other_and_unscored(self, entries):
        """Non-essential categories and unscored records are ignored."""
        opportunities = lead_gen_opportunities(entries)
        assert [o.category for o in opportunities] == ["roofing", "plumber"]
        assert opportunities[0].count == 1

    def test_category_aggregates(self, entries):
        """Averages, lead value, cities and market gap should be computed."""
        plumber = lead_gen_opportunities(entries)[1]
        assert plumber.count == 2
        assert plumber.avg_score == 76
        assert plumber.avg_rating == 4.3
        assert plumber.estimated_lead_value == 50
        assert plumber.top_cities == [("Minneapolis", 2)]
        assert plumber.market_gap_percent == 50

    def test_no_ratings(self, entries):
        """A category with no ratings has no average rating."""
        roofing = lead_gen_opportunities(entries)[0]
        assert roofing.avg_rating is None
        assert roofing.estimated_lead_value == 150
        assert roofing.market_gap_percent == 0

    def test_opportunity_index(self, entries):
        """Index should be avg score times lead value times ln(count + 1)."""
        roofing = lead_gen_opportunities(entries)[0]
        assert roofing.opportunity_index == pytest.approx(90 * 150 * math.log(2))
        assert roofing.to_dict()["top_cities"] == [{"city": "Burnsville", "count": 1}]

    def test_top_cities_limit(self):
        """Only the requested number of cities should be listed."""
        entries = [
            (Prospect(business_type="Septic", city=city), 50)
            for city in ["A", "B", "B", "C", "C", "C"]
        ]
        septic = lead_gen_opportunities(entries, top_cities=2)[0]
        assert septic.top_cities == [("C", 3), ("B", 2)]

    def test_empty(self):
        assert lead_gen_opportunities([]) == []


class TestCategoryProspects:
    """Test per-category prospect listings."""

    @pytest.fixture
    def entries(self):
        return [
            (Prospect(company_name="Low", business_type="Plumbing"), 59),
            (Prospect(company_name="Good", business_type="Plumbing"), 65),
            (Prospect(company_name="Best", business_type="Emergency PLUMBING"), 80),
            (Prospect(company_name="Both", categories="roofing, plumbing"), 70),
            (Prospect(company_name="Unscored", business_type="Plumbing"), None),
        ]

    def test_threshold_and_order(self, entries):
        """Only scores of 60 or more are listed, highest first."""
        result = category_prospects(entries, ["plumbing"])
        assert [(p.company_name, s) for p, s in result["plumbing"]] == [("Best", 80), ("Both", 70), ("Good", 65)]

    def test_categories_text_matches(self, entries):
        """A prospect can be listed under every category its text contains."""
        result = category_prospects(entries, ["roofing", "plumbing"])
        assert [p.company_name for p, _ in result["roofing"]] == ["Both"]
        assert "Both" in [p.company_name for p, _ in result["plumbing"]]

    def test_limit(self):
        entries = [(Prospect(company_name=str(n), business_type="Septic"), 60 + n) for n in range(8)]
        result = category_prospects(entries, ["septic"])
        assert [s for _, s in result["septic"]] == [67, 66, 65, 64, 63]

    def test_no_match(self, entries):
        assert category_prospects(entries, ["locksmith"]) == {"locksmith": []}


class TestLeadGenReport:
    """Test the combined lead-gen report."""

    def test_report(self):
        entries = [
            (Prospect(company_name="Acme", business_type="Roofing", city="Eagan"), 70),
            (Prospect(company_name="Drip", business_type="Plumbing"), 55),
            (Prospect(company_name="Crumbs", business_type="Bakery"), 90),
            (Prospect(company_name="New", business_type="Roofing"), None),
        ]
        report = lead_gen_report(entries, top=1)

        assert [o["category"] for o in report["opportunities"]] == ["roofing"]
        assert report["total_categories"] == 2
        assert report["total_prospects"] == 3
        assert report["category_prospects"]["plumbing"] == []
        roofer = report["category_prospects"]["roofing"][0]
        assert roofer["company_name"] == "Acme"
        assert roofer["city"] == "Eagan"
        assert roofer["lead_gen_score"] == 70

    def test_prospects_only_for_leading_categories(self):
        """Prospects are listed for the five best categories only."""
        types = ["Foundation", "Water Damage", "Roofing", "Excavation", "Paving", "Locksmith"]
        entries = [(Prospect(company_name=t, business_type=t), 80) for t in types]
        report = lead_gen_report(entries)
        assert len(report["opportunities"]) == 6
        assert len(report["category_prospects"]) == 5
        assert "locksmith" not in report["category_prospects"]

    def test_empty(self):
        report = lead_gen_report([])
        assert report["opportunities"] == []
        assert report["category_prospects"] == {}
        assert report["total_prospects"] == 0


class TestTopProspects:
    """Test bounded best-N tracking."""

    @staticmethod
    def entry(name):
        return ScoredProspect(prospect=Prospect(company_name=name), scores=None)

    def test_keeps_best(self):
        top = TopProspects(limit=2)
        for name, score in [("a", 50), ("b", 90), ("c", 70), ("d", 60)]:
            top.add(score, self.entry(name))
        assert len(top) == 2
        assert [e.prospect.company_name for e in top.entries()] == ["b", "c"]

    def test_ties_keep_earlier(self):
        top = TopProspects(limit=2)
        for name in ["first", "second", "third"]:
            top.add(80, self.entry(name))
        assert [e.prospect.company_name for e in top.entries()] == ["first", "second"]

    def test_empty(self):
        assert TopProspects().entries() == []


class TestScoreStats:
    """Test running statistics used by bulk rescoring."""

    @pytest.fixture
    def stats(self):
        stats = ScoreStats()
        prospects = [
            Prospect(
                business_type="Roofing Contractor",
                review_count=1918,
                google_rating=4.9,
                website="https://x.com",
                email="a@b.com",
            ),
            Prospect(),
        ]
        for prospect in prospects:
            stats.add(prospect, calculate_enhanced_scores(prospect))
        return stats

    def test_tag_counts(self, stats):
        """Tags should be counted per scored prospect."""
        assert stats.scored == 2
        assert stats.tag_count("quick_win") == 1
        assert stats.tag_count("needs_social") == 2
        assert stats.tag_percent("quick_win") == 50

    def test_top_categories_exclude_other(self, stats):
        """Unclassified prospects should not appear in top categories."""
        top = stats.top_categories()
        assert [name for name, _ in top] == ["roofing"]
        assert top[0][1].avg_score == 70
        assert top[0][1].avg_lead_value == 150

    def test_to_dict(self, stats):
        data = stats.to_dict()
        assert data["scored"] == 2
        assert data["boring_goldmine"] == 1
        assert data["high_ticket"] == 0
        assert data["top_categories"] == [{"category": "roofing", "count": 1, "avg_score": 70}]

    def test_empty_percent(self):
        assert ScoreStats().tag_percent("quick_win") == 0

    def test_top_lists_follow_tags(self, stats):
        """Prospects are ranked only in the lists their tags qualify them for."""
        assert len(stats.top_high_ticket) == 0
        [goldmine] = stats.top_goldmines.entries()
        assert goldmine.prospect.business_type == "Roofing Contractor"
        assert [e.scores.lead_gen_score for e in stats.top_lead_gen.entries()] == [70]

    def test_to_dict_top_lists(self, stats):
        data = stats.to_dict()
        assert data["top_high_ticket"] == []
        assert data["top_goldmines"][0]["opportunity_score"] == 72
        assert data["top_goldmines"][0]["website"] == "https://x.com"
        assert data["top_lead_gen"][0]["lead_gen_score"] == 70
