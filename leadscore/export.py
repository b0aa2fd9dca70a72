"""Export functionality for scored prospects (CSV, TSV, JSON, JSON lines)."""

import csv
import io
import json
import logging
from datetime import datetime
from pathlib import Path

from .models import ScoredProspect

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("csv", "tsv", "json", "jsonl")

CSV_COLUMNS = [
    "id",
    "external_id",
    "company_name",
    "business_type",
    "city",
    "website",
    "phone",
    "email",
    "google_rating",
    "review_count",
    "high_ticket_score",
    "opportunity_score",
    "lead_gen_score",
    "opportunity_tags",
    "commercial_focus",
    "price_indicators",
    "scale_signals",
    "industry_value",
    "website_gap",
    "marketing_gap",
    "competitor_weakness",
    "growth_potential",
    "search_volume",
    "competition_level",
    "monetization",
    "geographic_opportunity",
    "notes",
]


def _csv_row(scored: ScoredProspect) -> dict:
    p = scored.prospect
    s = scored.scores
    ht = s.scoring_factors.high_ticket
    opp = s.scoring_factors.opportunity
    lg = s.scoring_factors.lead_gen

    return {
        "id": p.id if p.id is not None else "",
        "external_id": p.external_id or "",
        "company_name": p.company_name or "",
        "business_type": p.business_type or p.categories or "",
        "city": p.city or "",
        "website": p.website or "",
        "phone": p.phone or "",
        "email": p.email or "",
        "google_rating": p.google_rating if p.google_rating is not None else "",
        "review_count": p.review_count if p.review_count is not None else "",
        "high_ticket_score": s.high_ticket_score,
        "opportunity_score": s.opportunity_score,
        "lead_gen_score": s.lead_gen_score,
        "opportunity_tags": ";".join(tag.value for tag in s.opportunity_tags),
        "commercial_focus": ht.commercial_focus,
        "price_indicators": ht.price_indicators,
        "scale_signals": ht.scale_signals,
        "industry_value": ht.industry_value,
        "website_gap": opp.website_gap,
        "marketing_gap": opp.marketing_gap,
        "competitor_weakness": opp.competitor_weakness,
        "growth_potential": opp.growth_potential,
        "search_volume": lg.search_volume,
        "competition_level": lg.competition_level,
        "monetization": lg.monetization,
        "geographic_opportunity": lg.geographic_opportunity,
        "notes": scored.notes or "",
    }


def format_prospects(
    prospects: list[ScoredProspect],
    output_format: str,
    no_headers: bool = False,
) -> str:
    """
    Format scored prospects as a string.

    Args:
        prospects: Scored prospects to format
        output_format: One of csv, tsv, json, jsonl
        no_headers: Omit the header row for CSV/TSV

    Returns:
        Formatted output
    """
    if output_format == "json":
        return json.dumps([p.to_dict() for p in prospects], indent=2, default=str)

    if output_format == "jsonl":
        return "\n".join(json.dumps(p.to_dict(), default=str) for p in prospects)

    if output_format in ("csv", "tsv"):
        delimiter = "\t" if output_format == "tsv" else ","
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS, delimiter=delimiter)
        if not no_headers:
            writer.writeheader()
        for p in prospects:
            writer.writerow(_csv_row(p))
        return output.getvalue()

    raise ValueError(f"Unknown format: {output_format}")


def export_prospects(
    prospects: list[ScoredProspect],
    output_path: str,
    output_format: str = "csv",
) -> str:
    """
    Export scored prospects to a file.

    JSON exports are wrapped with export metadata; other formats are
    written as produced by format_prospects.

    Args:
        prospects: Scored prospects to export
        output_path: Path to output file
        output_format: One of csv, tsv, json, jsonl

    Returns:
        Path to the created file
    """
    # Create output directory if needed
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if output_format == "json":
        data = {
            "exported_at": datetime.now().isoformat(),
            "total_prospects": len(prospects),
            "prospects": [p.to_dict() for p in prospects],
        }
        content = json.dumps(data, indent=2, default=str)
    else:
        content = format_prospects(prospects, output_format)

    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(content)

    logger.info("Exported %d prospects to %s", len(prospects), path)
    return str(path)
