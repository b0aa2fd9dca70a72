"""Generate plain-English notes for scored prospects."""

from ..constants import NOTES, TAG_LABELS, OpportunityTag
from ..models import EnhancedScores, Prospect


def generate_score_notes(prospect: Prospect, scores: EnhancedScores) -> str:
    """
    Generate plain-English notes describing a prospect's gaps and tags.

    Args:
        prospect: The scored prospect
        scores: Scores returned by calculate_enhanced_scores

    Returns:
        Human-readable string, sections separated by "; "
    """
    notes = []

    if not prospect.website:
        notes.append(NOTES["no_website"])
    elif prospect.needs_website:
        notes.append(NOTES["needs_website"])
    elif "http" not in prospect.website:
        notes.append(NOTES["broken_website"])
    elif not prospect.has_cms:
        notes.append(NOTES["no_cms"])

    marketing = []
    has_facebook = prospect.facebook or prospect.company_facebook
    has_instagram = prospect.instagram or prospect.company_instagram
    if not prospect.has_any_social:
        marketing.append(NOTES["no_socials"])
    elif not has_facebook or not has_instagram:
        marketing.append(NOTES["partial_socials"])
    if not prospect.has_analytics:
        marketing.append(NOTES["no_analytics"])
    if not prospect.has_live_chat and not prospect.has_booking_widget:
        marketing.append(NOTES["no_capture"])
    if not prospect.email and not prospect.additional_emails:
        marketing.append(NOTES["no_email"])
    if (
        prospect.google_rating and prospect.google_rating >= 4.0
        and prospect.review_count and prospect.review_count < 20
    ):
        marketing.append(f"{NOTES['few_reviews']} ({prospect.review_count} reviews)")

    if marketing:
        notes.append("Marketing: " + ", ".join(marketing))

    if scores.opportunity_tags:
        labels = [TAG_LABELS[tag] for tag in scores.opportunity_tags]
        notes.append("Tags: " + ", ".join(labels))

    if not notes:
        notes.append(NOTES["well_covered"])

    return "; ".join(notes)


def generate_outreach_angle(prospect: Prospect, scores: EnhancedScores) -> str:
    """
    Suggest an outreach angle based on the biggest opportunity.

    Args:
        prospect: The scored prospect
        scores: Scores returned by calculate_enhanced_scores

    Returns:
        Suggested talking point
    """
    if OpportunityTag.NEEDS_WEBSITE in scores.opportunity_tags:
        return "Offer to build their first website and establish online presence"

    if OpportunityTag.QUICK_WIN in scores.opportunity_tags:
        return "Great reviews but a weak online presence - pitch a fast website and review funnel"

    if OpportunityTag.BORING_GOLDMINE in scores.opportunity_tags:
        return "Established essential service with marketing gaps - pitch lead capture and tracking"

    if OpportunityTag.HIGH_TICKET in scores.opportunity_tags:
        return "Commercial/high-value work - lead with ROI on larger jobs"

    if prospect.needs_website:
        return "Website needs a rebuild - offer a website audit"

    if OpportunityTag.NEEDS_SOCIAL in scores.opportunity_tags:
        return "Set up social profiles to build trust and visibility"

    return "General marketing consultation - assess specific needs"

