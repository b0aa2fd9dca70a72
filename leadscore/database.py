"""Database models for prospect persistence."""

from dataclasses import fields
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String, Text, create_engine, func
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_database_url
from .models import EnhancedScores, Prospect

Base = declarative_base()

# Prospect fields stored as plain columns
PROSPECT_COLUMNS = tuple(f.name for f in fields(Prospect) if f.name not in ("id", "additional_emails"))


class ProspectRecord(Base):
    """Stored prospect with its latest scores."""
    __tablename__ = "prospects"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(255), index=True, nullable=True)

    # Identity
    company_name = Column(String(255), index=True)
    business_type = Column(String(255))
    categories = Column(String(500))
    city = Column(String(255))

    # Reputation
    google_rating = Column(Float, nullable=True)
    review_count = Column(Integer, nullable=True)
    yelp_rating = Column(Float, nullable=True)
    angi_rating = Column(Float, nullable=True)
    facebook_rating = Column(Float, nullable=True)

    # Digital presence
    website = Column(String(500), nullable=True)
    has_cms = Column(Boolean, nullable=True)
    has_analytics = Column(Boolean, nullable=True)
    has_live_chat = Column(Boolean, nullable=True)
    has_booking_widget = Column(Boolean, nullable=True)
    needs_website = Column(Boolean, nullable=True)

    # Contact and social
    email = Column(String(255), nullable=True)
    additional_emails = Column(JSON, default=list)
    phone = Column(String(50), nullable=True)
    facebook = Column(String(500), nullable=True)
    instagram = Column(String(500), nullable=True)
    linkedin = Column(String(500), nullable=True)
    company_facebook = Column(String(500), nullable=True)
    company_instagram = Column(String(500), nullable=True)
    company_linkedin = Column(String(500), nullable=True)

    # Scale and free text
    employee_count = Column(Integer, nullable=True)
    recent_reviews = Column(Text, nullable=True)
    qualification_signals = Column(Text, nullable=True)

    # Scores
    high_ticket_score = Column(Integer, nullable=True)
    opportunity_score = Column(Integer, nullable=True)
    lead_gen_score = Column(Integer, nullable=True)
    scoring_factors = Column(JSON, nullable=True)
    opportunity_tags = Column(JSON, default=list)
    last_scored_at = Column(DateTime, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_prospect(self) -> Prospect:
        """Snapshot as an immutable Prospect for scoring."""
        values = {name: getattr(self, name) for name in PROSPECT_COLUMNS}
        return Prospect(
            id=self.id,
            additional_emails=tuple(self.additional_emails or ()),
            **values,
        )

    def update_from(self, prospect: Prospect, keep_missing: bool = False) -> None:
        """
        Copy an incoming record onto the stored fields.

        With keep_missing, fields the incoming record does not carry (None or
        no additional emails) keep their stored values.
        """
        for name in PROSPECT_COLUMNS:
            value = getattr(prospect, name)
            if value is None and keep_missing:
                continue
            setattr(self, name, value)
        if prospect.additional_emails or not keep_missing:
            self.additional_emails = list(prospect.additional_emails)

    def apply_scores(self, scores: EnhancedScores) -> None:
        """Store the output of calculate_enhanced_scores."""
        self.high_ticket_score = scores.high_ticket_score
        self.opportunity_score = scores.opportunity_score
        self.lead_gen_score = scores.lead_gen_score
        self.scoring_factors = scores.scoring_factors.to_dict()
        self.opportunity_tags = [tag.value for tag in scores.opportunity_tags]
        self.last_scored_at = datetime.utcnow()

    def __repr__(self):
        return f"<ProspectRecord {self.id}: {self.company_name} ({self.city})>"


class SystemJob(Base):
    """Record of a maintenance job run (e.g. bulk rescoring)."""
    __tablename__ = "system_jobs"

    id = Column(Integer, primary_key=True, index=True)
    job_type = Column(String(50), nullable=False)
    status = Column(String(20), default="completed")  # completed, completed_with_errors, failed
    result = Column(JSON, nullable=True)
    started_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)


def create_session_factory(database_url: Optional[str] = None) -> sessionmaker:
    """
    Create a session factory and make sure the tables exist.

    Args:
        database_url: SQLAlchemy URL (defaults to the configured URL)

    Returns:
        sessionmaker bound to a new engine
    """
    url = database_url or get_database_url()

    # Handle SQLite-specific settings
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(url, connect_args=connect_args)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def find_existing(db: Session, prospect: Prospect) -> Optional[ProspectRecord]:
    """
    Match by external ID, falling back to company name + city.

    An incoming record without a city matches on company name alone.
    """
    query = db.query(ProspectRecord)
    if prospect.external_id:
        return query.filter(ProspectRecord.external_id == prospect.external_id).first()

    query = query.filter(func.lower(ProspectRecord.company_name) == (prospect.company_name or "").lower())
    if prospect.city:
        query = query.filter(func.lower(ProspectRecord.city) == prospect.city.lower())
    return query.first()


def upsert_prospect(db: Session, prospect: Prospect) -> tuple[ProspectRecord, bool]:
    """
    Insert a prospect or update the matching stored record.

    Updates keep stored values for fields the incoming record lacks.
    Flushes but does not commit.

    Returns:
        (record, created)
    """
    record = find_existing(db, prospect)
    created = record is None
    if created:
        record = ProspectRecord()
        db.add(record)
    record.update_from(prospect, keep_missing=not created)
    db.flush()
    return record, created
