"""Pydantic models for campaign reporter data structures."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Reserved domain of the synthetic entry folding everything past the top N.
OVERFLOW_DOMAIN = "other..."


class ActivityType(str, Enum):
    """Enumeration of tracking activity types, as named by the tracking API."""

    SEND = "EMAIL_SEND"
    OPEN = "EMAIL_OPEN"
    CLICK = "EMAIL_CLICK"
    BOUNCE = "EMAIL_BOUNCE"
    UNSUBSCRIBE = "EMAIL_UNSUBSCRIBE"


class ReportStage(str, Enum):
    """Enumeration of per-campaign report building stages."""

    RAW = "raw"
    DEDUPLICATED = "deduplicated"
    PIVOTED = "pivoted"
    RANKED = "ranked"


class TrackingAction(BaseModel):
    """Model representing a single send, open, click, bounce or unsubscribe.

    Actions are not necessarily unique per recipient per campaign: the API
    may return the same action on overlapping pages.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Common
    activity_type: str = Field(..., description="Activity type, e.g. EMAIL_OPEN")
    contact_id: str = Field(default="", description="Opaque recipient identifier")
    email: str = Field(
        default="", alias="email_address", description="Recipient email address"
    )

    # Clicks
    link_id: str = Field(default="", description="Identifier of the clicked link")
    click_date: str = Field(default="")

    # Opens
    open_date: str = Field(default="")

    # Sends
    send_date: str = Field(default="")

    # Unsubscribes
    unsubscribe_date: str = Field(default="")
    unsubscribe_source: str = Field(default="")
    unsubscribe_reason: str = Field(default="")

    # Bounces
    bounce_code: str = Field(default="")
    bounce_description: str = Field(default="")
    bounce_message: str = Field(default="")
    bounce_date: str = Field(default="")

    @property
    def dedup_key(self) -> tuple:
        """Key identifying duplicate actions: one per activity per recipient."""
        return (self.activity_type, self.contact_id)


class CampaignSummary(BaseModel):
    """Model representing aggregate recipient actions against a campaign.

    The ``domain`` field is not part of the API payload; it lets a summary be
    pivoted on recipient email domains.
    """

    domain: str = Field(default="", description="Grouping key")
    sends: int = Field(default=0)
    opens: int = Field(default=0)
    clicks: int = Field(default=0)
    forwards: int = Field(default=0)
    unsubscribes: int = Field(default=0)
    bounces: int = Field(default=0)
    spam_count: int = Field(default=0)

    def add(self, other: "CampaignSummary") -> "CampaignSummary":
        """Return a new summary holding the field-wise sum of both summaries.

        Neither operand is modified. The result keeps this summary's domain.
        """
        return CampaignSummary(
            domain=self.domain,
            sends=self.sends + other.sends,
            opens=self.opens + other.opens,
            clicks=self.clicks + other.clicks,
            forwards=self.forwards + other.forwards,
            unsubscribes=self.unsubscribes + other.unsubscribes,
            bounces=self.bounces + other.bounces,
            spam_count=self.spam_count + other.spam_count,
        )

    def is_overflow(self) -> bool:
        """Check if this summary is the overflow bucket of a ranking."""
        return self.domain == OVERFLOW_DOMAIN


class Click(BaseModel):
    """Model representing a trackable link and its click count."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="url_uid", description="Unique link identifier")
    url: str = Field(default="")
    clicks: int = Field(default=0, alias="click_count")


class Campaign(BaseModel):
    """Model representing a single email campaign and its derived report data."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Campaign identifier")
    name: str = Field(default="")
    subject: str = Field(default="")
    status: str = Field(default="")
    modified_date: str = Field(default="")
    run_date: str = Field(default="", alias="last_run_date")
    permalink_url: str = Field(default="")

    # Supplied by the API
    tracking_summary: CampaignSummary = Field(default_factory=CampaignSummary)
    clickthroughs: List[Click] = Field(
        default_factory=list, alias="click_through_details"
    )
    tracking: List[TrackingAction] = Field(default_factory=list)

    # Generated aggregates
    pivoted_summary: Dict[str, CampaignSummary] = Field(default_factory=dict)
    bounces: List[str] = Field(default_factory=list)
    unsubscribes: List[str] = Field(default_factory=list)
    ordered_summaries: List[CampaignSummary] = Field(default_factory=list)
    skipped_events: int = Field(
        default=0, description="Events left out of pivoting for malformed addresses"
    )
    stage: ReportStage = Field(default=ReportStage.RAW)

    def run_date_as_time(self) -> Optional[datetime]:
        """Parse the last run date, or None if the campaign never ran."""
        if not self.run_date:
            return None
        return datetime.fromisoformat(self.run_date.replace("Z", "+00:00"))


class Report(BaseModel):
    """Model representing the combined report for a reporting window."""

    combined: CampaignSummary = Field(default_factory=CampaignSummary)
    summaries: List[CampaignSummary] = Field(default_factory=list)
    clicks: List[Click] = Field(default_factory=list)
    unsubscribes: List[str] = Field(default_factory=list)
    bounces: List[str] = Field(default_factory=list)
    skipped_campaigns: List[str] = Field(
        default_factory=list,
        description="IDs of campaigns left out because they could not be built",
    )

    def to_dict(self) -> dict:
        """Return the report as the keyed mapping consumed by renderers."""
        return {
            "combined": self.combined,
            "summaries": self.summaries,
            "clicks": self.clicks,
            "unsubscribes": self.unsubscribes,
            "bounces": self.bounces,
            "skipped_campaigns": self.skipped_campaigns,
        }


class Campaigns(BaseModel):
    """Model representing every campaign of a reporting window."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: str = Field(default="")
    days_back: int = Field(default=0)
    campaigns: List[Campaign] = Field(default_factory=list, alias="results")
    report: Optional[Report] = Field(default=None)

    def is_empty(self) -> bool:
        """Check if the window has no campaigns."""
        return len(self.campaigns) == 0
