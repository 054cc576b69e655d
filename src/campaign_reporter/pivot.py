# pivot.py
"""Pivoting of tracking actions on recipient email domains."""

from typing import Dict, List

from pydantic import BaseModel, Field

from .exceptions import MalformedAddressError
from .logging_utils import get_logger
from .models import ActivityType, CampaignSummary, TrackingAction

logger = get_logger(__name__)

# Summary counter incremented for each activity type
_COUNTERS = {
    ActivityType.SEND.value: "sends",
    ActivityType.OPEN.value: "opens",
    ActivityType.CLICK.value: "clicks",
    ActivityType.BOUNCE.value: "bounces",
    ActivityType.UNSUBSCRIBE.value: "unsubscribes",
}


class PivotResult(BaseModel):
    """Model representing tracking actions pivoted on email domains."""

    summaries: Dict[str, CampaignSummary] = Field(default_factory=dict)
    bounces: List[str] = Field(default_factory=list)
    unsubscribes: List[str] = Field(default_factory=list)
    skipped: List[TrackingAction] = Field(
        default_factory=list, description="Actions with malformed addresses"
    )


def get_email_domain(email: str) -> str:
    """Return the domain part of an email address.

    Raises:
        MalformedAddressError: If the address contains no '@'.
    """
    parts = email.split("@")
    if len(parts) < 2:
        raise MalformedAddressError(email)
    return parts[1]


def pivot_by_domain(actions: List[TrackingAction]) -> PivotResult:
    """Accumulate per-domain counters and bounce/unsubscribe address lists.

    Domains are compared byte for byte. Unknown activity types leave the
    counters untouched. An action whose address has no domain is logged and
    left out of the domain counters, but still listed as a bounce or
    unsubscribe.

    Args:
        actions: Deduplicated tracking actions of one campaign.

    Returns:
        PivotResult with summaries keyed by domain.
    """
    counts: Dict[str, Dict[str, int]] = {}
    result = PivotResult()

    for action in actions:
        if action.activity_type == ActivityType.BOUNCE.value:
            result.bounces.append(action.email)
        elif action.activity_type == ActivityType.UNSUBSCRIBE.value:
            result.unsubscribes.append(action.email)

        try:
            domain = get_email_domain(action.email)
        except MalformedAddressError as e:
            logger.warning(
                f"Skipping tracking action: {e}",
                extra={
                    "contact_id": action.contact_id,
                    "activity_type": action.activity_type,
                },
            )
            result.skipped.append(action)
            continue

        domain_counts = counts.setdefault(domain, {})
        counter = _COUNTERS.get(action.activity_type)
        if counter is not None:
            domain_counts[counter] = domain_counts.get(counter, 0) + 1

    result.summaries = {
        domain: CampaignSummary(domain=domain, **domain_counts)
        for domain, domain_counts in counts.items()
    }
    return result
