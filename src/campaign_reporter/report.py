# report.py
"""Report entry point for a whole reporting window."""

from typing import List, Optional

from .campaign_report import CampaignReportBuilder
from .combiner import CampaignCombiner
from .config import ReportSettings
from .exceptions import NoCampaignsError, NoTrackingDataError
from .logging_utils import get_logger
from .models import Campaign, Campaigns

logger = get_logger(__name__)


def build_campaigns_report(
    campaigns: Campaigns,
    settings: Optional[ReportSettings] = None,
) -> Campaigns:
    """Build report data for every campaign, then the combined report.

    Only campaigns that were built take part in the combined report. A
    campaign rejected for missing tracking data is logged, stays in the raw
    stage and is listed in ``report.skipped_campaigns``.

    Args:
        campaigns: Reporting window with raw tracking attached.
        settings: Optional report settings. Defaults to ReportSettings().

    Returns:
        The same Campaigns value with derived fields and ``report`` populated.

    Raises:
        NoCampaignsError: If the window has no campaigns, or none could be built.
    """
    if campaigns.is_empty():
        raise NoCampaignsError()

    settings = settings or ReportSettings()
    builder = CampaignReportBuilder(settings)

    built: List[Campaign] = []
    skipped: List[str] = []
    for campaign in campaigns.campaigns:
        try:
            built.append(builder.build(campaign))
        except NoTrackingDataError as e:
            logger.warning(
                f"Skipping campaign report: {e}",
                extra={"campaign_id": e.campaign_id},
            )
            skipped.append(e.campaign_id)

    if not built:
        raise NoCampaignsError(
            f"None of the {len(skipped)} campaigns had tracking data to report on"
        )

    report = CampaignCombiner(settings).combine(built)
    campaigns.report = report.model_copy(update={"skipped_campaigns": skipped})
    return campaigns
