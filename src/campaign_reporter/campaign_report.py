# campaign_report.py
"""Campaign Report Builder module.

This module provides the CampaignReportBuilder class which derives the
per-campaign report data from a campaign's raw tracking actions:

    raw -> deduplicated -> pivoted -> ranked

Every build starts again from the raw tracking list, so building the same
campaign twice produces identical derived fields.
"""

from typing import Optional

from .config import ReportSettings
from .dedup import deduplicate_tracking
from .exceptions import NoTrackingDataError
from .logging_utils import ContextAdapter, LogContext, get_logger
from .models import Campaign, ReportStage
from .pivot import pivot_by_domain
from .ranking import rank_clicks, rank_domains


class CampaignReportBuilder:
    """Builder for single-campaign report data.

    Attributes:
        settings: Ranking limits and tracking requirements.
    """

    def __init__(self, settings: Optional[ReportSettings] = None):
        """Initialize the Campaign Report Builder.

        Args:
            settings: Optional report settings. Defaults to ReportSettings().
        """
        self.logger = ContextAdapter(get_logger(__name__), {})
        self.settings = settings or ReportSettings()

    def build(self, campaign: Campaign) -> Campaign:
        """Populate the derived report fields of a campaign.

        Generates the domain summaries, the ranked top domains with their
        overflow bucket, the bounce and unsubscribe lists, and the ranked
        clickthroughs. The campaign is updated in place and returned.

        Args:
            campaign: Campaign with raw tracking and clickthroughs attached.

        Returns:
            The same campaign, in the ranked stage.

        Raises:
            NoTrackingDataError: If tracking is required and the campaign has none.
        """
        with LogContext(campaign_id=campaign.id):
            if not campaign.tracking and self.settings.require_tracking:
                self.logger.warning("Campaign has no tracking data")
                raise NoTrackingDataError(campaign.id)

            campaign.stage = ReportStage.RAW

            tracking = deduplicate_tracking(campaign.tracking)
            campaign.stage = ReportStage.DEDUPLICATED
            self.logger.debug(
                "Deduplicated tracking",
                extra={
                    "raw_count": len(campaign.tracking),
                    "unique_count": len(tracking),
                },
            )

            pivot = pivot_by_domain(tracking)
            campaign.pivoted_summary = pivot.summaries
            campaign.bounces = pivot.bounces
            campaign.unsubscribes = pivot.unsubscribes
            campaign.skipped_events = len(pivot.skipped)
            campaign.stage = ReportStage.PIVOTED

            campaign.ordered_summaries = rank_domains(
                campaign.pivoted_summary, self.settings.top_domains
            )
            campaign.clickthroughs = rank_clicks(
                campaign.clickthroughs, self.settings.top_clicks
            )
            campaign.stage = ReportStage.RANKED

            self.logger.info(
                "Campaign report built",
                extra={
                    "domains": len(campaign.pivoted_summary),
                    "bounces": len(campaign.bounces),
                    "unsubscribes": len(campaign.unsubscribes),
                    "clickthroughs": len(campaign.clickthroughs),
                    "skipped_events": campaign.skipped_events,
                },
            )

        return campaign
