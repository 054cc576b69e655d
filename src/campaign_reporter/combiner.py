# combiner.py
"""Cross-campaign combination of per-campaign report data."""

from typing import Dict, List, Optional, Set

from .config import ReportSettings
from .exceptions import NoCampaignsError
from .logging_utils import get_logger
from .models import Campaign, CampaignSummary, Click, Report
from .ranking import rank_domains, rank_top_n


class CampaignCombiner:
    """Combiner merging ranked campaigns into one report for the window.

    Campaigns are expected to have been through CampaignReportBuilder; the
    combiner only reads them and never modifies their data.
    """

    def __init__(self, settings: Optional[ReportSettings] = None):
        self.logger = get_logger(__name__)
        self.settings = settings or ReportSettings()

    def combine(self, campaigns: List[Campaign]) -> Report:
        """Build the combined report for a list of campaigns.

        Raises:
            NoCampaignsError: If the list is empty.
        """
        if not campaigns:
            raise NoCampaignsError()

        report = Report(
            combined=self.combine_stats(campaigns),
            summaries=self.combine_summaries(campaigns),
            clicks=self.combine_clicks(campaigns),
            unsubscribes=self.combine_unsubscribes(campaigns),
            bounces=self.combine_bounces(campaigns),
        )

        self.logger.info(
            "Combined report built",
            extra={
                "campaigns": len(campaigns),
                "sends": report.combined.sends,
                "domains": len(report.summaries) - 1,
                "clicked_links": len(report.clicks),
                "unsubscribes": len(report.unsubscribes),
                "bounces": len(report.bounces),
            },
        )
        return report

    def combine_stats(self, campaigns: List[Campaign]) -> CampaignSummary:
        """Sum the API-supplied tracking summaries of every campaign."""
        combined = CampaignSummary()
        for campaign in campaigns:
            combined = combined.add(campaign.tracking_summary)
        return combined

    def combine_summaries(self, campaigns: List[Campaign]) -> List[CampaignSummary]:
        """Merge per-domain summaries across campaigns and rank the result."""
        merged: Dict[str, CampaignSummary] = {}
        for campaign in campaigns:
            for domain, summary in campaign.pivoted_summary.items():
                if domain in merged:
                    merged[domain] = merged[domain].add(summary)
                else:
                    merged[domain] = CampaignSummary(domain=domain).add(summary)

        return rank_domains(merged, self.settings.top_domains)

    def combine_clicks(self, campaigns: List[Campaign]) -> List[Click]:
        """Merge clickthroughs by link ID, summing their click counts.

        Links with no clicks in total are dropped. Unlike the per-campaign
        ranking the merged list is not truncated.
        """
        links: Dict[str, Click] = {}
        for campaign in campaigns:
            for click in campaign.clickthroughs:
                if click.id in links:
                    existing = links[click.id]
                    links[click.id] = existing.model_copy(
                        update={"clicks": existing.clicks + click.clicks}
                    )
                else:
                    links[click.id] = click.model_copy()

        clicked = [c for c in links.values() if c.clicks > 0]
        return rank_top_n(
            clicked,
            len(clicked),
            metric=lambda c: c.clicks,
            tie_key=lambda c: c.id,
        )

    def combine_unsubscribes(self, campaigns: List[Campaign]) -> List[str]:
        """Concatenate unsubscribes in campaign order.

        A recipient unsubscribing from two campaigns is listed twice.
        """
        unsubscribes: List[str] = []
        for campaign in campaigns:
            unsubscribes.extend(campaign.unsubscribes)
        return unsubscribes

    def combine_bounces(self, campaigns: List[Campaign]) -> List[str]:
        """Concatenate bounces, listing each address once in first-seen order."""
        bounces: List[str] = []
        seen: Set[str] = set()
        for campaign in campaigns:
            for email in campaign.bounces:
                if email not in seen:
                    seen.add(email)
                    bounces.append(email)
        return bounces
