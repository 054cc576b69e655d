# renderer.py
"""Report Renderer module for plain-text campaign reports.

This module provides the ReportRenderer class which formats a built
reporting window as text, and the percent helper used for the
sent -> opened -> clicked funnel.
"""

from typing import List, Optional

from .logging_utils import get_logger
from .models import Campaign, Campaigns, CampaignSummary, Click, Report


def percent(numerator: int, denominator: int) -> int:
    """Return numerator as a whole percentage of denominator, within 0..100.

    Returns 0 when the denominator is 0.
    """
    if denominator == 0:
        return 0
    value = int((numerator / denominator) * 100)
    return max(0, min(100, value))


class ReportRenderer:
    """Renderer for campaign reports.

    Attributes:
        title: Report heading.
        max_addresses: Maximum bounce/unsubscribe addresses listed per section.
    """

    DEFAULT_TITLE = "Email Campaign Report"
    DEFAULT_MAX_ADDRESSES = 50

    RULE = "=" * 72
    THIN_RULE = "-" * 72

    def __init__(
        self,
        title: Optional[str] = None,
        max_addresses: Optional[int] = None,
    ):
        """Initialize the Report Renderer.

        Args:
            title: Optional heading override. Defaults to DEFAULT_TITLE.
            max_addresses: Optional address list cap. Defaults to DEFAULT_MAX_ADDRESSES.
        """
        self.logger = get_logger(__name__)
        self.title = title or self.DEFAULT_TITLE
        self.max_addresses = (
            max_addresses if max_addresses is not None else self.DEFAULT_MAX_ADDRESSES
        )

    def render(self, campaigns: Campaigns) -> str:
        """Render the combined report followed by one section per campaign.

        Args:
            campaigns: Reporting window whose report has been built.

        Returns:
            Plain text report.
        """
        lines: List[str] = [self.RULE, self.title]
        if campaigns.start_date:
            lines.append(f"Since: {campaigns.start_date}")
        lines.append(f"Campaigns: {len(campaigns.campaigns)}")
        lines.append(self.RULE)

        if campaigns.report is not None:
            lines.extend(self.format_report(campaigns.report))

        for campaign in campaigns.campaigns:
            lines.append(self.THIN_RULE)
            lines.extend(self.format_campaign(campaign))

        self.logger.debug(
            "Report rendered",
            extra={"campaigns": len(campaigns.campaigns), "lines": len(lines)},
        )
        return "\n".join(lines)

    def format_report(self, report: Report) -> List[str]:
        """Format the combined report sections."""
        lines = ["", "All campaigns"]
        lines.extend(self.format_funnel(report.combined))
        lines.extend(self.format_domains(report.summaries))
        lines.extend(self.format_clicks(report.clicks))
        lines.extend(self.format_addresses("Unsubscribes", report.unsubscribes))
        lines.extend(self.format_addresses("Bounces", report.bounces))
        lines.extend(
            self.format_addresses("Skipped campaigns", report.skipped_campaigns)
        )
        return lines

    def format_campaign(self, campaign: Campaign) -> List[str]:
        """Format the sections of a single campaign."""
        lines = [f"{campaign.name or campaign.id}"]
        if campaign.subject:
            lines.append(f"Subject: {campaign.subject}")
        if campaign.run_date:
            lines.append(f"Sent: {campaign.run_date}")
        if campaign.permalink_url:
            lines.append(f"View: {campaign.permalink_url}")
        lines.extend(self.format_funnel(campaign.tracking_summary))
        lines.extend(self.format_domains(campaign.ordered_summaries))
        lines.extend(self.format_clicks(campaign.clickthroughs))
        lines.extend(self.format_addresses("Unsubscribes", campaign.unsubscribes))
        lines.extend(self.format_addresses("Bounces", campaign.bounces))
        return lines

    def format_funnel(self, summary: CampaignSummary) -> List[str]:
        """Format the sent -> opened -> clicked funnel of a summary."""
        return [
            f"  Sent: {summary.sends}",
            f"  Opened: {summary.opens} ({percent(summary.opens, summary.sends)}%)",
            f"  Clicked: {summary.clicks} ({percent(summary.clicks, summary.opens)}% of opens)",
            f"  Bounced: {summary.bounces}  Unsubscribed: {summary.unsubscribes}",
        ]

    def format_domains(self, summaries: List[CampaignSummary]) -> List[str]:
        """Format ranked domain summaries, overflow bucket last."""
        if not summaries:
            return []

        lines = ["", "  Top domains"]
        for summary in summaries:
            if summary.is_overflow() and summary.sends == 0 and summary.opens == 0:
                continue
            lines.append(
                f"    {summary.domain:<32} sent {summary.sends:>6}  "
                f"opened {percent(summary.opens, summary.sends):>3}%  "
                f"clicked {percent(summary.clicks, summary.opens):>3}%"
            )
        return lines

    def format_clicks(self, clicks: List[Click]) -> List[str]:
        """Format ranked link clickthroughs."""
        if not clicks:
            return []

        lines = ["", "  Top links"]
        for click in clicks:
            lines.append(f"    {click.clicks:>6}  {click.url or click.id}")
        return lines

    def format_addresses(self, heading: str, addresses: List[str]) -> List[str]:
        """Format an address list, truncated to max_addresses."""
        if not addresses:
            return []

        lines = ["", f"  {heading} ({len(addresses)})"]
        for address in addresses[:self.max_addresses]:
            lines.append(f"    {address}")

        if len(addresses) > self.max_addresses:
            remaining = len(addresses) - self.max_addresses
            lines.append(f"    ...and {remaining} more")
        return lines
