# main.py
"""Campaign Reporter Main Orchestrator.

This module provides the command line entry point. It runs the pipeline:
    1. Fetch the reporting window from the API (or load a stored one)
    2. Save a freshly fetched window to the report store
    3. Build per-campaign and combined report data
    4. Render the report as text
"""

import argparse
import sys
from datetime import datetime
from typing import List, Optional

from .api_client import ConstantContactClient
from .config import ReportSettings, config
from .exceptions import ApiError, NoCampaignsError, StoreError
from .logging_utils import get_logger, setup_logging
from .models import Campaigns
from .renderer import ReportRenderer
from .report import build_campaigns_report
from .store import ReportStore


class ReportPipeline:
    """Main orchestrator for the campaign reporting pipeline.

    Attributes:
        settings: Ranking limits used to build the report.
        api_client: ConstantContactClient used to fetch fresh windows.
        store: ReportStore for saving and loading windows.
        renderer: ReportRenderer for the text output.
    """

    def __init__(
        self,
        settings: Optional[ReportSettings] = None,
        api_client: Optional[ConstantContactClient] = None,
        store: Optional[ReportStore] = None,
        renderer: Optional[ReportRenderer] = None,
        days_back: Optional[int] = None,
        debug: Optional[bool] = None,
    ):
        """Initialize the pipeline.

        Args:
            settings: Optional report settings. Defaults to values from config.
            api_client: Optional API client instance.
            store: Optional ReportStore instance.
            renderer: Optional ReportRenderer instance.
            days_back: Reporting window for a lazily created API client.
            debug: Response body logging for a lazily created API client.
        """
        self.logger = get_logger(__name__)

        self.settings = settings or ReportSettings.from_config(config)
        self._api_client = api_client
        self._store = store
        self._renderer = renderer
        self._days_back = days_back
        self._debug = debug

        # Track ownership for cleanup
        self._owns_api_client = api_client is None

        self.stats = {
            "start_time": None,
            "end_time": None,
            "source": None,
            "campaigns": 0,
            "skipped": 0,
            "saved_to": None,
        }

    @property
    def api_client(self) -> ConstantContactClient:
        """Get or create the API client."""
        if self._api_client is None:
            self._api_client = ConstantContactClient(
                days_back=self._days_back,
                debug=self._debug,
            )
        return self._api_client

    @property
    def store(self) -> ReportStore:
        """Get or create the report store."""
        if self._store is None:
            self._store = ReportStore()
        return self._store

    @property
    def renderer(self) -> ReportRenderer:
        """Get or create the report renderer."""
        if self._renderer is None:
            self._renderer = ReportRenderer()
        return self._renderer

    def run(self, from_file: Optional[str] = None) -> str:
        """Execute the pipeline and return the rendered report.

        Args:
            from_file: Optional stored window to report on instead of fetching.

        Returns:
            Rendered text report.

        Raises:
            NoCampaignsError: If the window has no campaigns.
        """
        self.stats["start_time"] = datetime.utcnow()

        if from_file:
            campaigns = self.store.load(from_file)
            self.stats["source"] = from_file
        else:
            campaigns = self.fetch_and_save()
            self.stats["source"] = "api"

        self.stats["campaigns"] = len(campaigns.campaigns)
        build_campaigns_report(campaigns, self.settings)
        self.stats["skipped"] = len(campaigns.report.skipped_campaigns)
        text = self.renderer.render(campaigns)

        self.stats["end_time"] = datetime.utcnow()
        self._log_summary()
        return text

    def fetch_and_save(self) -> Campaigns:
        """Fetch a fresh reporting window and save it before building."""
        campaigns = self.api_client.fetch_window()
        path = self.store.save(campaigns)
        self.stats["saved_to"] = str(path)
        return campaigns

    def _log_summary(self) -> None:
        duration = None
        if self.stats["start_time"] and self.stats["end_time"]:
            duration = (
                self.stats["end_time"] - self.stats["start_time"]
            ).total_seconds()

        self.logger.info(
            "Report pipeline completed",
            extra={
                "source": self.stats["source"],
                "campaigns": self.stats["campaigns"],
                "skipped": self.stats["skipped"],
                "saved_to": self.stats["saved_to"],
                "duration_seconds": duration,
            },
        )

    def close(self) -> None:
        """Close owned resources."""
        if self._owns_api_client and self._api_client is not None:
            self._api_client.close()

    def __enter__(self) -> "ReportPipeline":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="campaign-reporter",
        description="Summarize email campaign engagement by domain, link and recipient",
        epilog="""
Examples:
  %(prog)s --days-back 14
  %(prog)s --from-file logs/2024-03-01T09:30.json --domains 5 --links 3
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--from-file",
        "-f",
        default=None,
        help="Generate the report from a stored reporting window",
    )
    parser.add_argument(
        "--domains",
        "-d",
        type=int,
        default=None,
        help=f"Number of email domains to display (default: {config.REPORT_TOP_DOMAINS})",
    )
    parser.add_argument(
        "--links",
        "-l",
        type=int,
        default=None,
        help=f"Number of links to display (default: {config.REPORT_TOP_CLICKS})",
    )
    parser.add_argument(
        "--days-back",
        type=int,
        default=None,
        help=f"Days back to look for campaigns (default: {config.REPORT_DAYS_BACK})",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the report to a file instead of stdout",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Verbose output, including raw API responses",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> ReportSettings:
    """Build report settings from config, overridden by CLI arguments."""
    return ReportSettings(
        top_domains=args.domains if args.domains is not None else config.REPORT_TOP_DOMAINS,
        top_clicks=args.links if args.links is not None else config.REPORT_TOP_CLICKS,
        require_tracking=config.REPORT_REQUIRE_TRACKING,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the campaign reporter.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(
        level="DEBUG" if args.debug else config.LOG_LEVEL.upper(),
        service_name="campaign-reporter",
    )

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        logger.error(f"Invalid report settings: {e}")
        return 2

    try:
        with ReportPipeline(
            settings=settings,
            days_back=args.days_back,
            debug=args.debug or None,
        ) as pipeline:
            text = pipeline.run(from_file=args.from_file)

    except NoCampaignsError as e:
        logger.warning(f"{e}")
        return 0
    except (ApiError, StoreError, FileNotFoundError, ValueError) as e:
        logger.error(f"Campaign report failed: {e}")
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Report written", extra={"path": args.output})
    else:
        print(text)

    return 0


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
