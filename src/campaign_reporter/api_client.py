# api_client.py
"""Constant Contact API client for campaign metadata and tracking events.

This module fetches the raw inputs of a reporting window:
- campaigns modified within the last N days
- per-campaign details (tracking summary, clickthroughs)
- paginated tracking actions for sends, opens, clicks, bounces and unsubscribes

Requests are made once; failures surface as ApiError.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional

import requests
from requests.exceptions import HTTPError, RequestException

from .config import config
from .exceptions import ApiError
from .logging_utils import get_logger
from .models import Campaign, Campaigns, TrackingAction


class ConstantContactClient:
    """Client for the Constant Contact v2 email marketing API.

    Attributes:
        api_key: API key sent as the ``api_key`` query parameter.
        auth_token: Bearer token sent in the Authorization header.
        base_url: API host URL.
        days_back: Size of the reporting window in days.
        debug: Log raw response bodies at DEBUG level.
        session: Requests session for connection pooling.
    """

    CAMPAIGNS_PATH = "/v2/emailmarketing/campaigns"
    TRACKING_TYPES = ("sends", "opens", "clicks", "bounces", "unsubscribes")

    request_timeout: int = 60

    def __init__(
        self,
        api_key: Optional[str] = None,
        auth_token: Optional[str] = None,
        base_url: Optional[str] = None,
        days_back: Optional[int] = None,
        debug: Optional[bool] = None,
    ):
        """Initialize the API client.

        Args:
            api_key: API key. Defaults to config.CC_API_KEY.
            auth_token: Bearer token. Defaults to config.CC_AUTH_TOKEN.
            base_url: API host. Defaults to config.CC_BASE_URL.
            days_back: Reporting window in days. Defaults to config.REPORT_DAYS_BACK.
            debug: Log response bodies. Defaults to config.CC_DEBUG.

        Raises:
            ValueError: If no API key or auth token is available.
        """
        self.logger = get_logger(__name__)

        self.api_key = api_key or config.CC_API_KEY
        self.auth_token = auth_token or config.CC_AUTH_TOKEN
        self.base_url = base_url or config.CC_BASE_URL
        self.days_back = days_back if days_back is not None else config.REPORT_DAYS_BACK
        self.debug = debug if debug is not None else config.CC_DEBUG

        if not self.api_key:
            raise ValueError("Constant Contact API key is required (CC_API_KEY)")
        if not self.auth_token:
            raise ValueError("Constant Contact auth token is required (CC_AUTH_TOKEN)")

        self.session = requests.Session()
        self._configure_session()

    def _configure_session(self) -> None:
        """Configure the requests session with auth and default headers."""
        self.session.headers.update({
            "Authorization": f"Bearer {self.auth_token}",
            "Accept": "application/json",
            "User-Agent": "campaign-reporter/0.1",
        })

    def close(self) -> None:
        """Close the requests session and release resources."""
        if self.session:
            self.session.close()

    def __enter__(self) -> "ConstantContactClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def build_url(self, path: str) -> str:
        """Build a full URL from the base URL and an API path or next link."""
        base = self.base_url.rstrip("/")
        path = path.lstrip("/")
        return f"{base}/{path}" if path else base

    def modified_since(self, now: Optional[datetime] = None) -> str:
        """Return the RFC 3339 start of the reporting window."""
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(days=self.days_back)
        return start.strftime("%Y-%m-%dT%H:%M:%SZ")

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a URL with the API key attached and decode the JSON body.

        Raises:
            ApiError: On connection errors, error statuses or invalid JSON.
        """
        query = {"api_key": self.api_key}
        query.update(params or {})
        self.logger.debug("Requesting API resource", extra={"url": url})

        try:
            response = self.session.get(url, params=query, timeout=self.request_timeout)
            response.raise_for_status()
        except HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            self.logger.error(
                "API request failed",
                extra={"url": url, "status_code": status, "error": str(e)},
            )
            raise ApiError(f"API request to {url} failed: {e}", status_code=status) from e
        except RequestException as e:
            self.logger.error("API request failed", extra={"url": url, "error": str(e)})
            raise ApiError(f"API request to {url} failed: {e}") from e

        if self.debug:
            self.logger.debug("API response", extra={"url": url, "body": response.text})

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON returned by {url}") from e

    @staticmethod
    def _next_link(page: Dict[str, Any]) -> str:
        meta = page.get("meta") or {}
        pagination = meta.get("pagination") or {}
        return pagination.get("next_link") or ""

    def _iter_results(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Iterator[Dict[str, Any]]:
        """Yield the results of every page of a paginated resource.

        Pages are followed through their next link until there is none, or
        until the API hands back the link it was just asked for. ``params``
        are sent with the first request only; next links carry their own
        query.
        """
        next_link = path
        previous_url = None

        while next_link:
            url = self.build_url(next_link)
            if url == previous_url:
                break

            page = self._get_json(url, params if previous_url is None else None)
            yield from page.get("results") or []

            previous_url = url
            next_link = self._next_link(page)

    def get_campaigns(self) -> Campaigns:
        """Retrieve every campaign modified within the reporting window."""
        since = self.modified_since()
        results = self._iter_results(
            self.CAMPAIGNS_PATH,
            params={"status": "ALL", "modified_since": since},
        )

        campaigns = Campaigns(
            start_date=since,
            days_back=self.days_back,
            campaigns=[Campaign.model_validate(c) for c in results],
        )

        self.logger.info(
            "Retrieved campaigns",
            extra={"count": len(campaigns.campaigns), "modified_since": since},
        )
        return campaigns

    def get_campaign_detail(self, campaign: Campaign) -> Campaign:
        """Fill in a campaign's detail fields, tracking summary and clickthroughs."""
        data = self._get_json(self.build_url(f"{self.CAMPAIGNS_PATH}/{campaign.id}"))

        merged = campaign.model_dump(by_alias=True)
        merged.update(data)
        detail = Campaign.model_validate(merged)
        for name in Campaign.model_fields:
            setattr(campaign, name, getattr(detail, name))

        self.logger.debug("Retrieved campaign detail", extra={"campaign_id": campaign.id})
        return campaign

    def get_campaign_tracking(self, campaign: Campaign) -> Campaign:
        """Replace a campaign's tracking with every page of every tracking type."""
        tracking: List[TrackingAction] = []

        for tracking_type in self.TRACKING_TYPES:
            path = f"{self.CAMPAIGNS_PATH}/{campaign.id}/tracking/{tracking_type}"
            tracking.extend(
                TrackingAction.model_validate(r) for r in self._iter_results(path)
            )

        campaign.tracking = tracking

        self.logger.info(
            "Retrieved campaign tracking",
            extra={"campaign_id": campaign.id, "actions": len(tracking)},
        )
        return campaign

    def fetch_window(self) -> Campaigns:
        """Retrieve the reporting window with details and tracking attached."""
        campaigns = self.get_campaigns()
        for campaign in campaigns.campaigns:
            self.get_campaign_detail(campaign)
            self.get_campaign_tracking(campaign)
        return campaigns
