# exceptions.py
"""Exceptions raised by the campaign reporter."""

from typing import Optional


class ReportError(Exception):
    """Base exception for report building errors."""

    pass


class NoCampaignsError(ReportError):
    """Raised when a reporting window contains no campaigns."""

    def __init__(self, message: str = "No campaigns to report on"):
        super().__init__(message)


class NoTrackingDataError(ReportError):
    """Raised when a campaign has no tracking events but some were required."""

    def __init__(self, campaign_id: str, message: Optional[str] = None):
        super().__init__(message or f"Campaign {campaign_id} has no tracking data")
        self.campaign_id = campaign_id


class MalformedAddressError(ReportError):
    """Raised when an email address has no '@' to split a domain from."""

    def __init__(self, email: str):
        super().__init__(f"Malformed email address: {email!r}")
        self.email = email


class ApiError(Exception):
    """Raised when the tracking API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StoreError(Exception):
    """Raised when a stored report cannot be decoded."""

    pass
