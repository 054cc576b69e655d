# config.py
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


class ReporterConfig:
    """Campaign reporter configuration class that loads settings from environment variables."""

    def __init__(self):
        """Initialize the reporter configuration with environment variables."""
        self.logger = logging.getLogger(__name__)

        # Application environment
        self.APP_ENV = self._get_required("APP_ENV", "dev")
        self.LOG_LEVEL = self._get_optional("LOG_LEVEL", "INFO")

        # Constant Contact API settings
        self.CC_API_KEY = self._get_optional("CC_API_KEY")
        self.CC_AUTH_TOKEN = self._get_optional("CC_AUTH_TOKEN")
        self.CC_BASE_URL = self._get_optional(
            "CC_BASE_URL", "https://api.constantcontact.com"
        )
        self.CC_DEBUG = self._get_bool("CC_DEBUG")

        # Report settings
        self.REPORT_DAYS_BACK = int(self._get_optional("REPORT_DAYS_BACK", "7"))
        self.REPORT_TOP_DOMAINS = int(self._get_optional("REPORT_TOP_DOMAINS", "10"))
        self.REPORT_TOP_CLICKS = int(self._get_optional("REPORT_TOP_CLICKS", "5"))
        self.REPORT_REQUIRE_TRACKING = self._get_bool("REPORT_REQUIRE_TRACKING")

        # Local storage for fetched reporting windows
        self.REPORT_STORE_DIR = self._get_optional("REPORT_STORE_DIR", "./logs")

    def _get_required(self, name: str, default: Optional[str] = None) -> str:
        """Get a required configuration value from environment variables.

        Args:
            name: The name of the environment variable
            default: Optional default value if not found

        Returns:
            The value of the environment variable or default if provided

        Raises:
            ValueError: If the environment variable is not found and no default is provided
        """
        if name in os.environ:
            return os.environ[name]
        if default is not None:
            logging.warning(
                "Environment variable %s not found, using default value", name
            )
            return default
        raise ValueError(
            f"Environment variable {name} not found and no default provided"
        )

    def _get_optional(self, name: str, default: str = "") -> str:
        """Get an optional configuration value from environment variables.

        Args:
            name: The name of the environment variable
            default: Default value if not found (default: "")

        Returns:
            The value of the environment variable or the default value
        """
        if name in os.environ:
            return os.environ[name]
        return default

    def _get_bool(self, name: str) -> bool:
        """Get a boolean configuration value from environment variables.

        Returns:
            True if the environment variable exists and is set to 'true' or '1', False otherwise
        """
        return name in os.environ and os.environ[name].lower() in ["true", "1"]


class ReportSettings(BaseModel):
    """Tunable limits of the report aggregation engine."""

    top_domains: int = Field(
        default=10, ge=0, description="Number of email domains to rank"
    )
    top_clicks: int = Field(default=5, ge=0, description="Number of links to rank")
    require_tracking: bool = Field(
        default=False,
        description="Fail campaigns that have no tracking events",
    )

    @classmethod
    def from_config(cls, cfg: "ReporterConfig") -> "ReportSettings":
        """Build settings from a loaded ReporterConfig."""
        return cls(
            top_domains=cfg.REPORT_TOP_DOMAINS,
            top_clicks=cfg.REPORT_TOP_CLICKS,
            require_tracking=cfg.REPORT_REQUIRE_TRACKING,
        )


# Create a global instance of ReporterConfig
config = ReporterConfig()
