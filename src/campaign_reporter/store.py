# store.py
"""Local file storage for fetched reporting windows."""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .config import config
from .exceptions import StoreError
from .logging_utils import get_logger
from .models import Campaigns


class ReportStore:
    """Saves and loads Campaigns values as JSON files in a directory.

    Saved windows can be rebuilt into reports later without fetching them
    from the API again.
    """

    FILENAME_FORMAT = "%Y-%m-%dT%H:%M"

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """Initialize the store.

        Args:
            directory: Directory holding saved windows. Defaults to config value.
        """
        self.logger = get_logger(__name__)
        self.directory = Path(directory or config.REPORT_STORE_DIR)

    def default_filename(self, run_time: Optional[datetime] = None) -> str:
        """Build the file name for a window fetched at run_time."""
        run_time = run_time or datetime.now()
        return f"{run_time.strftime(self.FILENAME_FORMAT)}.json"

    def save(self, campaigns: Campaigns, filename: Optional[str] = None) -> Path:
        """Write a reporting window to the store directory.

        Args:
            campaigns: Reporting window to save.
            filename: Optional file name. Defaults to the current run time.

        Returns:
            Path of the written file.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / (filename or self.default_filename())

        path.write_text(campaigns.model_dump_json(by_alias=True), encoding="utf-8")

        self.logger.info(
            "Saved reporting window",
            extra={"path": str(path), "campaigns": len(campaigns.campaigns)},
        )
        return path

    def load(self, path: Union[str, Path]) -> Campaigns:
        """Read a reporting window back from a file.

        Args:
            path: File to read. Relative names are looked up as given.

        Returns:
            The stored Campaigns value.

        Raises:
            FileNotFoundError: If the file does not exist.
            StoreError: If the file content is not a stored reporting window.
        """
        path = Path(path)
        content = path.read_text(encoding="utf-8")

        try:
            campaigns = Campaigns.model_validate_json(content)
        except ValidationError as e:
            raise StoreError(f"Failed to decode stored report {path}: {e}") from e

        self.logger.info(
            "Loaded reporting window",
            extra={"path": str(path), "campaigns": len(campaigns.campaigns)},
        )
        return campaigns
