# src/campaign_reporter/tests/test_store.py
"""
Unit tests for the local report store.

Tests cover:
- Default file naming
- Saving and loading a built reporting window
- Missing and corrupt files
"""
from datetime import datetime

import pytest

from campaign_reporter.exceptions import StoreError
from campaign_reporter.models import Campaign, Campaigns, CampaignSummary, Click, TrackingAction
from campaign_reporter.report import build_campaigns_report
from campaign_reporter.store import ReportStore


@pytest.fixture
def window():
    """A reporting window with tracking, clicks and a built report."""
    campaign = Campaign(
        id="1100394165290",
        name="Spring Newsletter",
        run_date="2024-03-01T09:30:00.000Z",
        tracking_summary=CampaignSummary(sends=2, opens=1),
        clickthroughs=[Click(id="l1", url="https://example.com", clicks=1)],
        tracking=[
            TrackingAction(activity_type="EMAIL_SEND", contact_id="1", email="a@x.com"),
            TrackingAction(activity_type="EMAIL_SEND", contact_id="2", email="b@y.com"),
            TrackingAction(activity_type="EMAIL_OPEN", contact_id="1", email="a@x.com"),
        ],
    )
    campaigns = Campaigns(start_date="2024-02-23T09:30:00Z", days_back=7, campaigns=[campaign])
    return build_campaigns_report(campaigns)


class TestReportStore:
    """Tests for ReportStore."""

    @pytest.mark.unit
    def test_default_filename(self, tmp_path):
        """Test that file names are built from the run time."""
        store = ReportStore(tmp_path)

        name = store.default_filename(datetime(2024, 3, 1, 9, 30, 45))

        assert name == "2024-03-01T09:30.json"

    @pytest.mark.unit
    def test_save_creates_directory(self, tmp_path, window):
        """Test that saving creates the store directory when missing."""
        store = ReportStore(tmp_path / "nested" / "logs")

        path = store.save(window, filename="window.json")

        assert path == tmp_path / "nested" / "logs" / "window.json"
        assert path.exists()

    @pytest.mark.unit
    def test_save_uses_wire_names(self, tmp_path, window):
        """Test that saved files use the API field names."""
        path = ReportStore(tmp_path).save(window, filename="window.json")

        content = path.read_text(encoding="utf-8")

        assert '"results"' in content
        assert '"email_address"' in content
        assert '"url_uid"' in content

    @pytest.mark.unit
    def test_load_restores_window(self, tmp_path, window):
        """Test that a loaded window equals the saved one."""
        store = ReportStore(tmp_path)
        path = store.save(window, filename="window.json")

        loaded = store.load(path)

        assert loaded == window
        assert loaded.campaigns[0].tracking[0].email == "a@x.com"
        assert loaded.report.summaries[0].domain == "x.com"

    @pytest.mark.unit
    def test_loaded_window_rebuilds_same_report(self, tmp_path, window):
        """Test that rebuilding a loaded window reproduces its report."""
        store = ReportStore(tmp_path)
        loaded = store.load(store.save(window, filename="window.json"))

        rebuilt = build_campaigns_report(loaded)

        assert rebuilt.report == window.report

    @pytest.mark.unit
    def test_load_missing_file_raises(self, tmp_path):
        """Test that loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ReportStore(tmp_path).load(tmp_path / "missing.json")

    @pytest.mark.unit
    @pytest.mark.parametrize("content", ["not json", '{"results": [{"name": "no id"}]}'])
    def test_load_corrupt_file_raises_store_error(self, tmp_path, content):
        """Test that undecodable content raises StoreError."""
        path = tmp_path / "corrupt.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(StoreError):
            ReportStore(tmp_path).load(path)
