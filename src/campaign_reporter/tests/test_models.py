# src/campaign_reporter/tests/test_models.py
"""
Unit tests for campaign reporter Pydantic models.

Tests cover:
- ActivityType and ReportStage enums
- TrackingAction parsing from API payloads and immutability
- CampaignSummary.add arithmetic
- Click, Campaign, Campaigns and Report parsing and helpers
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from campaign_reporter.models import (
    OVERFLOW_DOMAIN,
    ActivityType,
    Campaign,
    Campaigns,
    CampaignSummary,
    Click,
    Report,
    ReportStage,
    TrackingAction,
)


class TestEnums:
    """Tests for the model enumerations."""

    @pytest.mark.unit
    def test_activity_type_values(self):
        """Test that ActivityType matches the API wire values."""
        assert ActivityType.SEND.value == "EMAIL_SEND"
        assert ActivityType.OPEN.value == "EMAIL_OPEN"
        assert ActivityType.CLICK.value == "EMAIL_CLICK"
        assert ActivityType.BOUNCE.value == "EMAIL_BOUNCE"
        assert ActivityType.UNSUBSCRIBE.value == "EMAIL_UNSUBSCRIBE"

    @pytest.mark.unit
    def test_activity_type_from_string(self):
        """Test that ActivityType can be created from its wire value."""
        assert ActivityType("EMAIL_OPEN") == ActivityType.OPEN

    @pytest.mark.unit
    def test_report_stage_order(self):
        """Test the report stages in build order."""
        assert [s.value for s in ReportStage] == [
            "raw", "deduplicated", "pivoted", "ranked",
        ]


class TestTrackingAction:
    """Tests for the TrackingAction model."""

    @pytest.mark.unit
    def test_parse_api_payload(self):
        """Test parsing a tracking result as returned by the API."""
        action = TrackingAction.model_validate({
            "activity_type": "EMAIL_BOUNCE",
            "contact_id": "42",
            "email_address": "jane@example.com",
            "bounce_code": "B",
            "bounce_description": "Non-existent address",
            "bounce_date": "2024-03-01T10:00:00.000Z",
            "campaign_id": "ignored",
        })

        assert action.activity_type == "EMAIL_BOUNCE"
        assert action.contact_id == "42"
        assert action.email == "jane@example.com"
        assert action.bounce_code == "B"
        assert action.bounce_description == "Non-existent address"

    @pytest.mark.unit
    def test_populate_by_field_name(self):
        """Test that actions can be built with Python field names."""
        action = TrackingAction(activity_type="EMAIL_OPEN", contact_id="1", email="a@x.com")
        assert action.email == "a@x.com"

    @pytest.mark.unit
    def test_unknown_activity_type_accepted(self):
        """Test that unknown activity types survive parsing."""
        action = TrackingAction(activity_type="EMAIL_FORWARD", contact_id="1")
        assert action.activity_type == "EMAIL_FORWARD"

    @pytest.mark.unit
    def test_action_is_immutable(self):
        """Test that fetched actions cannot be modified."""
        action = TrackingAction(activity_type="EMAIL_OPEN", contact_id="1", email="a@x.com")
        with pytest.raises(ValidationError):
            action.email = "b@x.com"

    @pytest.mark.unit
    def test_dedup_key(self):
        """Test the dedup key is activity type and contact ID."""
        action = TrackingAction(activity_type="EMAIL_OPEN", contact_id="7", email="a@x.com")
        assert action.dedup_key == ("EMAIL_OPEN", "7")


class TestCampaignSummary:
    """Tests for the CampaignSummary model."""

    @pytest.mark.unit
    def test_defaults_are_zero(self):
        """Test that a new summary has zero counters and no domain."""
        summary = CampaignSummary()
        assert summary.domain == ""
        assert summary.sends == 0
        assert summary.spam_count == 0

    @pytest.mark.unit
    def test_add_sums_every_counter(self):
        """Test that add sums all counters field by field."""
        a = CampaignSummary(
            domain="x.com", sends=10, opens=4, clicks=2, forwards=1,
            unsubscribes=1, bounces=3, spam_count=1,
        )
        b = CampaignSummary(
            domain="y.com", sends=6, opens=1, clicks=1, forwards=0,
            unsubscribes=2, bounces=0, spam_count=2,
        )

        total = a.add(b)

        assert total.domain == "x.com"
        assert total.sends == 16
        assert total.opens == 5
        assert total.clicks == 3
        assert total.forwards == 1
        assert total.unsubscribes == 3
        assert total.bounces == 3
        assert total.spam_count == 3

    @pytest.mark.unit
    def test_add_does_not_modify_operands(self):
        """Test that add returns a new summary without aliasing."""
        a = CampaignSummary(domain="x.com", sends=1)
        b = CampaignSummary(domain="x.com", sends=2)

        total = a.add(b)

        assert total is not a
        assert a.sends == 1
        assert b.sends == 2

    @pytest.mark.unit
    def test_add_is_commutative_and_associative(self):
        """Test that add ignores operand order and grouping."""
        a = CampaignSummary(sends=1, opens=2)
        b = CampaignSummary(sends=3, clicks=4)
        c = CampaignSummary(bounces=5, opens=6)

        assert a.add(b) == b.add(a)
        assert a.add(b).add(c) == a.add(b.add(c))

    @pytest.mark.unit
    def test_is_overflow(self):
        """Test overflow bucket detection."""
        assert CampaignSummary(domain=OVERFLOW_DOMAIN).is_overflow()
        assert not CampaignSummary(domain="x.com").is_overflow()


class TestClick:
    """Tests for the Click model."""

    @pytest.mark.unit
    def test_parse_api_payload(self):
        """Test parsing a click-through detail from the API."""
        click = Click.model_validate({
            "url": "https://example.com/offer",
            "url_uid": "1100567",
            "click_count": 12,
        })
        assert click.id == "1100567"
        assert click.url == "https://example.com/offer"
        assert click.clicks == 12


class TestCampaign:
    """Tests for the Campaign model."""

    @pytest.mark.unit
    def test_parse_api_payload(self):
        """Test parsing a campaign detail payload."""
        campaign = Campaign.model_validate({
            "id": "1119",
            "name": "Spring newsletter",
            "subject": "What's new",
            "status": "SENT",
            "last_run_date": "2024-03-01T10:00:00.000Z",
            "tracking_summary": {"sends": 100, "opens": 40, "clicks": 10},
            "click_through_details": [
                {"url": "https://example.com", "url_uid": "1", "click_count": 10},
            ],
        })

        assert campaign.run_date == "2024-03-01T10:00:00.000Z"
        assert campaign.tracking_summary.sends == 100
        assert campaign.tracking_summary.domain == ""
        assert campaign.clickthroughs[0].id == "1"
        assert campaign.stage == ReportStage.RAW
        assert campaign.pivoted_summary == {}

    @pytest.mark.unit
    def test_run_date_as_time(self):
        """Test parsing the run date as an aware datetime."""
        campaign = Campaign(id="1", run_date="2024-03-01T10:00:00Z")
        assert campaign.run_date_as_time() == datetime(
            2024, 3, 1, 10, 0, tzinfo=timezone.utc
        )

    @pytest.mark.unit
    def test_run_date_as_time_empty(self):
        """Test that a campaign that never ran has no run time."""
        assert Campaign(id="1").run_date_as_time() is None

    @pytest.mark.unit
    def test_id_required(self):
        """Test that a campaign needs an ID."""
        with pytest.raises(ValidationError):
            Campaign()


class TestCampaignsAndReport:
    """Tests for the Campaigns and Report models."""

    @pytest.mark.unit
    def test_campaigns_parse_results(self):
        """Test that campaigns are read from the API results key."""
        campaigns = Campaigns.model_validate({"results": [{"id": "1"}, {"id": "2"}]})
        assert [c.id for c in campaigns.campaigns] == ["1", "2"]
        assert campaigns.report is None

    @pytest.mark.unit
    def test_campaigns_is_empty(self):
        """Test empty window detection."""
        assert Campaigns().is_empty()
        assert not Campaigns(campaigns=[Campaign(id="1")]).is_empty()

    @pytest.mark.unit
    def test_report_to_dict_keys(self):
        """Test that the report exposes the renderer keys."""
        report = Report(bounces=["a@x.com"])
        data = report.to_dict()

        assert set(data) == {
            "combined", "summaries", "clicks", "unsubscribes", "bounces", "skipped_campaigns",
        }
        assert data["bounces"] == ["a@x.com"]
        assert data["combined"] == CampaignSummary()
