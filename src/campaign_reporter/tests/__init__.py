"""
Campaign Reporter Test Package.

Test categories:
- test_models.py: Pydantic models and summary arithmetic
- test_dedup.py / test_pivot.py / test_ranking.py: aggregation engine
- test_campaign_report.py: per-campaign report building
- test_combiner.py: cross-campaign combination
- test_config.py: environment configuration and report settings
- test_api_client.py: tracking API client
- test_store.py: saving and loading reporting windows
- test_renderer.py: text rendering and percentages
- test_main.py: pipeline orchestration and CLI
- test_logging_utils.py: structured logging helpers
"""

__all__ = []
