"""Campaign Reporter.

Aggregates email-campaign engagement events into per-campaign summaries and a
cross-campaign report: deduplication, domain pivoting, ranked top-N lists and
multi-campaign merging.
"""

__version__ = "0.1.0"
