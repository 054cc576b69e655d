# ranking.py
"""Ranked top-N selection shared by domain and clickthrough reports."""

from typing import Any, Callable, Iterable, List, Mapping, Optional, TypeVar, Union

from .logging_utils import get_logger
from .models import OVERFLOW_DOMAIN, CampaignSummary, Click

logger = get_logger(__name__)

T = TypeVar("T")


def rank_top_n(
    entries: Iterable[T],
    limit: int,
    metric: Callable[[T], int],
    tie_key: Callable[[T], Any],
    combine: Optional[Callable[[T, T], T]] = None,
    overflow: Optional[T] = None,
) -> List[T]:
    """Sort entries by a metric and keep the top ``limit`` of them.

    Entries are ordered by ``metric`` descending, then by ``tie_key``
    ascending so that ties always come out in the same order. When
    ``combine`` is given, every entry past the limit is folded into
    ``overflow`` and that bucket is appended as the final element, even if
    nothing was folded into it.

    Args:
        entries: Entries to rank.
        limit: Number of entries to keep, at least 0.
        metric: Ranking metric extractor.
        tie_key: Secondary ascending sort key.
        combine: Optional associative combiner for the overflow bucket.
        overflow: Identity value of the overflow bucket, required with combine.

    Returns:
        At most ``limit`` entries, plus the overflow bucket when combining.

    Raises:
        ValueError: If limit is negative or combine is given without overflow.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if combine is not None and overflow is None:
        raise ValueError("an overflow identity is required when combining")

    ordered = sorted(entries, key=lambda e: (-metric(e), tie_key(e)))
    ranked = ordered[:limit]

    if combine is not None:
        bucket = overflow
        for entry in ordered[limit:]:
            bucket = combine(bucket, entry)
        ranked.append(bucket)

    return ranked


def rank_domains(
    summaries: Union[Mapping[str, CampaignSummary], Iterable[CampaignSummary]],
    limit: int,
) -> List[CampaignSummary]:
    """Rank per-domain summaries by sends, folding the rest into "other...".

    Summaries already keyed on the overflow domain are folded straight into
    the overflow bucket instead of competing for a ranked slot.

    Args:
        summaries: Domain summaries, as a domain-keyed mapping or a sequence.
        limit: Number of domains to keep.

    Returns:
        ``min(limit, domains) + 1`` summaries, the last one the overflow bucket.
    """
    if isinstance(summaries, Mapping):
        summaries = summaries.values()

    overflow = CampaignSummary(domain=OVERFLOW_DOMAIN)
    candidates: List[CampaignSummary] = []
    for summary in summaries:
        if summary.is_overflow():
            overflow = overflow.add(summary)
        else:
            candidates.append(summary)

    ranked = rank_top_n(
        candidates,
        limit,
        metric=lambda s: s.sends,
        tie_key=lambda s: s.domain,
        combine=lambda bucket, s: bucket.add(s),
        overflow=overflow,
    )

    logger.debug(
        "Ranked domains",
        extra={
            "domains": len(candidates),
            "limit": limit,
            "top": [s.domain for s in ranked[:-1]],
        },
    )
    return ranked


def rank_clicks(clicks: Iterable[Click], limit: int) -> List[Click]:
    """Rank clicked links by click count, keeping the top ``limit``.

    Links that were never clicked are dropped before ranking, and there is
    no overflow bucket.
    """
    clicked = [c for c in clicks if c.clicks > 0]
    ranked = rank_top_n(
        clicked,
        limit,
        metric=lambda c: c.clicks,
        tie_key=lambda c: c.id,
    )

    logger.debug(
        "Ranked clicks",
        extra={"clicked_links": len(clicked), "limit": limit, "kept": len(ranked)},
    )
    return ranked
