# dedup.py
"""Deduplication of raw tracking actions."""

from typing import Iterable, List, Set, Tuple

from .models import TrackingAction


def deduplicate_tracking(actions: Iterable[TrackingAction]) -> List[TrackingAction]:
    """Drop repeated tracking actions, keeping the first occurrence of each.

    Two actions are duplicates when they share an activity type and a contact
    ID, so at most one action per activity type is kept for each recipient
    no matter how many times the API returned it.

    Args:
        actions: Tracking actions in the order they were fetched.

    Returns:
        New list of unique actions in their original order.
    """
    seen: Set[Tuple[str, str]] = set()
    unique: List[TrackingAction] = []

    for action in actions:
        key = action.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(action)

    return unique
