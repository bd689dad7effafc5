# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Policies that decide a record's ``current_score`` when a new score arrives.

The store calls exactly one policy; swapping it changes how scores from
different sources combine without touching any storage logic.
"""

from __future__ import annotations

from collections.abc import Callable

from repwatch.core.constants import ScorePolicyName
from repwatch.core.exceptions import ConfigurationError

ScorePolicy = Callable[[float | None, float], float]


def last_writer_wins(current: float | None, incoming: float) -> float:
    """The newest score replaces the stored one, whichever source sent it."""
    return incoming


def max_risk(current: float | None, incoming: float) -> float:
    """Keep the highest score seen from any source."""
    if current is None:
        return incoming
    return max(current, incoming)


_POLICIES: dict[str, ScorePolicy] = {
    ScorePolicyName.LAST_WRITER: last_writer_wins,
    ScorePolicyName.MAX_RISK: max_risk,
}


def get_score_policy(name: str) -> ScorePolicy:
    """Look up a policy by its configured name."""
    try:
        return _POLICIES[name.lower()]
    except KeyError:
        valid = ", ".join(sorted(_POLICIES))
        raise ConfigurationError(
            f"Unknown score policy {name!r}. Expected one of: {valid}"
        ) from None
