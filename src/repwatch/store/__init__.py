# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Reputation store and scoring policies."""

from repwatch.store.reputation import ReputationStore
from repwatch.store.scoring import ScorePolicy, get_score_policy, last_writer_wins, max_risk

__all__ = [
    "ReputationStore",
    "ScorePolicy",
    "get_score_policy",
    "last_writer_wins",
    "max_risk",
]
