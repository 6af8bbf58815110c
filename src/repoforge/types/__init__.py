# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from compiler.py, resolver.py, or any pipeline stage; this prevents circular imports.
"""Typed contracts for repoforge configuration input and compiled output."""

from __future__ import annotations

from typing import Any

from repoforge.types.api import (
    ChangePlanDict,
    PackResolutionDict,
    PublisherActionDict,
    RecommendationCandidateDict,
    RepoSpecDict,
)
from repoforge.types.config import GovernancePosture, NoiseBudget, PlanConfig

# Deep-partial PlanConfig. TypedDict cannot express recursive partials, so
# patches stay loosely typed and are merged by config.merge_config().
ConfigPatch = dict[str, Any]

__all__ = [
    "ChangePlanDict",
    "ConfigPatch",
    "GovernancePosture",
    "NoiseBudget",
    "PackResolutionDict",
    "PlanConfig",
    "PublisherActionDict",
    "RecommendationCandidateDict",
    "RepoSpecDict",
]
