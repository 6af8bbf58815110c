"""Noise-budget to automation-cadence mapping.

The noise budget is a 0-100 scalar (or a low/medium/high alias) that controls
how aggressive dependency bots and the CI matrix should be. Three closed bands:

  - <= 33: minimal (monthly updates, broad grouping, one matrix dimension)
  - >= 67: maximal (daily updates, no grouping, four matrix dimensions)
  - otherwise: standard (weekly updates, per-language grouping, two dimensions)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from repoforge.types import NoiseBudget
from repoforge.types.api import AutomationDict, CiMatrixDict, DependabotDict

Schedule = Literal["daily", "weekly", "monthly"]
Grouping = Literal["none", "language", "broad"]
MatrixBreadth = Literal["minimal", "standard", "broad"]

NOISE_ALIASES: dict[str, int] = {"low": 20, "medium": 50, "high": 80}
DEFAULT_NOISE_LEVEL = 50
MINIMAL_BAND_MAX = 33
MAXIMAL_BAND_MIN = 67


@dataclass(frozen=True)
class DependabotPolicy:
    schedule: Schedule
    grouping: Grouping
    estimated_monthly_prs: int

    def to_dict(self) -> DependabotDict:
        return DependabotDict(
            schedule=self.schedule,
            grouping=self.grouping,
            estimated_monthly_prs=self.estimated_monthly_prs,
        )


@dataclass(frozen=True)
class CiMatrix:
    matrix_breadth: MatrixBreadth
    dimensions: tuple[str, ...]

    def to_dict(self) -> CiMatrixDict:
        return CiMatrixDict(matrix_breadth=self.matrix_breadth, dimensions=list(self.dimensions))


@dataclass(frozen=True)
class AutomationProfile:
    """Dependency-bot cadence plus CI matrix shape for one noise level."""

    dependabot: DependabotPolicy
    ci: CiMatrix

    def to_dict(self) -> AutomationDict:
        return AutomationDict(dependabot=self.dependabot.to_dict(), ci=self.ci.to_dict())


_MINIMAL = AutomationProfile(
    dependabot=DependabotPolicy(schedule="monthly", grouping="broad", estimated_monthly_prs=2),
    ci=CiMatrix(matrix_breadth="minimal", dimensions=("node-lts",)),
)
_STANDARD = AutomationProfile(
    dependabot=DependabotPolicy(schedule="weekly", grouping="language", estimated_monthly_prs=6),
    ci=CiMatrix(matrix_breadth="standard", dimensions=("node-lts", "ubuntu")),
)
_MAXIMAL = AutomationProfile(
    dependabot=DependabotPolicy(schedule="daily", grouping="none", estimated_monthly_prs=24),
    ci=CiMatrix(matrix_breadth="broad", dimensions=("node-lts", "node-current", "ubuntu", "windows")),
)


def resolve_noise_level(noise_budget: NoiseBudget | None) -> float:
    """Map a noise budget to a level in [0, 100].

    Finite numbers are clamped; aliases map to 20/50/80; anything else
    (unknown alias, NaN, infinity, None) falls back to 50.
    """
    if isinstance(noise_budget, bool):
        return DEFAULT_NOISE_LEVEL
    if isinstance(noise_budget, int | float):
        if not math.isfinite(noise_budget):
            return DEFAULT_NOISE_LEVEL
        return max(0, min(100, noise_budget))
    return NOISE_ALIASES.get(str(noise_budget), DEFAULT_NOISE_LEVEL)


def resolve_automation_from_noise(noise_level: float) -> AutomationProfile:
    if noise_level <= MINIMAL_BAND_MAX:
        return _MINIMAL
    if noise_level >= MAXIMAL_BAND_MIN:
        return _MAXIMAL
    return _STANDARD
