"""Advisory scoring of the three canonical automation profiles.

Each candidate re-runs the automation derivation at a fixed target noise level
(20, 50, 80), independent of the user's requested budget, and scores it:

    fit             = max(5, 110 - 1.8 * |requested - target| - (10 if Strict))
    ci_minutes      = round(dims * (20 if tests and build else 12) * (1.2 if tests else 0.9))
    maintenance     = monthly_prs * 1.5 + ci_minutes / 12
    complexity      = matrix_risk[breadth] + (12 if ungrouped else 4) + (6 if checks required)
    score           = round(fit - maintenance - complexity, 1)

Rounding is half-up on the decimal representation so results are stable
across platforms.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from repoforge.automation import (
    AutomationProfile,
    CiMatrix,
    DependabotPolicy,
    resolve_automation_from_noise,
    resolve_noise_level,
)
from repoforge.compiler import RepoSpec
from repoforge.types import PlanConfig
from repoforge.types.api import RecommendationCandidateDict

CANDIDATE_TARGETS: tuple[tuple[str, int], ...] = (
    ("Quiet Guardrails", 20),
    ("Balanced Throughput", 50),
    ("Aggressive Freshness", 80),
)

_MATRIX_RISK: dict[str, int] = {"minimal": 8, "standard": 14, "broad": 26}
_MIN_FIT = 5
_BASE_FIT = 110
_NOISE_DISTANCE_WEIGHT = 1.8
_STRICT_FIT_PENALTY = 10


def round_half_up(value: float, places: int = 1) -> float:
    """Round the exact binary value of *value* half away from zero.

    ``0.15`` is stored as ``0.1499...`` and rounds to ``0.1``; exact ties such
    as ``0.25`` round up in magnitude.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class RecommendationCandidate:
    id: str
    label: str
    score: float
    fit: float
    maintenance_cost: float
    complexity_risk: float
    bot_prs_per_month: int
    ci_minutes_proxy: int
    security_posture_note: str
    dependabot: DependabotPolicy
    ci: CiMatrix

    def to_dict(self) -> RecommendationCandidateDict:
        return RecommendationCandidateDict(
            id=self.id,
            label=self.label,
            score=self.score,
            fit=self.fit,
            maintenance_cost=self.maintenance_cost,
            complexity_risk=self.complexity_risk,
            bot_prs_per_month=self.bot_prs_per_month,
            ci_minutes_proxy=self.ci_minutes_proxy,
            security_posture_note=self.security_posture_note,
            dependabot=self.dependabot.to_dict(),
            ci=self.ci.to_dict(),
        )


def estimate_ci_minutes(dimensions: int, include_tests: bool, include_build: bool) -> int:
    base_per_dimension = 20 if include_tests and include_build else 12
    quality_factor = 1.2 if include_tests else 0.9
    return int(round_half_up(dimensions * base_per_dimension * quality_factor, 0))


def security_posture_note(config: PlanConfig, schedule: str) -> str:
    security = config["security"]
    if security["code_scanning"] and security["secret_scanning"]:
        coverage = "Full scanning coverage"
    elif security["code_scanning"] or security["secret_scanning"]:
        coverage = "Partial scanning coverage"
    else:
        coverage = "Manual scanning posture"
    return f"{coverage}; dependency updates {schedule}."


def _score_candidate(config: PlanConfig, repo_spec: RepoSpec, label: str, target_noise: int) -> RecommendationCandidate:
    requested = resolve_noise_level(config.get("noise_budget"))
    automation: AutomationProfile = resolve_automation_from_noise(target_noise)

    strict_penalty = _STRICT_FIT_PENALTY if repo_spec.governance.posture == "Strict" else 0
    fit = max(_MIN_FIT, _BASE_FIT - abs(requested - target_noise) * _NOISE_DISTANCE_WEIGHT - strict_penalty)

    ci_minutes = estimate_ci_minutes(
        len(automation.ci.dimensions),
        bool(config["quality"]["testing"]),
        bool(config["ci"]["build_artifacts"]),
    )
    maintenance_cost = automation.dependabot.estimated_monthly_prs * 1.5 + ci_minutes / 12
    complexity_risk = (
        _MATRIX_RISK[automation.ci.matrix_breadth]
        + (12 if automation.dependabot.grouping == "none" else 4)
        + (6 if repo_spec.governance.branch.require_status_checks else 0)
    )

    return RecommendationCandidate(
        id=label.lower().replace(" ", "-"),
        label=label,
        score=round_half_up(fit - maintenance_cost - complexity_risk),
        fit=fit,
        maintenance_cost=round_half_up(maintenance_cost),
        complexity_risk=round_half_up(complexity_risk),
        bot_prs_per_month=automation.dependabot.estimated_monthly_prs,
        ci_minutes_proxy=ci_minutes,
        security_posture_note=security_posture_note(config, automation.dependabot.schedule),
        dependabot=automation.dependabot,
        ci=automation.ci,
    )


def recommend_automation_candidates(config: PlanConfig, repo_spec: RepoSpec) -> list[RecommendationCandidate]:
    """Score the three canonical profiles, best first.

    Ties keep noise-ascending order (``sorted`` is stable).
    """
    candidates = [_score_candidate(config, repo_spec, label, target) for label, target in CANDIDATE_TARGETS]
    return sorted(candidates, key=lambda c: -c.score)
