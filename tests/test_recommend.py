"""Tests for automation recommendation scoring."""

from __future__ import annotations

import pytest

from repoforge.compiler import compile_repo_spec
from repoforge.recommend import estimate_ci_minutes, recommend_automation_candidates, round_half_up
from repoforge.types import PlanConfig


def _scores(config: PlanConfig) -> list[tuple[str, float]]:
    candidates = recommend_automation_candidates(config, compile_repo_spec(config))
    return [(c.label, c.score) for c in candidates]


class TestRounding:
    def test_half_up(self) -> None:
        assert round_half_up(0.25) == 0.3
        assert round_half_up(-0.25) == -0.3
        assert round_half_up(2.5, 0) == 3.0

    @pytest.mark.parametrize(
        ("value", "places", "expected"),
        [(0.15, 1, 0.1), (0.35, 1, 0.3), (2.675, 2, 2.67), (1.005, 2, 1.0)],
    )
    def test_rounds_stored_binary_value(self, value: float, places: int, expected: float) -> None:
        assert round_half_up(value, places) == expected

    @pytest.mark.parametrize(
        ("dims", "tests", "build", "minutes"),
        [(1, True, True, 24), (2, True, True, 48), (1, True, False, 14), (3, False, True, 32)],
    )
    def test_ci_minutes(self, dims: int, tests: bool, build: bool, minutes: int) -> None:
        assert estimate_ci_minutes(dims, tests, build) == minutes


class TestRecommend:
    def test_default_ranking(self, default_config: PlanConfig) -> None:
        assert _scores(default_config) == [
            ("Balanced Throughput", 73.0),
            ("Quiet Guardrails", 33.0),
            ("Aggressive Freshness", -32.0),
        ]

    def test_low_noise_prefers_quiet(self, default_config: PlanConfig) -> None:
        default_config["noise_budget"] = "low"
        assert _scores(default_config) == [
            ("Quiet Guardrails", 87.0),
            ("Balanced Throughput", 19.0),
            ("Aggressive Freshness", -83.0),
        ]

    def test_high_noise_prefers_aggressive(self, default_config: PlanConfig) -> None:
        default_config["noise_budget"] = "high"
        assert _scores(default_config) == [
            ("Aggressive Freshness", 22.0),
            ("Balanced Throughput", 19.0),
            ("Quiet Guardrails", -18.0),
        ]

    def test_strict_posture_penalty(self, default_config: PlanConfig) -> None:
        default_config["governance_posture"] = "Strict"
        assert _scores(default_config)[0] == ("Balanced Throughput", 63.0)

    def test_relaxed_posture_lowers_complexity(self, default_config: PlanConfig) -> None:
        default_config["governance_posture"] = "Relaxed"
        candidates = recommend_automation_candidates(default_config, compile_repo_spec(default_config))
        assert candidates[0].complexity_risk == 18.0
        assert candidates[0].score == 79.0

    def test_candidate_fields(self, default_config: PlanConfig) -> None:
        balanced = recommend_automation_candidates(default_config, compile_repo_spec(default_config))[0]
        assert balanced.id == "balanced-throughput"
        assert balanced.fit == 110
        assert balanced.maintenance_cost == 13.0
        assert balanced.complexity_risk == 24.0
        assert balanced.bot_prs_per_month == 6
        assert balanced.ci_minutes_proxy == 48
        assert balanced.security_posture_note == "Full scanning coverage; dependency updates weekly."

    def test_partial_scanning_note(self, default_config: PlanConfig) -> None:
        default_config["security"]["secret_scanning"] = False
        candidates = recommend_automation_candidates(default_config, compile_repo_spec(default_config))
        assert all(c.security_posture_note.startswith("Partial scanning coverage") for c in candidates)

    def test_fit_floor(self, default_config: PlanConfig) -> None:
        default_config["noise_budget"] = 0
        candidates = recommend_automation_candidates(default_config, compile_repo_spec(default_config))
        aggressive = next(c for c in candidates if c.id == "aggressive-freshness")
        assert aggressive.fit == 5
