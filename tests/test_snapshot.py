"""Tests for snapshot recomputation, plan diffs, decisions, and the simulation log."""

from __future__ import annotations

import copy

import pytest

from repoforge.changeplan import materialize_change_plan
from repoforge.compiler import compile_repo_spec
from repoforge.snapshot import (
    build_change_plan_diff,
    build_simulation_steps,
    compile_change_plan,
    compile_snapshot,
    create_engine_decision_payloads,
)
from repoforge.types import PlanConfig


class TestCompileSnapshot:
    def test_stages_agree(self, default_config: PlanConfig) -> None:
        snapshot = compile_snapshot(default_config)
        assert snapshot.change_plan == materialize_change_plan(snapshot.repo_spec)
        assert len(snapshot.publisher_actions) == 29
        assert snapshot.recommendations[0].label == "Balanced Throughput"
        assert snapshot.pending_diff is None

    def test_overrides_flow_through(self, release_config: PlanConfig) -> None:
        snapshot = compile_snapshot(
            release_config, capability_owner_overrides={"release:ownership": "pack.release.gh-release"}
        )
        assert snapshot.repo_spec.packs is not None
        assert "pack.release.gh-release" in snapshot.repo_spec.packs.selected_packs
        resolve = snapshot.change_plan.get("resolve-packs")
        assert resolve is not None and "pack.release.gh-release" in resolve.message
        assert snapshot.to_dict()["capability_owner_overrides"] == {"release:ownership": "pack.release.gh-release"}

    def test_target_applies_to_actions(self, default_config: PlanConfig) -> None:
        snapshot = compile_snapshot(default_config, target="pr")
        assert all(a.id.startswith("pr-") for a in snapshot.publisher_actions)

    def test_invalid_target(self, default_config: PlanConfig) -> None:
        with pytest.raises(ValueError):
            compile_snapshot(default_config, target="ftp")

    def test_to_dict_keys(self, default_config: PlanConfig) -> None:
        data = compile_snapshot(default_config).to_dict()
        assert set(data) == {
            "repo_spec",
            "change_plan",
            "pending_diff",
            "recommendations",
            "decisions",
            "publisher_actions",
            "capability_owner_overrides",
        }


class TestPlanDiff:
    def test_readme_toggle(self, default_config: PlanConfig) -> None:
        previous_config = copy.deepcopy(default_config)
        previous_config["docs"]["readme"] = False
        previous = compile_change_plan(previous_config)

        snapshot = compile_snapshot(default_config, previous_plan=previous)
        diff = snapshot.pending_diff
        assert diff is not None
        assert any(op.type == "create_file" and op.target == "README.md" for op in diff.added)
        # Readme on makes the docs pack eligible, which changes the pack summary
        assert [op.id for op in diff.removed] == ["resolve-packs"]
        assert "pack.docs.templates" not in diff.removed[0].message

    def test_identical_plans(self, default_config: PlanConfig) -> None:
        plan = compile_change_plan(default_config)
        diff = build_change_plan_diff(plan, compile_change_plan(default_config))
        assert diff.is_empty
        assert diff.to_dict() == {"added": [], "removed": []}


class TestDecisions:
    def test_default_decisions(self, default_config: PlanConfig) -> None:
        spec = compile_repo_spec(default_config)
        decisions = create_engine_decision_payloads(default_config, spec, materialize_change_plan(spec))
        assert [d.key for d in decisions] == [
            "architecture-normalization",
            "stack-resolution",
            "change-plan-publishing",
        ]
        architecture, stack, publishing = decisions
        assert architecture.alternatives == ("Vertical Slice", "MVC")
        assert stack.recommendation == "TypeScript + Next.js"
        assert "Team Standard posture enforces the standard ruleset (lint, test, build)" in stack.why
        assert publishing.recommendation == "Balanced Throughput"
        assert publishing.alternatives == ("Quiet Guardrails", "Aggressive Freshness")
        assert publishing.ranked_candidates is not None
        assert len(publishing.ranked_candidates) == 3

    def test_rust_adds_renderer_decision(self, rust_config: PlanConfig) -> None:
        snapshot = compile_snapshot(rust_config)
        assert [d.stage for d in snapshot.decisions] == ["normalize", "repo-spec", "repo-spec", "change-plan"]
        rust = snapshot.decisions[2]
        assert rust.key == "rust-mode"
        assert rust.recommendation == "Template renderer (stable manifest output)"

    def test_relaxed_posture_clause(self, default_config: PlanConfig) -> None:
        default_config["governance_posture"] = "Relaxed"
        decisions = compile_snapshot(default_config).decisions
        assert "Relaxed posture enforces the lenient ruleset (no required checks)" in decisions[-1].why

    def test_ranked_candidates_serialized(self, default_config: PlanConfig) -> None:
        data = compile_snapshot(default_config).to_dict()
        publishing = data["decisions"][-1]
        assert [c["label"] for c in publishing["ranked_candidates"]] == [
            "Balanced Throughput",
            "Quiet Guardrails",
            "Aggressive Freshness",
        ]
        assert "ranked_candidates" not in data["decisions"][0]


class TestSimulationLog:
    def test_entry_types(self, default_config: PlanConfig) -> None:
        entries = build_simulation_steps(default_config)
        assert len(entries) == 20
        assert entries[0].type == "info"
        assert entries[4].type == "file"
        assert entries[4].file_name == ".env.example"
        assert entries[-1].type == "success"
        assert "file_name" not in entries[0].to_dict()

    def test_snapshot_log_matches_plan(self, default_config: PlanConfig) -> None:
        snapshot = compile_snapshot(default_config)
        assert [e.id for e in snapshot.simulation_log()] == [op.id for op in snapshot.change_plan.operations]
