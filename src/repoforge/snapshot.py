"""Atomic recomputation of every derived value for one configuration.

``compile_snapshot`` runs the full pipeline and returns a single frozen
Snapshot. A consumer swaps its reference to the new snapshot in one step, so
it never observes pack resolution from one edit mixed with a change plan from
another.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from repoforge.changeplan import ChangeOperation, ChangePlan, materialize_change_plan
from repoforge.compiler import RepoSpec, compile_repo_spec
from repoforge.packs import PackCatalog
from repoforge.publisher import PublisherAction, publish_from_change_plan
from repoforge.recommend import RecommendationCandidate, recommend_automation_candidates
from repoforge.types import PlanConfig
from repoforge.types.api import (
    ChangePlanDiffDict,
    DecisionPayloadDict,
    SimulationLogEntryDict,
    SnapshotDict,
)

logger = logging.getLogger(__name__)

SimulationLogType = Literal["info", "file", "success"]
DecisionStage = Literal["normalize", "repo-spec", "change-plan"]

# ---------------------------------------------------------------------------
# Plan diff
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChangePlanDiff:
    added: tuple[ChangeOperation, ...] = ()
    removed: tuple[ChangeOperation, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def to_dict(self) -> ChangePlanDiffDict:
        return ChangePlanDiffDict(
            added=[op.to_dict() for op in self.added],
            removed=[op.to_dict() for op in self.removed],
        )


def operation_fingerprint(operation: ChangeOperation) -> str:
    """Content identity of an operation; ids are positional and ignored."""
    return f"{operation.type}|{operation.target or ''}|{operation.message}"


def build_change_plan_diff(previous: ChangePlan, next_plan: ChangePlan) -> ChangePlanDiff:
    previous_prints = {operation_fingerprint(op) for op in previous.operations}
    next_prints = {operation_fingerprint(op) for op in next_plan.operations}
    return ChangePlanDiff(
        added=tuple(op for op in next_plan.operations if operation_fingerprint(op) not in previous_prints),
        removed=tuple(op for op in previous.operations if operation_fingerprint(op) not in next_prints),
    )


# ---------------------------------------------------------------------------
# Simulation log
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationLogEntry:
    id: str
    type: SimulationLogType
    message: str
    file_name: str | None = None

    def to_dict(self) -> SimulationLogEntryDict:
        result = SimulationLogEntryDict(id=self.id, type=self.type, message=self.message)
        if self.file_name is not None:
            result["file_name"] = self.file_name
        return result


def _log_type(operation: ChangeOperation) -> SimulationLogType:
    if operation.type == "create_file":
        return "file"
    if operation.type == "complete":
        return "success"
    return "info"


def render_simulation_log(change_plan: ChangePlan) -> list[SimulationLogEntry]:
    return [
        SimulationLogEntry(id=op.id, type=_log_type(op), message=op.message, file_name=op.target)
        for op in change_plan.operations
    ]


def compile_change_plan(
    config: PlanConfig,
    capability_owner_overrides: Mapping[str, str] | None = None,
    catalog: PackCatalog | None = None,
) -> ChangePlan:
    return materialize_change_plan(compile_repo_spec(config, capability_owner_overrides, catalog=catalog))


def build_simulation_steps(config: PlanConfig) -> list[SimulationLogEntry]:
    return render_simulation_log(compile_change_plan(config))


# ---------------------------------------------------------------------------
# Decision payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DecisionPayload:
    """One advisory decision shown next to a pipeline stage."""

    key: str
    stage: DecisionStage
    title: str
    recommendation: str
    why: str
    trade_offs: tuple[str, ...]
    alternatives: tuple[str, ...]
    confidence: Literal["High", "Medium", "Low"]
    ranked_candidates: tuple[RecommendationCandidate, ...] | None = None

    def to_dict(self) -> DecisionPayloadDict:
        result = DecisionPayloadDict(
            key=self.key,
            stage=self.stage,
            title=self.title,
            recommendation=self.recommendation,
            why=self.why,
            trade_offs=list(self.trade_offs),
            alternatives=list(self.alternatives),
            confidence=self.confidence,
        )
        if self.ranked_candidates is not None:
            result["ranked_candidates"] = [c.to_dict() for c in self.ranked_candidates]
        return result


_ARCHITECTURE_ALTERNATIVES = ("Standard", "Vertical Slice", "MVC")


def _posture_clause(repo_spec: RepoSpec) -> str:
    governance = repo_spec.governance
    checks = ", ".join(governance.status_checks) if governance.status_checks else "no required checks"
    return f"{governance.posture} posture enforces the {governance.ruleset} ruleset ({checks})"


def _architecture_decision(config: PlanConfig) -> DecisionPayload:
    architecture = config["architecture"]
    return DecisionPayload(
        key="architecture-normalization",
        stage="normalize",
        title="Architecture Baseline",
        recommendation=architecture,
        why=(
            f"{config['type']} workflows are normalized around {architecture} boundaries "
            "to keep service ownership explicit."
        ),
        trade_offs=("Higher initial scaffolding effort", "Requires team alignment on folder contracts"),
        alternatives=tuple(a for a in _ARCHITECTURE_ALTERNATIVES if a != architecture),
        confidence="High",
    )


def _stack_decision(config: PlanConfig, repo_spec: RepoSpec) -> DecisionPayload:
    stack = config["stack"]
    if stack.get("dependency_strategy") == "pinned":
        dependency_posture = "pinning dependencies for deterministic builds"
    else:
        dependency_posture = "using semver for faster library adoption"
    return DecisionPayload(
        key="stack-resolution",
        stage="repo-spec",
        title="Stack Resolution",
        recommendation=f"{stack.get('language', 'TypeScript')} + {stack.get('framework') or 'Core runtime'}",
        why=(
            f"Pack resolution selected {repo_spec.package_manager} with {dependency_posture} "
            f"across {len(repo_spec.files)} generated files; {_posture_clause(repo_spec)}."
        ),
        trade_offs=(
            "Switching package manager later can invalidate lockfiles",
            "Framework-specific conventions reduce portability",
        ),
        alternatives=("TypeScript + Express", "Go + Gin", "Python + FastAPI"),
        confidence="Medium",
    )


def _rust_mode_decision(config: PlanConfig) -> DecisionPayload:
    experimental = config["stack"].get("rust_mode") == "projen-experimental"
    template_label = "Template renderer (stable manifest output)"
    experimental_label = "Experimental projen-rust renderer (power mode only)"
    return DecisionPayload(
        key="rust-mode",
        stage="repo-spec",
        title="Rust Renderer Mode",
        recommendation=experimental_label if experimental else template_label,
        why=(
            "Experimental synthesis is gated behind power mode; basic mode falls back to template output."
            if experimental
            else "Template rendering lists every manifest path without invoking a generator."
        ),
        trade_offs=(
            "Generator output can drift between projen releases",
            "Template output needs manual follow-up for build tooling",
        ),
        alternatives=(template_label,) if experimental else (experimental_label,),
        confidence="Medium",
    )


def _publishing_decision(
    repo_spec: RepoSpec, change_plan: ChangePlan, candidates: list[RecommendationCandidate]
) -> DecisionPayload:
    best = candidates[0]
    return DecisionPayload(
        key="change-plan-publishing",
        stage="change-plan",
        title="Publishing Sequence",
        recommendation=best.label,
        why=(
            f"Change plan emits {len(change_plan.operations)} operations; {_posture_clause(repo_spec)}. "
            f"{best.label} scores {best.score} against the requested noise budget."
        ),
        trade_offs=("More guardrails may slow first merge", "Automation requires permissions upfront"),
        alternatives=tuple(c.label for c in candidates[1:]),
        confidence="High",
        ranked_candidates=tuple(candidates),
    )


def create_engine_decision_payloads(
    config: PlanConfig, repo_spec: RepoSpec, change_plan: ChangePlan
) -> list[DecisionPayload]:
    candidates = recommend_automation_candidates(config, repo_spec)
    decisions = [_architecture_decision(config), _stack_decision(config, repo_spec)]
    if config["stack"].get("language") == "Rust":
        decisions.append(_rust_mode_decision(config))
    decisions.append(_publishing_decision(repo_spec, change_plan, candidates))
    return decisions


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Snapshot:
    repo_spec: RepoSpec
    change_plan: ChangePlan
    recommendations: tuple[RecommendationCandidate, ...]
    decisions: tuple[DecisionPayload, ...]
    publisher_actions: tuple[PublisherAction, ...]
    pending_diff: ChangePlanDiff | None = None
    capability_owner_overrides: dict[str, str] = field(default_factory=dict)

    def simulation_log(self) -> list[SimulationLogEntry]:
        return render_simulation_log(self.change_plan)

    def to_dict(self) -> SnapshotDict:
        return SnapshotDict(
            repo_spec=self.repo_spec.to_dict(),
            change_plan=self.change_plan.to_dict(),
            pending_diff=self.pending_diff.to_dict() if self.pending_diff is not None else None,
            recommendations=[c.to_dict() for c in self.recommendations],
            decisions=[d.to_dict() for d in self.decisions],
            publisher_actions=[a.to_dict() for a in self.publisher_actions],
            capability_owner_overrides=dict(sorted(self.capability_owner_overrides.items())),
        )


def compile_snapshot(
    config: PlanConfig,
    *,
    capability_owner_overrides: Mapping[str, str] | None = None,
    user_mode: str = "basic",
    target: str = "local",
    previous_plan: ChangePlan | None = None,
    dry_run: bool = True,
    catalog: PackCatalog | None = None,
) -> Snapshot:
    """Recompute every derived value for *config* in one pass.

    Raises:
        ValueError: If *target* or *user_mode* is not recognized.
    """
    overrides = dict(capability_owner_overrides or {})
    repo_spec = compile_repo_spec(config, overrides, catalog=catalog)
    change_plan = materialize_change_plan(repo_spec)
    actions = publish_from_change_plan(
        config, repo_spec, change_plan, dry_run=dry_run, user_mode=user_mode, target=target
    )
    pending_diff = build_change_plan_diff(previous_plan, change_plan) if previous_plan is not None else None
    if pending_diff is not None:
        logger.debug("Plan diff: +%d -%d operations", len(pending_diff.added), len(pending_diff.removed))
    return Snapshot(
        repo_spec=repo_spec,
        change_plan=change_plan,
        recommendations=tuple(recommend_automation_candidates(config, repo_spec)),
        decisions=tuple(create_engine_decision_payloads(config, repo_spec, change_plan)),
        publisher_actions=tuple(actions),
        pending_diff=pending_diff,
        capability_owner_overrides=overrides,
    )
