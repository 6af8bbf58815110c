"""TypedDicts for the ``to_dict()`` returns of compiled artifacts."""

from __future__ import annotations

from typing import TypedDict


class PackEffectsDict(TypedDict):
    scripts: dict[str, str]
    dependencies: dict[str, str]
    dev_dependencies: dict[str, str]


class ConflictCandidateDict(TypedDict):
    pack_id: str
    priority: int
    effects: PackEffectsDict


class CapabilityConflictDict(TypedDict):
    capability: str
    owner: ConflictCandidateDict
    challenger: ConflictCandidateDict
    downstream_impact: str


class PackConflictDict(TypedDict):
    winner_pack_id: str
    dropped_pack_id: str
    reason: str


class PackResolutionDict(TypedDict):
    scripts: dict[str, str]
    dependencies: dict[str, str]
    dev_dependencies: dict[str, str]
    selected_packs: list[str]
    capability_owners: dict[str, list[str]]
    capability_conflicts: list[CapabilityConflictDict]
    pack_conflicts: list[PackConflictDict]


class DependabotDict(TypedDict):
    schedule: str
    grouping: str
    estimated_monthly_prs: int


class CiMatrixDict(TypedDict):
    matrix_breadth: str
    dimensions: list[str]


class AutomationDict(TypedDict):
    dependabot: DependabotDict
    ci: CiMatrixDict


class RulesetProfileDict(TypedDict):
    id: str
    label: str
    description: str


class RequiredChecksDict(TypedDict):
    require_status_checks: bool
    checks: list[str]


class ReviewConstraintsDict(TypedDict):
    require_pr: bool
    required_reviewers: int
    require_code_owners: bool
    require_linear_history: bool
    require_signed_commits: bool


class ArtifactModelDict(TypedDict):
    ruleset_profile: RulesetProfileDict
    required_checks: RequiredChecksDict
    review_constraints: ReviewConstraintsDict


class BranchPolicyDict(ReviewConstraintsDict):
    require_status_checks: bool


class SecurityDefaultsDict(TypedDict):
    code_scanning: bool
    secret_scanning: bool
    dependency_updates: bool
    dependency_update_frequency: str


class GovernanceDict(TypedDict):
    posture: str
    ruleset: str
    branch: BranchPolicyDict
    status_checks: list[str]
    artifact_model: ArtifactModelDict
    security_defaults: SecurityDefaultsDict


class RepoSpecDict(TypedDict):
    name: str
    package_manager: str
    architecture: str
    automation: AutomationDict
    governance: GovernanceDict
    files: list[str]
    packs: PackResolutionDict | None


class _ChangeOperationRequired(TypedDict):
    id: str
    type: str
    message: str


class ChangeOperationDict(_ChangeOperationRequired, total=False):
    """Operation entry; ``target`` only present for file-bound operations."""

    target: str


class ChangePlanDict(TypedDict):
    version: int
    operations: list[ChangeOperationDict]


class _PublisherArtifactRequired(TypedDict):
    path: str
    kind: str
    description: str


class PublisherArtifactDict(_PublisherArtifactRequired, total=False):
    content: str


class PublisherActionDict(TypedDict):
    id: str
    action: str
    target: str
    source_operation_id: str


class RecommendationCandidateDict(TypedDict):
    id: str
    label: str
    score: float
    fit: float
    maintenance_cost: float
    complexity_risk: float
    bot_prs_per_month: int
    ci_minutes_proxy: int
    security_posture_note: str
    dependabot: DependabotDict
    ci: CiMatrixDict


class ChangePlanDiffDict(TypedDict):
    added: list[ChangeOperationDict]
    removed: list[ChangeOperationDict]


class _SimulationLogEntryRequired(TypedDict):
    id: str
    type: str
    message: str


class SimulationLogEntryDict(_SimulationLogEntryRequired, total=False):
    file_name: str


class _DecisionPayloadRequired(TypedDict):
    key: str
    stage: str
    title: str
    recommendation: str
    why: str
    trade_offs: list[str]
    alternatives: list[str]
    confidence: str


class DecisionPayloadDict(_DecisionPayloadRequired, total=False):
    ranked_candidates: list[RecommendationCandidateDict]


class SnapshotDict(TypedDict):
    repo_spec: RepoSpecDict
    change_plan: ChangePlanDict
    pending_diff: ChangePlanDiffDict | None
    recommendations: list[RecommendationCandidateDict]
    decisions: list[DecisionPayloadDict]
    publisher_actions: list[PublisherActionDict]
    capability_owner_overrides: dict[str, str]
