"""Governance posture tables: branch protection, required checks, security defaults."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from repoforge.automation import AutomationProfile
from repoforge.config import DEFAULT_POSTURE
from repoforge.types.api import (
    ArtifactModelDict,
    BranchPolicyDict,
    GovernanceDict,
    RequiredChecksDict,
    ReviewConstraintsDict,
    RulesetProfileDict,
    SecurityDefaultsDict,
)

logger = logging.getLogger(__name__)

RulesetId = Literal["lenient", "standard", "strict"]

# ---------------------------------------------------------------------------
# Artifact model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RulesetProfile:
    id: RulesetId
    label: str
    description: str

    def to_dict(self) -> RulesetProfileDict:
        return RulesetProfileDict(id=self.id, label=self.label, description=self.description)


@dataclass(frozen=True)
class RequiredChecks:
    require_status_checks: bool
    checks: tuple[str, ...]

    def to_dict(self) -> RequiredChecksDict:
        return RequiredChecksDict(require_status_checks=self.require_status_checks, checks=list(self.checks))


@dataclass(frozen=True)
class ReviewConstraints:
    require_pr: bool
    required_reviewers: int
    require_code_owners: bool
    require_linear_history: bool
    require_signed_commits: bool

    def to_dict(self) -> ReviewConstraintsDict:
        return ReviewConstraintsDict(
            require_pr=self.require_pr,
            required_reviewers=self.required_reviewers,
            require_code_owners=self.require_code_owners,
            require_linear_history=self.require_linear_history,
            require_signed_commits=self.require_signed_commits,
        )


@dataclass(frozen=True)
class GovernanceArtifactModel:
    """Ruleset profile, required checks and review constraints, shared with the renderer."""

    ruleset_profile: RulesetProfile
    required_checks: RequiredChecks
    review_constraints: ReviewConstraints

    def to_dict(self) -> ArtifactModelDict:
        return ArtifactModelDict(
            ruleset_profile=self.ruleset_profile.to_dict(),
            required_checks=self.required_checks.to_dict(),
            review_constraints=self.review_constraints.to_dict(),
        )


_ARTIFACT_MODELS: dict[str, GovernanceArtifactModel] = {
    "Relaxed": GovernanceArtifactModel(
        ruleset_profile=RulesetProfile(
            id="lenient",
            label="Relaxed",
            description="Minimal branch protections for fast iteration and optional policy checks.",
        ),
        required_checks=RequiredChecks(require_status_checks=False, checks=()),
        review_constraints=ReviewConstraints(
            require_pr=False,
            required_reviewers=0,
            require_code_owners=False,
            require_linear_history=False,
            require_signed_commits=False,
        ),
    ),
    "Team Standard": GovernanceArtifactModel(
        ruleset_profile=RulesetProfile(
            id="standard",
            label="Team Standard",
            description="Balanced governance with required PRs and core CI checks for team delivery.",
        ),
        required_checks=RequiredChecks(require_status_checks=True, checks=("lint", "test", "build")),
        review_constraints=ReviewConstraints(
            require_pr=True,
            required_reviewers=1,
            require_code_owners=False,
            require_linear_history=True,
            require_signed_commits=False,
        ),
    ),
    "Strict": GovernanceArtifactModel(
        ruleset_profile=RulesetProfile(
            id="strict",
            label="Strict",
            description="High-assurance governance with mandatory reviews, checks, and signed history.",
        ),
        required_checks=RequiredChecks(require_status_checks=True, checks=("lint", "test", "build", "codeql")),
        review_constraints=ReviewConstraints(
            require_pr=True,
            required_reviewers=2,
            require_code_owners=True,
            require_linear_history=True,
            require_signed_commits=True,
        ),
    ),
}


def resolve_posture(posture: str | None) -> str:
    """Return *posture* if known, otherwise the Team Standard fallback."""
    if posture is not None and posture in _ARTIFACT_MODELS:
        return posture
    logger.debug("Unknown governance posture %r, using %s", posture, DEFAULT_POSTURE)
    return DEFAULT_POSTURE


def resolve_governance_artifact_model(posture: str | None) -> GovernanceArtifactModel:
    return _ARTIFACT_MODELS[resolve_posture(posture)]


# ---------------------------------------------------------------------------
# Governance profile
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SecurityDefaults:
    code_scanning: bool
    secret_scanning: bool
    dependency_updates: bool
    dependency_update_frequency: str

    def to_dict(self) -> SecurityDefaultsDict:
        return SecurityDefaultsDict(
            code_scanning=self.code_scanning,
            secret_scanning=self.secret_scanning,
            dependency_updates=self.dependency_updates,
            dependency_update_frequency=self.dependency_update_frequency,
        )


@dataclass(frozen=True)
class BranchPolicy:
    """Review constraints flattened together with the status-check flag."""

    require_pr: bool
    required_reviewers: int
    require_code_owners: bool
    require_linear_history: bool
    require_signed_commits: bool
    require_status_checks: bool

    def to_dict(self) -> BranchPolicyDict:
        return BranchPolicyDict(
            require_pr=self.require_pr,
            required_reviewers=self.required_reviewers,
            require_code_owners=self.require_code_owners,
            require_linear_history=self.require_linear_history,
            require_signed_commits=self.require_signed_commits,
            require_status_checks=self.require_status_checks,
        )


@dataclass(frozen=True)
class GovernanceProfile:
    posture: str
    ruleset: RulesetId
    branch: BranchPolicy
    status_checks: tuple[str, ...]
    artifact_model: GovernanceArtifactModel
    security_defaults: SecurityDefaults

    def to_dict(self) -> GovernanceDict:
        return GovernanceDict(
            posture=self.posture,
            ruleset=self.ruleset,
            branch=self.branch.to_dict(),
            status_checks=list(self.status_checks),
            artifact_model=self.artifact_model.to_dict(),
            security_defaults=self.security_defaults.to_dict(),
        )


def compile_governance(posture: str | None, automation: AutomationProfile) -> GovernanceProfile:
    """Build the governance profile for *posture*; security cadence follows *automation*."""
    resolved = resolve_posture(posture)
    model = _ARTIFACT_MODELS[resolved]
    review = model.review_constraints
    scanning = model.ruleset_profile.id != "lenient"
    return GovernanceProfile(
        posture=resolved,
        ruleset=model.ruleset_profile.id,
        branch=BranchPolicy(
            require_pr=review.require_pr,
            required_reviewers=review.required_reviewers,
            require_code_owners=review.require_code_owners,
            require_linear_history=review.require_linear_history,
            require_signed_commits=review.require_signed_commits,
            require_status_checks=model.required_checks.require_status_checks,
        ),
        status_checks=model.required_checks.checks,
        artifact_model=model,
        security_defaults=SecurityDefaults(
            code_scanning=scanning,
            secret_scanning=scanning,
            dependency_updates=True,
            dependency_update_frequency=automation.dependabot.schedule,
        ),
    )
