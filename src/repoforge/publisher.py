"""Project a change plan into a target-specific publisher action vocabulary.

Three targets share one pipeline:

  - ``local``: write files and run tooling in place
  - ``pr``: stage everything on a deterministic branch per operation
  - ``create-repo``: seed a brand-new repository

Output order is load-bearing: all rendered-artifact actions first (renderer
order), then one action per change-plan operation (plan order).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from repoforge.changeplan import ChangeOperation, ChangePlan
from repoforge.compiler import RepoSpec
from repoforge.renderer import PublisherArtifact, render_publisher_artifacts
from repoforge.types import PlanConfig
from repoforge.types.api import PublisherActionDict
from repoforge.validation import validate_publish_target, validate_user_mode

logger = logging.getLogger(__name__)

PublishTarget = Literal["local", "pr", "create-repo"]
UserMode = Literal["basic", "power"]

BRANCH_NAMESPACE = "repoforge"

# operation type -> verb, per target; anything else uses _FALLBACK_VERBS
_VERB_TABLES: dict[str, dict[str, str]] = {
    "local": {
        "create_file": "write-file",
        "install": "install-dependencies",
        "quality": "run-quality-gates",
        "complete": "complete",
    },
    "pr": {
        "create_file": "stage-file",
        "install": "update-lockfiles",
        "quality": "verify-checks",
        "complete": "open",
    },
    "create-repo": {
        "create_file": "seed-file",
        "install": "install-dependencies",
        "quality": "configure-protection",
        "complete": "initialize",
    },
}
_FALLBACK_VERBS: dict[str, str] = {"local": "workflow", "pr": "prepare", "create-repo": "bootstrap"}

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class PublisherAction:
    id: str
    action: str
    target: str
    source_operation_id: str

    def to_dict(self) -> PublisherActionDict:
        return PublisherActionDict(
            id=self.id,
            action=self.action,
            target=self.target,
            source_operation_id=self.source_operation_id,
        )


def slugify(name: str) -> str:
    """Lower-case *name*, collapse non-alphanumeric runs to '-', trim dashes."""
    return _SLUG_PATTERN.sub("-", name.lower()).strip("-") or "project"


def branch_name(project_name: str, index: int) -> str:
    """Branch for the operation at 1-based *index*."""
    return f"{BRANCH_NAMESPACE}/{slugify(project_name)}/apply-{index}"


def operation_verb(target: str, operation_type: str) -> str:
    return _VERB_TABLES[target].get(operation_type, _FALLBACK_VERBS[target])


def _qualify_target(config: PlanConfig, repo_spec: RepoSpec, target: str, raw: str, index: int) -> str:
    if target == "pr":
        return f"{branch_name(repo_spec.name, index)}:{raw}"
    if target == "create-repo":
        return f"{config['visibility']}:{repo_spec.name}/{raw}"
    return raw


def _artifact_actions(
    config: PlanConfig, repo_spec: RepoSpec, artifacts: list[PublisherArtifact], change_plan: ChangePlan, target: str
) -> list[PublisherAction]:
    source = change_plan.operations[0].id if change_plan.operations else "init"
    return [
        PublisherAction(
            id=f"{target}-render-{index}",
            action=f"{target}.plan" if artifact.kind == "planned-action" else f"{target}.render",
            # Artifacts ride on the first operation's branch for pr targets
            target=_qualify_target(config, repo_spec, target, artifact.path, 1),
            source_operation_id=source,
        )
        for index, artifact in enumerate(artifacts, start=1)
    ]


def _operation_actions(
    config: PlanConfig, repo_spec: RepoSpec, operations: tuple[ChangeOperation, ...], target: str
) -> list[PublisherAction]:
    return [
        PublisherAction(
            id=f"{target}-op-{index}",
            action=f"{target}.{operation_verb(target, op.type)}",
            target=_qualify_target(config, repo_spec, target, op.target if op.target is not None else op.message, index),
            source_operation_id=op.id,
        )
        for index, op in enumerate(operations, start=1)
    ]


def publish_from_change_plan(
    config: PlanConfig,
    repo_spec: RepoSpec,
    change_plan: ChangePlan,
    *,
    dry_run: bool = True,
    user_mode: str = "basic",
    target: str = "local",
) -> list[PublisherAction]:
    """Map rendered artifacts and plan operations onto *target*'s action vocabulary.

    Raises:
        ValueError: If *target* or *user_mode* is not recognized.
    """
    target, error = validate_publish_target(target)
    if error:
        raise ValueError(error)
    user_mode, error = validate_user_mode(user_mode)
    if error:
        raise ValueError(error)

    artifacts = render_publisher_artifacts(
        config,
        repo_spec,
        dry_run=dry_run,
        enable_rust_experimental=user_mode == "power",
    )
    actions = _artifact_actions(config, repo_spec, artifacts, change_plan, target)
    actions.extend(_operation_actions(config, repo_spec, change_plan.operations, target))
    logger.debug("Mapped %d artifacts and %d operations to %s actions", len(artifacts), len(change_plan.operations), target)
    return actions
