"""Materialize a RepoSpec into the ordered bootstrap change plan.

Operation ids come from a stable scheme (fixed names plus ``create-<n>``),
never from content, so reordering the manifest changes messages but not ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from repoforge.compiler import RepoSpec
from repoforge.types.api import ChangeOperationDict, ChangePlanDict

OperationType = Literal["init", "check", "create_file", "install", "quality", "complete"]

CHANGE_PLAN_VERSION = 1
COMPLETE_MESSAGE = "Bootstrap complete. Ready to code."


@dataclass(frozen=True)
class ChangeOperation:
    id: str
    type: OperationType
    message: str
    target: str | None = None

    def to_dict(self) -> ChangeOperationDict:
        result = ChangeOperationDict(id=self.id, type=self.type, message=self.message)
        if self.target is not None:
            result["target"] = self.target
        return result


@dataclass(frozen=True)
class ChangePlan:
    version: int
    operations: tuple[ChangeOperation, ...]

    def to_dict(self) -> ChangePlanDict:
        return ChangePlanDict(version=self.version, operations=[op.to_dict() for op in self.operations])

    def get(self, operation_id: str) -> ChangeOperation | None:
        return next((op for op in self.operations if op.id == operation_id), None)


def _pack_summary(repo_spec: RepoSpec) -> str:
    selected = repo_spec.packs.selected_packs if repo_spec.packs is not None else ()
    return ", ".join(selected) if selected else "none"


def materialize_change_plan(repo_spec: RepoSpec) -> ChangePlan:
    operations = [
        ChangeOperation(id="init", type="init", message="Initializing git repository..."),
        ChangeOperation(id="check", type="check", message="Checking system requirements..."),
        ChangeOperation(id="check-compat", type="check", message="Validating dependency compatibility matrix..."),
    ]
    if repo_spec.packs is not None:
        operations.append(
            ChangeOperation(
                id="resolve-packs",
                type="check",
                message=f"Resolved repository packs: {_pack_summary(repo_spec)}.",
            )
        )
    operations.extend(
        ChangeOperation(id=f"create-{index}", type="create_file", message=f"Created {path}", target=path)
        for index, path in enumerate(repo_spec.files, start=1)
    )
    operations.extend(
        [
            ChangeOperation(
                id="install",
                type="install",
                message=f"Installing dependencies via {repo_spec.package_manager}...",
            ),
            ChangeOperation(id="quality", type="quality", message="Running initial lint & format..."),
            ChangeOperation(id="complete", type="complete", message=COMPLETE_MESSAGE),
        ]
    )
    return ChangePlan(version=CHANGE_PLAN_VERSION, operations=tuple(operations))
