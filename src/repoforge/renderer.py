"""Illustrative generated-file artifacts plus governance hints.

Branches on the stack language and the Rust experimental gate only. The gate
is an explicit argument; callers derive it from the user mode.

``dry_run`` flips descriptions between "Would X" and "X" and never changes an
artifact's ``kind``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Literal

from repoforge.compiler import RepoSpec
from repoforge.types import PlanConfig
from repoforge.types.api import PublisherArtifactDict

ArtifactKind = Literal["file", "artifact", "planned-action"]

GOVERNANCE_HINTS_PATH = ".github/governance-hints.json"
RULESET_PREVIEW_PATH = ".github/rulesets/preview.json"
RUST_TEMPLATE_PATH = "templates/rust/template-manifest.md"
RUST_EXPERIMENTAL_SUMMARY_PATH = ".projen/rust-experimental-summary.json"

MAX_GENERATOR_SYNTH = 6
MAX_RUST_EXPERIMENTAL_SYNTH = 8
MAX_GENERIC_ARTIFACTS = 4


@dataclass(frozen=True)
class PublisherArtifact:
    path: str
    kind: ArtifactKind
    description: str
    content: str | None = None

    def to_dict(self) -> PublisherArtifactDict:
        result = PublisherArtifactDict(path=self.path, kind=self.kind, description=self.description)
        if self.content is not None:
            result["content"] = self.content
        return result


def _describe(dry_run: bool, would: str, did: str) -> str:
    return would if dry_run else did


# ---------------------------------------------------------------------------
# Governance artifacts (always appended)
# ---------------------------------------------------------------------------


def _governance_artifacts(repo_spec: RepoSpec, dry_run: bool) -> list[PublisherArtifact]:
    governance = repo_spec.governance
    model = governance.artifact_model.to_dict()
    hints = {
        "posture": governance.posture,
        "ruleset_profile": model["ruleset_profile"],
        "required_checks": model["required_checks"],
        "review_constraints": model["review_constraints"],
        "security_defaults": governance.security_defaults.to_dict(),
    }
    preview = {
        "mode": "preview",
        "ruleset": model["ruleset_profile"],
        "required_checks": model["required_checks"],
        "review_constraints": model["review_constraints"],
    }
    return [
        PublisherArtifact(
            path=GOVERNANCE_HINTS_PATH,
            kind="artifact",
            content=json.dumps(hints, indent=2),
            description=_describe(
                dry_run, "Would publish governance hints artifact", "Published governance hints artifact"
            ),
        ),
        PublisherArtifact(
            path=RULESET_PREVIEW_PATH,
            kind="planned-action",
            content=json.dumps(preview, indent=2),
            description="Governance ruleset preview (non-destructive)",
        ),
    ]


# ---------------------------------------------------------------------------
# Language branches
# ---------------------------------------------------------------------------


def _generator_artifacts(config: PlanConfig, repo_spec: RepoSpec, dry_run: bool) -> list[PublisherArtifact]:
    name = repo_spec.name
    if config["stack"].get("language") == "Python":
        path = ".projenrc.py"
        content = f"from projen import Project\n\nproject = Project(name='{name}')\nproject.synth()\n"
    else:
        path = ".projenrc.ts"
        content = (
            "import { javascript } from 'projen';\n\n"
            "const project = new javascript.NodeProject({\n"
            f"  name: '{name}',\n"
            "});\n"
            "project.synth();\n"
        )
    artifacts = [
        PublisherArtifact(
            path=path,
            kind="file",
            content=content,
            description=_describe(dry_run, f"Would write {path}", f"Wrote {path}"),
        )
    ]
    artifacts.extend(
        PublisherArtifact(
            path=file_path,
            kind="artifact",
            description=_describe(dry_run, f"Would synthesize {file_path}", f"Synthesized {file_path}"),
        )
        for file_path in repo_spec.files[:MAX_GENERATOR_SYNTH]
    )
    return artifacts


def _rust_template_artifacts(repo_spec: RepoSpec, dry_run: bool) -> list[PublisherArtifact]:
    lines = ["# Rust Template Renderer", "", *(f"- {path}" for path in repo_spec.files)]
    return [
        PublisherArtifact(
            path=RUST_TEMPLATE_PATH,
            kind="file",
            content="\n".join(lines),
            description=_describe(dry_run, "Would render Rust template output", "Rendered Rust template output"),
        )
    ]


def _rust_experimental_artifacts(repo_spec: RepoSpec, dry_run: bool) -> list[PublisherArtifact]:
    summary = {
        "mode": "projen-experimental",
        "project": repo_spec.name,
        "synth_targets": list(repo_spec.files[:MAX_RUST_EXPERIMENTAL_SYNTH]),
    }
    return [
        PublisherArtifact(
            path=".projenrc.ts",
            kind="file",
            content="// Experimental projen-rust entrypoint\n",
            description=_describe(dry_run, "Would invoke projen-rust synth", "Invoked projen-rust synth"),
        ),
        PublisherArtifact(
            path=RUST_EXPERIMENTAL_SUMMARY_PATH,
            kind="artifact",
            content=json.dumps(summary, indent=2),
            description=_describe(
                dry_run, "Would publish projen-rust synth summary", "Published projen-rust synth summary"
            ),
        ),
    ]


def _generic_artifacts(repo_spec: RepoSpec, dry_run: bool) -> list[PublisherArtifact]:
    return [
        PublisherArtifact(
            path=path,
            kind="artifact",
            description=_describe(dry_run, f"Would publish {path}", f"Published {path}"),
        )
        for path in repo_spec.files[:MAX_GENERIC_ARTIFACTS]
    ]


def render_publisher_artifacts(
    config: PlanConfig,
    repo_spec: RepoSpec,
    *,
    dry_run: bool = True,
    enable_rust_experimental: bool = False,
) -> list[PublisherArtifact]:
    """Render language artifacts followed by the two governance artifacts."""
    stack = config["stack"]
    language = stack.get("language")
    if language in ("TypeScript", "Python"):
        artifacts = _generator_artifacts(config, repo_spec, dry_run)
    elif language == "Rust":
        if stack.get("rust_mode") == "projen-experimental" and enable_rust_experimental:
            artifacts = _rust_experimental_artifacts(repo_spec, dry_run)
        else:
            artifacts = _rust_template_artifacts(repo_spec, dry_run)
    else:
        artifacts = _generic_artifacts(repo_spec, dry_run)
    return artifacts + _governance_artifacts(repo_spec, dry_run)
