"""Compile a configuration into a deterministic repository specification.

``compile_repo_spec`` normalizes the configuration, derives automation from the
noise budget, governance from the posture, assembles the sorted file manifest,
and resolves packs. Every call with an equal configuration returns an equal
RepoSpec.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from repoforge.automation import AutomationProfile, resolve_automation_from_noise, resolve_noise_level
from repoforge.governance import GovernanceProfile, compile_governance
from repoforge.normalize import normalize_config
from repoforge.packs import PackCatalog
from repoforge.resolver import PackResolution, resolve_packs
from repoforge.types import PlanConfig
from repoforge.types.api import RepoSpecDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# File manifest tables
# ---------------------------------------------------------------------------

_PACKAGE_MANIFESTS: dict[str, str] = {
    "TypeScript": "package.json",
    "Python": "pyproject.toml",
    "Rust": "Cargo.toml",
    "Go": "go.mod",
    "Java": "pom.xml",
    "Ruby": "Gemfile",
}

_SOURCE_EXTENSIONS: dict[str, str] = {
    "TypeScript": "ts",
    "Python": "py",
    "Rust": "rs",
    "Go": "go",
    "Java": "java",
    "Ruby": "rb",
}

# Extension-less source stems per architecture; "Standard" and unknown values
# fall back to the flat layout.
_ARCHITECTURE_SOURCES: dict[str, tuple[str, ...]] = {
    "Hexagonal": ("src/adapters/http/handler", "src/domain/entity", "src/ports/repository"),
    "Clean": ("src/application/use_case", "src/domain/entity", "src/infrastructure/repository"),
    "Vertical Slice": ("src/features/example/handler", "src/features/example/model"),
    "MVC": ("src/controllers/home_controller", "src/models/model", "src/views/home"),
    "Event-Driven": ("src/events/bus", "src/events/handlers", "src/events/publisher"),
}
_FLAT_SOURCES: tuple[str, ...] = ("src/index", "src/utils")


def package_manifest_for(config: PlanConfig) -> str:
    """Language-specific package manifest path (Java honors a Gradle build tool)."""
    stack = config["stack"]
    language = stack.get("language", "TypeScript")
    if language == "Java" and stack.get("build_tool", "").lower() == "gradle":
        return "build.gradle"
    return _PACKAGE_MANIFESTS.get(language, "package.json")


def _architecture_sources(config: PlanConfig) -> list[str]:
    extension = _SOURCE_EXTENSIONS.get(config["stack"].get("language", "TypeScript"), "ts")
    stems = _ARCHITECTURE_SOURCES.get(config["architecture"], _FLAT_SOURCES)
    return [f"{stem}.{extension}" for stem in stems]


def resolve_files(config: PlanConfig) -> tuple[str, ...]:
    """Assemble the sorted file manifest for a normalized configuration."""
    files = [".github/settings.yml", ".gitignore", package_manifest_for(config)]

    docs = config["docs"]
    if docs["readme"]:
        files.append("README.md")
    if docs["contributing"]:
        files.append("CONTRIBUTING.md")
    if docs.get("codeowners"):
        files.append(".github/CODEOWNERS")
    if docs.get("issue_templates"):
        files.extend([".github/ISSUE_TEMPLATE/bug_report.md", ".github/ISSUE_TEMPLATE/feature_request.md"])
    if docs.get("pull_request_template"):
        files.append(".github/pull_request_template.md")
    if docs.get("adr"):
        files.append("docs/adr/0001-record-architecture-decisions.md")

    if config["stack"].get("language") == "TypeScript":
        files.append("tsconfig.json")
    if config["quality"]["linter"] == "ESLint":
        files.append(".eslintrc.json")

    ci = config["ci"]
    if ci["run_tests"] or ci["build_artifacts"]:
        files.append(".github/workflows/ci.yml")

    security = config["security"]
    if security["manage_env"]:
        files.append(".env.example")
    if security.get("dependency_updates"):
        files.append(".github/dependabot.yml")

    if config.get("license", "None") != "None":
        files.append("LICENSE")

    files.extend(_architecture_sources(config))
    return tuple(sorted(set(files)))


# ---------------------------------------------------------------------------
# RepoSpec
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RepoSpec:
    """Canonical, serializable description of the target repository."""

    name: str
    package_manager: str
    architecture: str
    automation: AutomationProfile
    governance: GovernanceProfile
    files: tuple[str, ...]
    packs: PackResolution | None = None

    def to_dict(self) -> RepoSpecDict:
        return RepoSpecDict(
            name=self.name,
            package_manager=self.package_manager,
            architecture=self.architecture,
            automation=self.automation.to_dict(),
            governance=self.governance.to_dict(),
            files=list(self.files),
            packs=self.packs.to_dict() if self.packs is not None else None,
        )


def compile_automation(config: PlanConfig) -> AutomationProfile:
    return resolve_automation_from_noise(resolve_noise_level(config.get("noise_budget")))


def compile_repo_spec(
    config: PlanConfig,
    capability_owner_overrides: Mapping[str, str] | None = None,
    catalog: PackCatalog | None = None,
) -> RepoSpec:
    """Compile *config* into a RepoSpec. The input configuration is never mutated."""
    normalized = normalize_config(config)
    automation = compile_automation(normalized)
    governance = compile_governance(normalized.get("governance_posture"), automation)
    files = resolve_files(normalized)
    packs = resolve_packs(normalized, capability_owner_overrides, catalog=catalog)
    logger.debug(
        "Compiled repo spec %s: %d files, %d packs, ruleset=%s",
        normalized["project_name"],
        len(files),
        len(packs.selected_packs),
        governance.ruleset,
    )
    return RepoSpec(
        name=normalized["project_name"],
        package_manager=normalized["stack"].get("package_manager", ""),
        architecture=normalized["architecture"],
        automation=automation,
        governance=governance,
        files=files,
        packs=packs,
    )
