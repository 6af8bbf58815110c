"""TypedDicts describing the user-editable configuration tree."""

from __future__ import annotations

from typing import Literal, TypedDict

Visibility = Literal["public", "private"]
License = Literal["MIT", "Apache-2.0", "GPL-3.0", "None"]
Architecture = Literal["Standard", "Hexagonal", "Clean", "Vertical Slice", "MVC", "Event-Driven"]
Language = Literal["TypeScript", "Go", "Rust", "Python", "Java", "Ruby"]
DependencyStrategy = Literal["semver", "pinned"]
RustMode = Literal["template", "projen-experimental"]
UpdateFrequency = Literal["daily", "weekly", "monthly"]
GovernancePosture = Literal["Relaxed", "Team Standard", "Strict"]
NoiseAlias = Literal["low", "medium", "high"]
NoiseBudget = int | float | NoiseAlias


class Basics(TypedDict):
    i18n: bool
    description: str


class GithubFeatures(TypedDict):
    issues: bool
    projects: bool
    wiki: bool
    discussions: bool


class PullRequestSettings(TypedDict):
    allow_merge_commit: bool
    allow_squash_merge: bool
    allow_rebase_merge: bool
    delete_branch_on_merge: bool


class BranchProtection(TypedDict):
    require_pr: bool
    required_reviewers: int
    require_status_checks: bool
    require_linear_history: bool
    require_code_owners: bool
    require_signed_commits: bool


class Branches(TypedDict):
    default: str
    protection: BranchProtection


class ActionsSettings(TypedDict):
    permissions: Literal["all", "local", "none"]
    allow_pr: bool
    runners: Literal["github", "self-hosted"]


class Webhook(TypedDict):
    id: str
    url: str
    content_type: Literal["json", "form"]
    events: list[str]
    active: bool


class GithubSettings(TypedDict):
    topics: list[str]
    features: GithubFeatures
    pr: PullRequestSettings
    branches: Branches
    actions: ActionsSettings
    copilot: bool
    webhooks: list[Webhook]
    environments: list[str]
    secrets: list[str]


class StackSettings(TypedDict, total=False):
    language: Language
    language_version: str
    framework: str
    package_manager: str
    dependency_strategy: DependencyStrategy
    build_tool: str
    builder: str
    rust_mode: RustMode


class QualitySettings(TypedDict):
    linter: Literal["ESLint", "Biome", "None"]
    formatter: Literal["Prettier", "Biome", "None"]
    quality_platform: str
    testing: bool
    test_framework: str
    integration_tests: bool
    e2e_tests: bool
    e2e_framework: str
    coverage_target: int


class CiSettings(TypedDict):
    run_tests: bool
    build_artifacts: bool
    automatic_release: bool
    deploy_to_cloud: bool


class SecuritySettings(TypedDict):
    code_scanning: bool
    dependency_updates: bool
    dependency_update_frequency: UpdateFrequency
    secret_scanning: bool
    manage_env: bool


class DocsSettings(TypedDict):
    readme: bool
    contributing: bool
    adr: bool
    codeowners: bool
    issue_templates: bool
    pull_request_template: bool
    framework: Literal["none", "docusaurus", "vitepress", "mkdocs"]
    style_guide: Literal["none", "diataxis", "microsoft", "google"]
    deploy_to_pages: bool


class PlanConfig(TypedDict):
    """Full configuration tree edited by the wizard."""

    project_name: str
    visibility: Visibility
    license: License
    basics: Basics
    structure: Literal["Monorepo", "Polyrepo"]
    type: str
    architecture: Architecture
    github: GithubSettings
    stack: StackSettings
    quality: QualitySettings
    ci: CiSettings
    security: SecuritySettings
    docs: DocsSettings
    governance_posture: GovernancePosture
    noise_budget: NoiseBudget
