# src/repoforge/packs_data.py
"""Built-in pack definitions.

Logic lives in packs.py and resolver.py; this file holds the catalog data and
the small effect functions each pack contributes.

Capabilities claimed by the built-in packs:
  - runtime:framework, build:scripts (single owner)
  - quality:linter, quality:formatter, quality:test-runner (single owner, paired conflicts)
  - release:ownership (single owner, semantic vs. GitHub release)
  - docs:content (multi owner)
"""

from __future__ import annotations

from repoforge.packs import PackCapability, PackCatalog, PackDefinition, PackEffects
from repoforge.types import PlanConfig


def version_for(config: PlanConfig) -> str:
    """Version specifier honoring the dependency strategy."""
    return "1.0.0" if config["stack"].get("dependency_strategy") == "pinned" else "^1.0.0"


# ---------------------------------------------------------------------------
# Effect functions
# ---------------------------------------------------------------------------


def _framework_effects(config: PlanConfig) -> PackEffects:
    framework = config["stack"].get("framework", "")
    return PackEffects(dependencies={framework.lower(): version_for(config)} if framework else {})


def _vite_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(
        scripts={"dev": "vite", "build": "vite build"},
        preset_patch={"stack": {"builder": "Vite"}},
    )


def _eslint_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(
        scripts={"lint": "eslint ."},
        dev_dependencies={"eslint": version_for(config)},
        preset_patch={"quality": {"linter": "ESLint"}},
    )


def _biome_lint_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(preset_patch={"quality": {"linter": "Biome"}})


def _prettier_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(
        scripts={"format": "prettier --write ."},
        dev_dependencies={"prettier": version_for(config)},
        preset_patch={"quality": {"formatter": "Prettier"}},
    )


def _biome_format_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(preset_patch={"quality": {"formatter": "Biome"}})


def _vitest_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(scripts={"test": "vitest"}, dev_dependencies={"vitest": version_for(config)})


def _jest_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(scripts={"test": "jest"}, dev_dependencies={"jest": version_for(config)})


def _semantic_release_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(
        scripts={"release": "semantic-release"},
        dev_dependencies={"semantic-release": version_for(config)},
        preset_patch={"ci": {"automatic_release": True}},
    )


def _gh_release_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(
        scripts={"release": "gh release create"},
        preset_patch={"ci": {"automatic_release": True}},
    )


def _docs_templates_effects(config: PlanConfig) -> PackEffects:
    return PackEffects(preset_patch={"docs": {"readme": True}})


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

BUILT_IN_PACKS: tuple[PackDefinition, ...] = (
    PackDefinition(
        id="pack.runtime.framework",
        title="Runtime framework dependency",
        requirements=("stack:framework:present",),
        capabilities=(PackCapability("runtime:framework"),),
        priority=100,
        resolve_effects=_framework_effects,
    ),
    PackDefinition(
        id="pack.build.vite",
        title="Vite build scripts",
        requirements=("builder:vite",),
        capabilities=(PackCapability("build:scripts"),),
        priority=80,
        resolve_effects=_vite_effects,
    ),
    PackDefinition(
        id="pack.quality.lint-eslint",
        title="ESLint quality gate",
        requirements=("quality:linter:eslint",),
        conflicts=("pack.quality.lint-biome",),
        capabilities=(PackCapability("quality:linter"),),
        priority=90,
        resolve_effects=_eslint_effects,
    ),
    PackDefinition(
        id="pack.quality.lint-biome",
        title="Biome quality gate",
        requirements=("quality:linter:biome",),
        conflicts=("pack.quality.lint-eslint",),
        capabilities=(PackCapability("quality:linter"),),
        priority=85,
        resolve_effects=_biome_lint_effects,
    ),
    PackDefinition(
        id="pack.quality.format-prettier",
        title="Prettier formatter",
        requirements=("quality:formatter:prettier",),
        conflicts=("pack.quality.format-biome",),
        capabilities=(PackCapability("quality:formatter"),),
        priority=80,
        resolve_effects=_prettier_effects,
    ),
    PackDefinition(
        id="pack.quality.format-biome",
        title="Biome formatter",
        requirements=("quality:formatter:biome",),
        conflicts=("pack.quality.format-prettier",),
        capabilities=(PackCapability("quality:formatter"),),
        priority=75,
        resolve_effects=_biome_format_effects,
    ),
    PackDefinition(
        id="pack.quality.test-vitest",
        title="Vitest unit testing",
        requirements=("quality:testing:on", "quality:test:vitest"),
        conflicts=("pack.quality.test-jest",),
        capabilities=(PackCapability("quality:test-runner"),),
        priority=82,
        resolve_effects=_vitest_effects,
    ),
    PackDefinition(
        id="pack.quality.test-jest",
        title="Jest unit testing",
        requirements=("quality:testing:on", "quality:test:jest"),
        conflicts=("pack.quality.test-vitest",),
        capabilities=(PackCapability("quality:test-runner"),),
        priority=80,
        resolve_effects=_jest_effects,
    ),
    PackDefinition(
        id="pack.release.semantic",
        title="Semantic release owner",
        requirements=("ci:auto-release:on",),
        conflicts=("pack.release.gh-release",),
        capabilities=(PackCapability("release:ownership"),),
        priority=75,
        resolve_effects=_semantic_release_effects,
    ),
    PackDefinition(
        id="pack.release.gh-release",
        title="GitHub release owner",
        requirements=("ci:auto-release:on",),
        conflicts=("pack.release.semantic",),
        capabilities=(PackCapability("release:ownership"),),
        priority=70,
        resolve_effects=_gh_release_effects,
    ),
    PackDefinition(
        id="pack.docs.templates",
        title="Docs template scaffolding",
        requirements=("docs:readme:on",),
        capabilities=(PackCapability("docs:content", multi_owner=True),),
        priority=40,
        resolve_effects=_docs_templates_effects,
    ),
)

BUILT_IN_CATALOG = PackCatalog(BUILT_IN_PACKS)
