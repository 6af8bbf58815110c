"""Preset bundles: named configuration patches with their expected packs.

Bundles are pure data. ``resolve_preset_bundles_to_patch`` merges the
requested bundles in catalog order (not request order), so the same set of
ids always yields the same patch.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from repoforge.config import merge_patches
from repoforge.types import ConfigPatch


@dataclass(frozen=True)
class PresetBundle:
    id: str
    name: str
    description: str
    packs: tuple[str, ...] = ()
    config: ConfigPatch = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "packs": list(self.packs),
            "config": self.config,
        }


PRESET_BUNDLES: tuple[PresetBundle, ...] = (
    PresetBundle(
        id="bundle.governance.solo-quickstart",
        name="Solo Quickstart Governance",
        description="Lean defaults for solo and hackathon projects.",
        packs=("pack.quality.lint-eslint",),
        config={
            "visibility": "public",
            "quality": {"testing": False, "coverage_target": 0},
            "ci": {"run_tests": True, "build_artifacts": True, "automatic_release": False, "deploy_to_cloud": True},
            "security": {
                "code_scanning": False,
                "secret_scanning": True,
                "dependency_updates": True,
                "dependency_update_frequency": "monthly",
            },
        },
    ),
    PresetBundle(
        id="bundle.governance.team-standard",
        name="Team Standard Governance",
        description="Balanced quality and security posture for product teams.",
        packs=("pack.quality.lint-eslint", "pack.quality.format-prettier", "pack.quality.test-vitest"),
        config={
            "visibility": "private",
            "quality": {"testing": True, "coverage_target": 80},
            "ci": {"run_tests": True, "build_artifacts": True, "automatic_release": True, "deploy_to_cloud": False},
            "security": {
                "code_scanning": True,
                "secret_scanning": True,
                "dependency_updates": True,
                "dependency_update_frequency": "weekly",
            },
        },
    ),
    PresetBundle(
        id="bundle.governance.enterprise",
        name="Hardened Enterprise Governance",
        description="Strict controls with high-assurance defaults.",
        packs=(
            "pack.quality.lint-eslint",
            "pack.quality.format-prettier",
            "pack.quality.test-vitest",
            "pack.release.semantic",
        ),
        config={
            "visibility": "private",
            "structure": "Monorepo",
            "quality": {"testing": True, "coverage_target": 95},
            "ci": {"run_tests": True, "build_artifacts": True, "automatic_release": True, "deploy_to_cloud": False},
            "security": {
                "code_scanning": True,
                "secret_scanning": True,
                "dependency_updates": True,
                "dependency_update_frequency": "daily",
            },
            "docs": {"readme": True, "contributing": True, "adr": True, "codeowners": True},
        },
    ),
    PresetBundle(
        id="bundle.stack.next-full",
        name="Full-Stack Next.js",
        description="Opinionated Next.js stack with testing and deploy-ready defaults.",
        packs=(
            "pack.runtime.framework",
            "pack.quality.lint-eslint",
            "pack.quality.format-prettier",
            "pack.quality.test-vitest",
        ),
        config={
            "project_name": "next-app-starter",
            "stack": {"language": "TypeScript", "framework": "Next.js", "package_manager": "pnpm", "builder": "None"},
            "quality": {
                "testing": True,
                "test_framework": "Vitest",
                "e2e_tests": True,
                "e2e_framework": "Playwright",
                "coverage_target": 80,
            },
            "ci": {"run_tests": True, "build_artifacts": True, "deploy_to_cloud": True},
            "basics": {"i18n": True},
        },
    ),
    PresetBundle(
        id="bundle.stack.go-api",
        name="High-Performance API Service",
        description="Go API service with cloud deploy defaults.",
        packs=("pack.runtime.framework",),
        config={
            "project_name": "go-service-api",
            "type": "Service",
            "architecture": "Clean",
            "stack": {"language": "Go", "framework": "Gin", "package_manager": "npm", "builder": "Go Build"},
            "quality": {"linter": "None", "testing": True, "test_framework": "Go Test", "coverage_target": 70},
            "ci": {"run_tests": True, "build_artifacts": True, "deploy_to_cloud": True},
            "security": {"code_scanning": True},
        },
    ),
    PresetBundle(
        id="bundle.stack.docs-site",
        name="VitePress Documentation",
        description="Docs-first setup with GitHub Pages deployment.",
        packs=("pack.runtime.framework", "pack.build.vite", "pack.docs.templates"),
        config={
            "project_name": "docs-portal",
            "stack": {"language": "TypeScript", "framework": "VitePress", "package_manager": "yarn", "builder": "Vite"},
            "docs": {"framework": "vitepress", "deploy_to_pages": True, "readme": True},
            "ci": {"run_tests": False, "build_artifacts": True, "deploy_to_cloud": False},
        },
    ),
)


def get_preset_bundles_by_ids(ids: Iterable[str]) -> list[PresetBundle]:
    """Bundles whose id is in *ids*, in catalog order. Unknown ids are skipped."""
    wanted = set(ids)
    return [bundle for bundle in PRESET_BUNDLES if bundle.id in wanted]


def find_preset_bundle(bundle_id: str) -> PresetBundle | None:
    return next((bundle for bundle in PRESET_BUNDLES if bundle.id == bundle_id), None)


def resolve_preset_bundles_to_patch(ids: Iterable[str]) -> ConfigPatch:
    """Deep-merge the selected bundles' configuration patches."""
    patch: ConfigPatch = {}
    for bundle in get_preset_bundles_by_ids(ids):
        patch = merge_patches(patch, bundle.config)
    return patch
