"""Default configuration, deep-merge helpers, and on-disk config loading.

The wizard edits a nested configuration tree. Everything here returns new
trees; callers' dicts are never mutated.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, cast

from repoforge.types import ConfigPatch, PlanConfig

logger = logging.getLogger(__name__)

DEFAULT_POSTURE = "Team Standard"

_DEFAULT_CONFIG: dict[str, Any] = {
    "project_name": "my-awesome-project",
    "visibility": "public",
    "license": "MIT",
    "basics": {
        "i18n": False,
        "description": "A new project bootstrapped with best practices.",
    },
    "structure": "Polyrepo",
    "type": "Web App",
    "architecture": "Standard",
    "github": {
        "topics": [],
        "features": {"issues": True, "projects": False, "wiki": False, "discussions": False},
        "pr": {
            "allow_merge_commit": False,
            "allow_squash_merge": True,
            "allow_rebase_merge": False,
            "delete_branch_on_merge": True,
        },
        "branches": {
            "default": "main",
            "protection": {
                "require_pr": True,
                "required_reviewers": 1,
                "require_status_checks": True,
                "require_linear_history": True,
                "require_code_owners": False,
                "require_signed_commits": False,
            },
        },
        "actions": {"permissions": "local", "allow_pr": False, "runners": "github"},
        "copilot": False,
        "webhooks": [],
        "environments": ["production", "staging"],
        "secrets": ["NPM_TOKEN"],
    },
    "stack": {
        "language": "TypeScript",
        "language_version": "20.x",
        "framework": "Next.js",
        "package_manager": "pnpm",
        "dependency_strategy": "semver",
        "build_tool": "None",
        "builder": "None",
        "rust_mode": "template",
    },
    "quality": {
        "linter": "ESLint",
        "formatter": "Prettier",
        "quality_platform": "None",
        "testing": True,
        "test_framework": "Vitest",
        "integration_tests": False,
        "e2e_tests": False,
        "e2e_framework": "None",
        "coverage_target": 80,
    },
    "ci": {
        "run_tests": True,
        "build_artifacts": True,
        "automatic_release": False,
        "deploy_to_cloud": False,
    },
    "security": {
        "code_scanning": True,
        "dependency_updates": True,
        "dependency_update_frequency": "weekly",
        "secret_scanning": True,
        "manage_env": True,
    },
    "docs": {
        "readme": True,
        "contributing": True,
        "adr": False,
        "codeowners": False,
        "issue_templates": False,
        "pull_request_template": False,
        "framework": "none",
        "style_guide": "none",
        "deploy_to_pages": False,
    },
    "governance_posture": DEFAULT_POSTURE,
    "noise_budget": "medium",
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or has the wrong shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load configuration from {path}: {reason}")


def create_default_config() -> PlanConfig:
    """Return an isolated copy of the default configuration."""
    return cast(PlanConfig, copy.deepcopy(_DEFAULT_CONFIG))


def _deep_merge(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = _deep_merge(current, value)
        else:
            # Lists and scalars replace wholesale
            merged[key] = copy.deepcopy(value)
    return merged


def merge_config(base: PlanConfig, patch: ConfigPatch) -> PlanConfig:
    """Deep-merge a partial configuration onto *base* without losing sibling values."""
    return cast(PlanConfig, _deep_merge(copy.deepcopy(dict(base)), patch))


def merge_patches(base: ConfigPatch, patch: ConfigPatch) -> ConfigPatch:
    """Deep-merge two partial configurations into a new patch."""
    return _deep_merge(copy.deepcopy(base), patch)


def apply_preset_config(patch: ConfigPatch) -> PlanConfig:
    """Apply a preset patch on top of the defaults."""
    return merge_config(create_default_config(), patch)


def _shape_error(patch: dict[str, Any], template: dict[str, Any], prefix: str) -> str | None:
    for key, value in patch.items():
        expected = template.get(key)
        if not isinstance(expected, dict):
            continue
        if not isinstance(value, dict):
            return f"{prefix}{key} must be an object, got {type(value).__name__}"
        error = _shape_error(value, expected, f"{prefix}{key}.")
        if error:
            return error
    return None


def patch_shape_error(patch: ConfigPatch) -> str | None:
    """Return an error if *patch* gives a non-object where the defaults hold a section."""
    return _shape_error(patch, _DEFAULT_CONFIG, "")


def read_config_patch(path: Path) -> ConfigPatch:
    """Read a JSON configuration patch, dropping unknown top-level keys.

    Raises:
        ConfigError: If the file is missing, unreadable, not a JSON object,
            or replaces a configuration section with a non-object.
    """
    try:
        raw = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(path, "file not found") from exc
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(path, str(exc)) from exc
    if not isinstance(raw, dict):
        raise ConfigError(path, f"expected a JSON object, got {type(raw).__name__}")
    unknown = sorted(set(raw) - set(_DEFAULT_CONFIG))
    if unknown:
        logger.warning("Ignoring unknown configuration keys in %s: %s", path, unknown)
        raw = {k: v for k, v in raw.items() if k not in unknown}
    shape_error = patch_shape_error(raw)
    if shape_error:
        raise ConfigError(path, shape_error)
    logger.debug("Loaded configuration patch from %s (%d keys)", path, len(raw))
    return raw


def load_config(path: Path) -> PlanConfig:
    """Read a JSON configuration patch and merge it onto the defaults.

    Raises:
        ConfigError: If the file cannot be read as a JSON object.
    """
    return apply_preset_config(read_config_patch(path))
