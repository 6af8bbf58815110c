"""Shared pytest fixtures for repoforge tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from repoforge.config import create_default_config
from repoforge.packs import PackCapability, PackCatalog, PackDefinition, PackEffects
from repoforge.packs_data import BUILT_IN_CATALOG
from repoforge.types import PlanConfig


@pytest.fixture
def default_config() -> PlanConfig:
    """Fresh default configuration (TypeScript, Next.js, ESLint + Prettier, Team Standard)."""
    return create_default_config()


@pytest.fixture
def release_config(default_config: PlanConfig) -> PlanConfig:
    """Default configuration with automatic release on, so both release packs are eligible."""
    default_config["ci"]["automatic_release"] = True
    return default_config


@pytest.fixture
def rust_config(default_config: PlanConfig) -> PlanConfig:
    default_config["stack"]["language"] = "Rust"
    default_config["stack"]["framework"] = "Axum"
    default_config["stack"]["package_manager"] = "cargo"
    default_config["stack"]["rust_mode"] = "template"
    return default_config


@pytest.fixture
def docs_catalog() -> PackCatalog:
    """Built-in catalog plus two extra multi-owner docs packs, one conflicting with the templates pack."""
    return BUILT_IN_CATALOG.with_packs(
        PackDefinition(
            id="pack.docs.adr",
            title="ADR scaffolding",
            requirements=("docs:readme:on",),
            capabilities=(PackCapability("docs:content", multi_owner=True),),
            priority=30,
            resolve_effects=lambda config: PackEffects(scripts={"adr": "adr new"}),
        ),
        PackDefinition(
            id="pack.docs.legacy",
            title="Legacy docs generator",
            requirements=("docs:readme:on",),
            conflicts=("pack.docs.templates",),
            capabilities=(PackCapability("docs:content", multi_owner=True),),
            priority=20,
            resolve_effects=lambda config: PackEffects(scripts={"docs": "legacy-docs"}),
        ),
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Configuration patch on disk selecting Strict governance and a Rust stack."""
    path = tmp_path / "repoforge.json"
    path.write_text(
        json.dumps(
            {
                "project_name": "  Rusty Service  ",
                "governance_posture": "Strict",
                "noise_budget": "high",
                "stack": {"language": "Rust", "framework": "Axum", "package_manager": "cargo"},
            }
        )
    )
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
