"""Shared CLI helpers.

Build the effective configuration (defaults, then bundles, then the config
file) and parse owner overrides, exiting with a message on bad input.
"""

from __future__ import annotations

import json as json_mod
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import click

from repoforge.bundles import find_preset_bundle, resolve_preset_bundles_to_patch
from repoforge.config import ConfigError, apply_preset_config, merge_config, read_config_patch
from repoforge.types import PlanConfig
from repoforge.validation import parse_owner_overrides


def build_plan_config(config_path: Path | None, bundle_ids: Iterable[str]) -> PlanConfig:
    """Explicit config-file values win over bundle values, which win over defaults."""
    bundle_ids = list(bundle_ids)
    for bundle_id in bundle_ids:
        if find_preset_bundle(bundle_id) is None:
            click.echo(f"Unknown bundle: {bundle_id}", err=True)
            sys.exit(1)
    config = apply_preset_config(resolve_preset_bundles_to_patch(bundle_ids))
    if config_path is None:
        return config
    try:
        patch = read_config_patch(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return merge_config(config, patch)


def get_overrides(values: Iterable[str]) -> dict[str, str]:
    overrides, error = parse_owner_overrides(values)
    if error:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    return overrides


def echo_json(data: Any) -> None:
    click.echo(json_mod.dumps(data, indent=2, default=str))
