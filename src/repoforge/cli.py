"""CLI for the repoforge repository compiler.

Usage:
    repoforge compile                               # Compile the default configuration
    repoforge compile --config repoforge.json       # Compile a configuration patch
    repoforge plan --bundle bundle.stack.next-full  # Change plan for a preset bundle
    repoforge packs --override release:ownership=pack.release.gh-release
    repoforge packs --catalog                       # List built-in packs
    repoforge recommend                             # Rank automation profiles
    repoforge render --apply                        # Rendered artifacts (non-dry-run wording)
    repoforge publish --target pr                   # Publisher actions for a target
    repoforge bundles                               # List preset bundles
    repoforge simulate --tick 0.2                   # Stream the bootstrap log
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from repoforge import __version__
from repoforge.bundles import PRESET_BUNDLES
from repoforge.changeplan import materialize_change_plan
from repoforge.cli_common import build_plan_config, echo_json, get_overrides
from repoforge.compiler import RepoSpec, compile_repo_spec
from repoforge.normalize import normalize_config
from repoforge.packs_data import BUILT_IN_CATALOG
from repoforge.playback import PlaybackLoop
from repoforge.publisher import publish_from_change_plan
from repoforge.recommend import recommend_automation_candidates
from repoforge.renderer import render_publisher_artifacts
from repoforge.resolver import resolve_packs
from repoforge.snapshot import SimulationLogEntry, render_simulation_log
from repoforge.types import PlanConfig
from repoforge.validation import PUBLISH_TARGETS, USER_MODES

_F = TypeVar("_F", bound=Callable[..., Any])

_LOG_ICONS = {"info": " ", "file": "+", "success": "*"}


def pipeline_options(func: _F) -> _F:
    """Options shared by every command that compiles a configuration."""
    decorators = [
        click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="JSON configuration patch merged onto the defaults",
        ),
        click.option("--bundle", "bundle_ids", multiple=True, help="Preset bundle id (repeatable)"),
        click.option("--override", "overrides", multiple=True, help="Capability owner as CAPABILITY=PACK (repeatable)"),
        click.option("--json", "as_json", is_flag=True, help="Output as JSON"),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _compile(config_path: Path | None, bundle_ids: tuple[str, ...], overrides: tuple[str, ...]) -> tuple[PlanConfig, RepoSpec]:
    config = build_plan_config(config_path, bundle_ids)
    return config, compile_repo_spec(config, get_overrides(overrides))


@click.group()
@click.version_option(version=__version__, prog_name="repoforge")
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write JSONL logs to this directory",
)
def cli(log_dir: Path | None) -> None:
    """repoforge: deterministic repository bootstrap compiler."""
    if log_dir is not None:
        from repoforge.logging import setup_logging

        setup_logging(log_dir)


@cli.command("compile")
@pipeline_options
def compile_cmd(config_path: Path | None, bundle_ids: tuple[str, ...], overrides: tuple[str, ...], as_json: bool) -> None:
    """Compile the configuration into a repository specification."""
    _, repo_spec = _compile(config_path, bundle_ids, overrides)
    if as_json:
        echo_json(repo_spec.to_dict())
        return

    automation = repo_spec.automation
    governance = repo_spec.governance
    click.echo(f"Name:            {repo_spec.name}")
    click.echo(f"Package manager: {repo_spec.package_manager}")
    click.echo(f"Architecture:    {repo_spec.architecture}")
    click.echo(f"Governance:      {governance.posture} (ruleset: {governance.ruleset})")
    if governance.status_checks:
        click.echo(f"Status checks:   {', '.join(governance.status_checks)}")
    click.echo(
        f"Automation:      {automation.dependabot.schedule} updates, "
        f"{automation.ci.matrix_breadth} CI matrix ({', '.join(automation.ci.dimensions)})"
    )
    if repo_spec.packs is not None:
        click.echo(f"Packs:           {', '.join(repo_spec.packs.selected_packs) or 'none'}")
    click.echo(f"\nFiles ({len(repo_spec.files)}):")
    for path in repo_spec.files:
        click.echo(f"  {path}")


@cli.command()
@pipeline_options
def plan(config_path: Path | None, bundle_ids: tuple[str, ...], overrides: tuple[str, ...], as_json: bool) -> None:
    """Show the ordered bootstrap change plan."""
    _, repo_spec = _compile(config_path, bundle_ids, overrides)
    change_plan = materialize_change_plan(repo_spec)
    if as_json:
        echo_json(change_plan.to_dict())
        return
    click.echo(f"Change plan v{change_plan.version} ({len(change_plan.operations)} operations)")
    for op in change_plan.operations:
        click.echo(f"  {op.id:<16} {op.type:<12} {op.message}")


@cli.command()
@pipeline_options
@click.option("--catalog", "show_catalog", is_flag=True, help="List the built-in pack catalog instead")
def packs(
    config_path: Path | None,
    bundle_ids: tuple[str, ...],
    overrides: tuple[str, ...],
    as_json: bool,
    show_catalog: bool,
) -> None:
    """Resolve packs and report capability ownership and conflicts."""
    if show_catalog:
        entries = [p.to_dict() for p in sorted(BUILT_IN_CATALOG, key=lambda p: p.sort_key)]
        if as_json:
            echo_json(entries)
            return
        for entry in entries:
            click.echo(f"{entry['id']:<32} P{entry['priority']:<4} {entry['title']}")
        return

    config = build_plan_config(config_path, bundle_ids)
    resolution = resolve_packs(normalize_config(config), get_overrides(overrides))
    if as_json:
        echo_json(resolution.to_dict())
        return

    click.echo(f"Selected: {', '.join(resolution.selected_packs) or 'none'}")
    click.echo("\nCapability owners:")
    for capability, owners in resolution.capability_owners.items():
        click.echo(f"  {capability:<24} {', '.join(owners) or '(none)'}")
    if resolution.capability_conflicts:
        click.echo("\nCapability conflicts:")
        for conflict in resolution.capability_conflicts:
            click.echo(f"  {conflict.capability}: {conflict.owner.pack_id} over {conflict.challenger.pack_id}")
            click.echo(f"    {conflict.downstream_impact}")
    if resolution.pack_conflicts:
        click.echo("\nPack conflicts:")
        for pack_conflict in resolution.pack_conflicts:
            click.echo(f"  {pack_conflict.winner_pack_id} drops {pack_conflict.dropped_pack_id}")
            click.echo(f"    {pack_conflict.reason}")
    if resolution.scripts:
        click.echo("\nScripts:")
        for name, command in resolution.scripts.items():
            click.echo(f"  {name}: {command}")


@cli.command()
@pipeline_options
def recommend(config_path: Path | None, bundle_ids: tuple[str, ...], overrides: tuple[str, ...], as_json: bool) -> None:
    """Rank the three canonical automation profiles."""
    config, repo_spec = _compile(config_path, bundle_ids, overrides)
    candidates = recommend_automation_candidates(config, repo_spec)
    if as_json:
        echo_json([c.to_dict() for c in candidates])
        return
    for rank, candidate in enumerate(candidates, start=1):
        click.echo(
            f"{rank}. {candidate.label:<22} score {candidate.score:>6}  "
            f"({candidate.dependabot.schedule}, {candidate.bot_prs_per_month} PRs/month, "
            f"{candidate.ci_minutes_proxy} CI min)"
        )
        click.echo(f"   {candidate.security_posture_note}")


@cli.command()
@pipeline_options
@click.option("--apply", "apply_", is_flag=True, help="Describe artifacts as applied rather than dry-run")
@click.option("--power", is_flag=True, help="Enable experimental renderers (power mode)")
def render(
    config_path: Path | None,
    bundle_ids: tuple[str, ...],
    overrides: tuple[str, ...],
    as_json: bool,
    apply_: bool,
    power: bool,
) -> None:
    """Render illustrative artifacts and governance hints."""
    config, repo_spec = _compile(config_path, bundle_ids, overrides)
    artifacts = render_publisher_artifacts(config, repo_spec, dry_run=not apply_, enable_rust_experimental=power)
    if as_json:
        echo_json([a.to_dict() for a in artifacts])
        return
    for artifact in artifacts:
        click.echo(f"[{artifact.kind}] {artifact.path}: {artifact.description}")


@cli.command()
@pipeline_options
@click.option("--target", type=click.Choice(PUBLISH_TARGETS), default="local", help="Publish target")
@click.option("--user-mode", type=click.Choice(USER_MODES), default="basic", help="User mode (power enables experiments)")
@click.option("--apply", "apply_", is_flag=True, help="Describe actions as applied rather than dry-run")
def publish(
    config_path: Path | None,
    bundle_ids: tuple[str, ...],
    overrides: tuple[str, ...],
    as_json: bool,
    target: str,
    user_mode: str,
    apply_: bool,
) -> None:
    """Map the change plan onto a publish target's action vocabulary."""
    config, repo_spec = _compile(config_path, bundle_ids, overrides)
    change_plan = materialize_change_plan(repo_spec)
    try:
        actions = publish_from_change_plan(
            config, repo_spec, change_plan, dry_run=not apply_, user_mode=user_mode, target=target
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if as_json:
        echo_json([a.to_dict() for a in actions])
        return
    for action in actions:
        click.echo(f"{action.id:<22} {action.action:<34} {action.target}")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def bundles(as_json: bool) -> None:
    """List preset bundles."""
    if as_json:
        echo_json([b.to_dict() for b in PRESET_BUNDLES])
        return
    for bundle in PRESET_BUNDLES:
        click.echo(f"{bundle.id:<36} {bundle.name}")
        click.echo(f"  {bundle.description}")
        click.echo(f"  packs: {', '.join(bundle.packs)}")


@cli.command()
@pipeline_options
@click.option("--tick", default=0.4, type=click.FloatRange(min=0), show_default=True, help="Seconds between log entries")
def simulate(
    config_path: Path | None,
    bundle_ids: tuple[str, ...],
    overrides: tuple[str, ...],
    as_json: bool,
    tick: float,
) -> None:
    """Stream the bootstrap simulation log at a fixed interval."""
    _, repo_spec = _compile(config_path, bundle_ids, overrides)
    entries = render_simulation_log(materialize_change_plan(repo_spec))

    def _emit(entry: SimulationLogEntry) -> None:
        if as_json:
            # One compact object per line so the stream can be read as JSONL
            click.echo(json.dumps(entry.to_dict()))
        else:
            click.echo(f"{_LOG_ICONS[entry.type]} {entry.message}")

    loop = PlaybackLoop(tick_seconds=tick, on_entry=_emit)
    with loop:
        loop.start(entries)
        try:
            loop.wait()
        except KeyboardInterrupt:
            click.echo("Simulation cancelled", err=True)
            sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
