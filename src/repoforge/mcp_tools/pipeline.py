"""MCP tools for the compile / resolve / plan / recommend / render / publish pipeline."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.types import TextContent, Tool

from repoforge.changeplan import materialize_change_plan
from repoforge.compiler import compile_repo_spec
from repoforge.mcp_tools.common import CONFIG_INPUT_PROPERTIES, _build_config, _text, _validate_bool, _validation_error
from repoforge.normalize import normalize_config
from repoforge.publisher import publish_from_change_plan
from repoforge.recommend import recommend_automation_candidates
from repoforge.renderer import render_publisher_artifacts
from repoforge.resolver import resolve_packs
from repoforge.snapshot import compile_snapshot
from repoforge.validation import PUBLISH_TARGETS, USER_MODES


def _schema(**extra: Any) -> dict[str, Any]:
    return {"type": "object", "properties": {**CONFIG_INPUT_PROPERTIES, **extra}}


_DRY_RUN = {"type": "boolean", "default": True, "description": "Describe outputs as planned rather than applied"}


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for pipeline tools."""
    tools = [
        Tool(
            name="compile_repo_spec",
            description="Compile a configuration into the repository specification (automation, governance, files, packs)",
            inputSchema=_schema(),
        ),
        Tool(
            name="resolve_packs",
            description="Resolve packs for a configuration: selected packs, capability owners, and conflict reports",
            inputSchema=_schema(),
        ),
        Tool(
            name="materialize_change_plan",
            description="Compile a configuration and return its ordered bootstrap change plan",
            inputSchema=_schema(),
        ),
        Tool(
            name="recommend_automation",
            description="Rank the three canonical automation profiles (Quiet, Balanced, Aggressive) for a configuration",
            inputSchema=_schema(),
        ),
        Tool(
            name="render_artifacts",
            description="Render illustrative generated-file artifacts plus governance hints",
            inputSchema=_schema(
                dry_run=_DRY_RUN,
                enable_rust_experimental={
                    "type": "boolean",
                    "default": False,
                    "description": "Allow the experimental projen-rust renderer",
                },
            ),
        ),
        Tool(
            name="publish_actions",
            description="Map the change plan onto a publish target's action vocabulary (local, pr, create-repo)",
            inputSchema=_schema(
                target={"type": "string", "enum": list(PUBLISH_TARGETS), "default": "local"},
                user_mode={"type": "string", "enum": list(USER_MODES), "default": "basic"},
                dry_run=_DRY_RUN,
            ),
        ),
        Tool(
            name="compile_snapshot",
            description="Recompute every derived value (spec, plan, recommendations, decisions, actions) in one call",
            inputSchema=_schema(
                target={"type": "string", "enum": list(PUBLISH_TARGETS), "default": "local"},
                user_mode={"type": "string", "enum": list(USER_MODES), "default": "basic"},
                dry_run=_DRY_RUN,
            ),
        ),
    ]

    handlers: dict[str, Callable[..., Any]] = {
        "compile_repo_spec": _handle_compile_repo_spec,
        "resolve_packs": _handle_resolve_packs,
        "materialize_change_plan": _handle_materialize_change_plan,
        "recommend_automation": _handle_recommend_automation,
        "render_artifacts": _handle_render_artifacts,
        "publish_actions": _handle_publish_actions,
        "compile_snapshot": _handle_compile_snapshot,
    }
    return tools, handlers


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_compile_repo_spec(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    return _text(compile_repo_spec(config, overrides).to_dict())


async def _handle_resolve_packs(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    return _text(resolve_packs(normalize_config(config), overrides).to_dict())


async def _handle_materialize_change_plan(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    return _text(materialize_change_plan(compile_repo_spec(config, overrides)).to_dict())


async def _handle_recommend_automation(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    repo_spec = compile_repo_spec(config, overrides)
    return _text([c.to_dict() for c in recommend_automation_candidates(config, repo_spec)])


async def _handle_render_artifacts(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    for err in (
        _validate_bool(arguments.get("dry_run"), "dry_run"),
        _validate_bool(arguments.get("enable_rust_experimental"), "enable_rust_experimental"),
    ):
        if err is not None:
            return err
    repo_spec = compile_repo_spec(config, overrides)
    artifacts = render_publisher_artifacts(
        config,
        repo_spec,
        dry_run=arguments.get("dry_run", True),
        enable_rust_experimental=arguments.get("enable_rust_experimental", False),
    )
    return _text([a.to_dict() for a in artifacts])


async def _handle_publish_actions(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    err = _validate_bool(arguments.get("dry_run"), "dry_run")
    if err is not None:
        return err
    repo_spec = compile_repo_spec(config, overrides)
    change_plan = materialize_change_plan(repo_spec)
    try:
        actions = publish_from_change_plan(
            config,
            repo_spec,
            change_plan,
            dry_run=arguments.get("dry_run", True),
            user_mode=arguments.get("user_mode", "basic"),
            target=arguments.get("target", "local"),
        )
    except ValueError as e:
        return _validation_error(str(e))
    return _text([a.to_dict() for a in actions])


async def _handle_compile_snapshot(arguments: dict[str, Any]) -> list[TextContent]:
    config, overrides, error = _build_config(arguments)
    if error is not None or config is None:
        return error or []
    err = _validate_bool(arguments.get("dry_run"), "dry_run")
    if err is not None:
        return err
    try:
        snapshot = compile_snapshot(
            config,
            capability_owner_overrides=overrides,
            user_mode=arguments.get("user_mode", "basic"),
            target=arguments.get("target", "local"),
            dry_run=arguments.get("dry_run", True),
        )
    except ValueError as e:
        return _validation_error(str(e))
    return _text(snapshot.to_dict())
