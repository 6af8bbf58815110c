"""Pure helpers and constants shared across MCP tool modules.

This module has NO dependency on ``mcp_server`` module globals, so it can
be imported freely without triggering circular-import issues.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.types import TextContent

from repoforge.bundles import find_preset_bundle, resolve_preset_bundles_to_patch
from repoforge.config import apply_preset_config, merge_config, patch_shape_error
from repoforge.types import PlanConfig
from repoforge.validation import validate_override_map

logger = logging.getLogger(__name__)

# JSON Schema fragments shared by every pipeline tool
CONFIG_INPUT_PROPERTIES: dict[str, Any] = {
    "config": {
        "type": "object",
        "description": "Partial configuration merged onto the defaults (snake_case keys)",
    },
    "bundles": {
        "type": "array",
        "items": {"type": "string"},
        "description": "Preset bundle ids applied before the config patch (use list_bundles)",
    },
    "overrides": {
        "type": "object",
        "additionalProperties": {"type": "string"},
        "description": "Capability owner overrides: capability name -> pack id",
    },
}


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, default=str))]


def _validation_error(message: str) -> list[TextContent]:
    return _text({"error": message, "code": "validation_error"})


def _validate_bool(value: Any, name: str) -> list[TextContent] | None:
    """Return a validation error if *value* is not ``None`` and not a ``bool``."""
    if value is not None and not isinstance(value, bool):
        return _validation_error(f"{name} must be a boolean")
    return None


def _build_config(arguments: dict[str, Any]) -> tuple[PlanConfig | None, dict[str, str], list[TextContent] | None]:
    """Resolve (config, overrides) from tool arguments.

    Returns (config, overrides, None) on success or (None, {}, error_response).
    """
    bundle_ids = arguments.get("bundles") or []
    if not isinstance(bundle_ids, list) or not all(isinstance(b, str) for b in bundle_ids):
        return None, {}, _validation_error("bundles must be a list of bundle ids")
    unknown = [b for b in bundle_ids if find_preset_bundle(b) is None]
    if unknown:
        return None, {}, _text({"error": f"Unknown bundle(s): {', '.join(unknown)}", "code": "not_found"})

    patch = arguments.get("config") or {}
    if not isinstance(patch, dict):
        return None, {}, _validation_error("config must be an object")
    shape_error = patch_shape_error(patch)
    if shape_error:
        return None, {}, _validation_error(f"config.{shape_error}")

    overrides, error = validate_override_map(arguments.get("overrides"))
    if error:
        return None, {}, _validation_error(error)

    config = merge_config(apply_preset_config(resolve_preset_bundles_to_patch(bundle_ids)), patch)
    return config, overrides, None
