"""Shared validation functions for all entry points.

Pure functions; no MCP or Click dependencies. Each returns
``(cleaned_value, None)`` on success or ``(empty_value, error_message)``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

PUBLISH_TARGETS: tuple[str, ...] = ("local", "pr", "create-repo")
USER_MODES: tuple[str, ...] = ("basic", "power")


def validate_publish_target(value: Any) -> tuple[str, str | None]:
    if not isinstance(value, str) or value not in PUBLISH_TARGETS:
        return ("", f"Unknown publish target {value!r}; expected one of: {', '.join(PUBLISH_TARGETS)}")
    return (value, None)


def validate_user_mode(value: Any) -> tuple[str, str | None]:
    if not isinstance(value, str) or value not in USER_MODES:
        return ("", f"Unknown user mode {value!r}; expected one of: {', '.join(USER_MODES)}")
    return (value, None)


def parse_owner_override(value: Any) -> tuple[tuple[str, str] | None, str | None]:
    """Parse one ``CAPABILITY=PACK`` override string."""
    if not isinstance(value, str):
        return (None, "override must be a string of the form CAPABILITY=PACK")
    capability, sep, pack_id = value.partition("=")
    capability = capability.strip()
    pack_id = pack_id.strip()
    if not sep or not capability or not pack_id:
        return (None, f"Invalid override {value!r}: expected CAPABILITY=PACK")
    return ((capability, pack_id), None)


def parse_owner_overrides(values: Iterable[Any]) -> tuple[dict[str, str], str | None]:
    """Parse repeated overrides; a later entry for the same capability wins."""
    overrides: dict[str, str] = {}
    for value in values:
        parsed, error = parse_owner_override(value)
        if error is not None or parsed is None:
            return ({}, error)
        capability, pack_id = parsed
        overrides[capability] = pack_id
    return (overrides, None)


def validate_override_map(value: Any) -> tuple[dict[str, str], str | None]:
    """Validate an override table received as a JSON object."""
    if value is None:
        return ({}, None)
    if not isinstance(value, dict):
        return ({}, "overrides must be an object mapping capability to pack id")
    for capability, pack_id in value.items():
        if not isinstance(capability, str) or not isinstance(pack_id, str) or not capability or not pack_id:
            return ({}, f"Invalid override {capability!r}: capability and pack id must be non-empty strings")
    return (dict(value), None)
