"""Configuration canonicalization.

Structurally-equal configurations that differ only in list ordering or
surrounding whitespace normalize to equal values, so every later stage can
assume canonical input.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any, cast

from repoforge.types import PlanConfig


def _normalize_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _normalize_list(values: Iterable[Any] | None) -> list[str]:
    """Trim, drop empty entries, sort."""
    return sorted(t for t in (_normalize_text(v) for v in values or ()) if t)


def _normalize_webhook(hook: dict[str, Any]) -> dict[str, Any]:
    normalized = dict(hook)
    normalized["id"] = _normalize_text(hook.get("id"))
    normalized["url"] = _normalize_text(hook.get("url"))
    normalized["events"] = sorted(hook.get("events") or [])
    return normalized


def normalize_config(config: PlanConfig) -> PlanConfig:
    """Return a canonical copy of *config*. Idempotent; never mutates the input."""
    normalized: dict[str, Any] = copy.deepcopy(dict(config))

    normalized["project_name"] = _normalize_text(normalized.get("project_name"))

    basics = normalized.setdefault("basics", {})
    basics["description"] = _normalize_text(basics.get("description"))

    stack = normalized.setdefault("stack", {})
    stack["framework"] = _normalize_text(stack.get("framework"))
    stack["language_version"] = _normalize_text(stack.get("language_version"))

    github = normalized.setdefault("github", {})
    branches = github.setdefault("branches", {})
    branches["default"] = _normalize_text(branches.get("default"))

    github["topics"] = _normalize_list(github.get("topics"))
    github["environments"] = _normalize_list(github.get("environments"))
    github["secrets"] = _normalize_list(github.get("secrets"))
    github["webhooks"] = sorted(
        (_normalize_webhook(h) for h in github.get("webhooks") or []),
        key=lambda h: (h["id"], h["url"]),
    )

    return cast(PlanConfig, normalized)
