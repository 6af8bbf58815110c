# src/repoforge/packs.py
"""Pack definitions and the immutable pack catalog.

A pack is an optional feature unit: it claims named capabilities, declares
conflicts with other packs, and contributes scripts and dependencies when
selected. Packs live in a PackCatalog value that is passed into the resolver;
there is no process-wide mutable registry.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

from repoforge.types import ConfigPatch, PlanConfig
from repoforge.types.api import PackEffectsDict

logger = logging.getLogger(__name__)

# Pack ids and capability names are used as dict keys in reports and as
# substrings of change-plan messages; keep them to a predictable alphabet.
_PACK_ID_PATTERN = re.compile(r"^[a-z][a-z0-9_.-]{0,127}$")
_CAPABILITY_PATTERN = re.compile(r"^[a-z][a-z0-9_:-]{0,127}$")

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

EffectCategory = Literal["scripts", "dependencies", "dev_dependencies"]
EFFECT_CATEGORIES: tuple[EffectCategory, ...] = ("scripts", "dependencies", "dev_dependencies")

# ---------------------------------------------------------------------------
# Frozen dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackCapability:
    """A named feature slot. Single-owner unless ``multi_owner`` is set."""

    name: str
    multi_owner: bool = False

    def __post_init__(self) -> None:
        if not _CAPABILITY_PATTERN.match(self.name):
            msg = f"Invalid capability name '{self.name}': must match {_CAPABILITY_PATTERN.pattern}"
            raise PackDefinitionError(msg)


@dataclass(frozen=True)
class PackEffects:
    """Contributions a selected pack injects, one explicit map per effect category."""

    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    preset_patch: ConfigPatch | None = None

    def entries(self, category: EffectCategory) -> dict[str, str]:
        """Return the key/value map for one effect category."""
        return getattr(self, category)

    def to_dict(self) -> PackEffectsDict:
        return PackEffectsDict(
            scripts=dict(sorted(self.scripts.items())),
            dependencies=dict(sorted(self.dependencies.items())),
            dev_dependencies=dict(sorted(self.dev_dependencies.items())),
        )


EffectsResolver = Callable[[PlanConfig], PackEffects]


def _no_effects(config: PlanConfig) -> PackEffects:
    return PackEffects()


@dataclass(frozen=True)
class PackDefinition:
    """Static catalog entry for one pack."""

    id: str
    title: str
    requirements: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()
    capabilities: tuple[PackCapability, ...] = ()
    priority: int = 0
    resolve_effects: EffectsResolver = field(default=_no_effects, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not _PACK_ID_PATTERN.match(self.id):
            msg = f"Invalid pack id '{self.id}': must match {_PACK_ID_PATTERN.pattern}"
            raise PackDefinitionError(msg)
        if self.id in self.conflicts:
            msg = f"Pack '{self.id}' cannot declare a conflict with itself"
            raise PackDefinitionError(msg)

    @property
    def sort_key(self) -> tuple[int, str]:
        """Descending priority, then ascending id."""
        return (-self.priority, self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority,
            "requirements": list(self.requirements),
            "conflicts": list(self.conflicts),
            "capabilities": [{"name": c.name, "multi_owner": c.multi_owner} for c in self.capabilities],
        }


# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class PackDefinitionError(ValueError):
    """Raised when a pack definition or catalog is malformed."""


# ---------------------------------------------------------------------------
# PackCatalog
# ---------------------------------------------------------------------------


class PackCatalog:
    """Immutable, validated collection of pack definitions.

    Extend with ``with_packs()`` which returns a new catalog; the original
    is never modified.
    """

    def __init__(self, packs: tuple[PackDefinition, ...] | list[PackDefinition] = ()) -> None:
        seen: set[str] = set()
        for pack in packs:
            if pack.id in seen:
                msg = f"Duplicate pack id '{pack.id}' in catalog"
                raise PackDefinitionError(msg)
            seen.add(pack.id)
        self._packs: tuple[PackDefinition, ...] = tuple(packs)
        self._by_id: dict[str, PackDefinition] = {p.id: p for p in self._packs}

        for pack in self._packs:
            for other in pack.conflicts:
                if other not in self._by_id:
                    logger.debug("Pack %s declares conflict with unknown pack %s", pack.id, other)

    def __iter__(self) -> Iterator[PackDefinition]:
        return iter(self._packs)

    def __len__(self) -> int:
        return len(self._packs)

    def __contains__(self, pack_id: object) -> bool:
        return pack_id in self._by_id

    def __repr__(self) -> str:
        return f"PackCatalog({len(self._packs)} packs)"

    def get(self, pack_id: str) -> PackDefinition | None:
        """Get a pack by id."""
        return self._by_id.get(pack_id)

    def ids(self) -> list[str]:
        return sorted(self._by_id)

    def with_packs(self, *extra: PackDefinition) -> PackCatalog:
        """Return a new catalog with *extra* appended."""
        return PackCatalog(self._packs + tuple(extra))

    def eligible(self, tags: set[str]) -> list[PackDefinition]:
        """Packs whose every requirement tag is present, in priority/id order."""
        eligible = [p for p in self._packs if all(req in tags for req in p.requirements)]
        return sorted(eligible, key=lambda p: p.sort_key)


# ---------------------------------------------------------------------------
# Requirement tags
# ---------------------------------------------------------------------------


def derive_requirement_tags(config: PlanConfig) -> set[str]:
    """Derive the tag set that pack requirements are matched against."""
    tags: set[str] = set()
    stack = config["stack"]
    quality = config["quality"]

    framework = stack.get("framework", "")
    if framework:
        tags.add("stack:framework:present")
        tags.add(f"stack:framework:{framework.lower()}")

    tags.add(f"builder:{stack.get('builder', 'None').lower()}")
    tags.add(f"quality:linter:{quality['linter'].lower()}")
    tags.add(f"quality:formatter:{quality['formatter'].lower()}")

    if quality["testing"]:
        tags.add("quality:testing:on")
        tags.add(f"quality:test:{quality['test_framework'].lower()}")

    if config["ci"]["automatic_release"]:
        tags.add("ci:auto-release:on")

    if config["docs"]["readme"]:
        tags.add("docs:readme:on")

    return tags
