# src/repoforge/resolver.py
"""Pack resolution: eligibility, capability ownership, and conflict reporting.

Resolution is a pure function of (configuration, owner overrides, catalog).
Contention between packs never raises; the chosen outcome is reported in
``capability_conflicts`` and ``pack_conflicts`` for the host to display.

Ordering contract:
  - eligible packs: descending priority, then ascending id
  - capabilities: processed in ascending name order
  - effect merge: ascending pack id, later ids overwrite earlier keys
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from repoforge.packs import EFFECT_CATEGORIES, PackCatalog, PackDefinition, PackEffects, derive_requirement_tags
from repoforge.types import PlanConfig
from repoforge.types.api import (
    CapabilityConflictDict,
    ConflictCandidateDict,
    PackConflictDict,
    PackResolutionDict,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConflictCandidate:
    """A pack competing for a capability, with the effects it would contribute."""

    pack_id: str
    priority: int
    effects: PackEffects

    def to_dict(self) -> ConflictCandidateDict:
        return ConflictCandidateDict(pack_id=self.pack_id, priority=self.priority, effects=self.effects.to_dict())


@dataclass(frozen=True)
class CapabilityConflict:
    """A challenger that lost a single-owner capability to ``owner``."""

    capability: str
    owner: ConflictCandidate
    challenger: ConflictCandidate
    downstream_impact: str

    def to_dict(self) -> CapabilityConflictDict:
        return CapabilityConflictDict(
            capability=self.capability,
            owner=self.owner.to_dict(),
            challenger=self.challenger.to_dict(),
            downstream_impact=self.downstream_impact,
        )


@dataclass(frozen=True)
class PackConflict:
    """A pack dropped because of a declared conflict edge with ``winner_pack_id``."""

    winner_pack_id: str
    dropped_pack_id: str
    reason: str

    def to_dict(self) -> PackConflictDict:
        return PackConflictDict(
            winner_pack_id=self.winner_pack_id,
            dropped_pack_id=self.dropped_pack_id,
            reason=self.reason,
        )


@dataclass(frozen=True)
class PackResolution:
    """Outcome of one resolution pass. Every map is key-sorted."""

    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    selected_packs: tuple[str, ...] = ()
    capability_owners: dict[str, tuple[str, ...]] = field(default_factory=dict)
    capability_conflicts: tuple[CapabilityConflict, ...] = ()
    pack_conflicts: tuple[PackConflict, ...] = ()

    def to_dict(self) -> PackResolutionDict:
        return PackResolutionDict(
            scripts=dict(self.scripts),
            dependencies=dict(self.dependencies),
            dev_dependencies=dict(self.dev_dependencies),
            selected_packs=list(self.selected_packs),
            capability_owners={k: list(v) for k, v in self.capability_owners.items()},
            capability_conflicts=[c.to_dict() for c in self.capability_conflicts],
            pack_conflicts=[c.to_dict() for c in self.pack_conflicts],
        )


# ---------------------------------------------------------------------------
# Conflict graph
# ---------------------------------------------------------------------------


class ConflictGraph:
    """Symmetric pack-vs-pack conflict graph.

    A declaration ``conflicts=[B]`` on pack A yields edges A->B and B->A,
    even when B does not list A.
    """

    def __init__(self) -> None:
        self._adjacent: dict[str, set[str]] = {}

    @classmethod
    def from_packs(cls, packs: Iterable[PackDefinition]) -> ConflictGraph:
        graph = cls()
        for pack in packs:
            for other in pack.conflicts:
                graph.add_edge(pack.id, other)
        return graph

    def add_edge(self, a: str, b: str) -> None:
        self._adjacent.setdefault(a, set()).add(b)
        self._adjacent.setdefault(b, set()).add(a)

    def blocks(self, a: str, b: str) -> bool:
        """True if packs *a* and *b* may not both be selected."""
        return b in self._adjacent.get(a, ())

    def first_blocker(self, pack_id: str, selected: Iterable[str]) -> str | None:
        """Lowest-id selected pack that blocks *pack_id*, or None."""
        for other in sorted(selected):
            if self.blocks(pack_id, other):
                return other
        return None

    def neighbours(self, pack_id: str) -> list[str]:
        return sorted(self._adjacent.get(pack_id, ()))


# ---------------------------------------------------------------------------
# Impact notes
# ---------------------------------------------------------------------------

_CATEGORY_LABELS = {
    "scripts": "scripts",
    "dependencies": "dependencies",
    "dev_dependencies": "dev-dependencies",
}


def _describe_effects(effects: PackEffects) -> str:
    parts = []
    for category in EFFECT_CATEGORIES:
        keys = sorted(effects.entries(category))
        if keys:
            parts.append(f"{_CATEGORY_LABELS[category]} [{', '.join(keys)}]")
    return "; ".join(parts) if parts else "no scripts or dependencies"


def _downstream_impact(owner: ConflictCandidate, challenger: ConflictCandidate) -> str:
    return (
        f"{owner.pack_id} keeps {_describe_effects(owner.effects)}; "
        f"{challenger.pack_id} would have added {_describe_effects(challenger.effects)}."
    )


def _blocked_reason(capability: str, winner: str, dropped: str, effects: PackEffects) -> str:
    return (
        f"{dropped} conflicts with already-selected {winner} on capability '{capability}'; "
        f"dropping {_describe_effects(effects)}."
    )


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Candidate:
    pack: PackDefinition
    effects: PackEffects
    multi_owner: bool

    @property
    def id(self) -> str:
        return self.pack.id

    def as_conflict_candidate(self) -> ConflictCandidate:
        return ConflictCandidate(pack_id=self.pack.id, priority=self.pack.priority, effects=self.effects)


def _sort_record(record: Mapping[str, str]) -> dict[str, str]:
    return dict(sorted(record.items()))


def merge_effects(effects_by_pack: Mapping[str, PackEffects]) -> dict[str, dict[str, str]]:
    """Merge pack effects in ascending pack-id order; later ids win on key collisions."""
    merged: dict[str, dict[str, str]] = {c: {} for c in EFFECT_CATEGORIES}
    for pack_id in sorted(effects_by_pack):
        effects = effects_by_pack[pack_id]
        for category in EFFECT_CATEGORIES:
            for key, value in effects.entries(category).items():
                previous = merged[category].get(key)
                if previous is not None and previous != value:
                    logger.debug("Effect %s.%s overwritten by %s", category, key, pack_id)
                merged[category][key] = value
    return {c: _sort_record(m) for c, m in merged.items()}


def resolve_packs(
    config: PlanConfig,
    capability_owner_overrides: Mapping[str, str] | None = None,
    catalog: PackCatalog | None = None,
) -> PackResolution:
    """Select packs for *config* and report how capability contention was settled.

    Args:
        config: A normalized configuration.
        capability_owner_overrides: Optional capability name -> pack id table
            pinning a user-chosen winner ahead of priority order.
        catalog: Pack catalog to resolve against (defaults to the built-ins).

    Returns:
        A PackResolution with sorted selections, merged effect tables, the
        capability ownership map, and both conflict reports.
    """
    if catalog is None:
        from repoforge.packs_data import BUILT_IN_CATALOG

        catalog = BUILT_IN_CATALOG
    overrides = dict(capability_owner_overrides or {})

    tags = derive_requirement_tags(config)
    eligible = catalog.eligible(tags)
    logger.debug("Eligible packs: %s", [p.id for p in eligible])

    # Effects are computed once per pack so every report sees the same values
    effects_by_id = {p.id: p.resolve_effects(config) for p in eligible}

    candidates: dict[str, list[_Candidate]] = {}
    for pack in eligible:
        for capability in pack.capabilities:
            candidates.setdefault(capability.name, []).append(
                _Candidate(pack=pack, effects=effects_by_id[pack.id], multi_owner=capability.multi_owner)
            )

    for capability_name, pack_id in sorted(overrides.items()):
        if capability_name not in candidates:
            logger.debug("Ignoring override for capability without candidates: %s", capability_name)
        elif pack_id not in {c.id for c in candidates[capability_name]}:
            logger.debug("Ignoring override %s -> %s: pack is not an eligible candidate", capability_name, pack_id)

    graph = ConflictGraph.from_packs(eligible)
    selected: set[str] = set()
    owners: dict[str, tuple[str, ...]] = {}
    capability_conflicts: list[CapabilityConflict] = []
    pack_conflicts: list[PackConflict] = []

    for capability_name in sorted(candidates):
        contenders = sorted(candidates[capability_name], key=lambda c: c.pack.sort_key)

        if all(c.multi_owner for c in contenders):
            admitted: list[str] = []
            for candidate in contenders:
                blocker = graph.first_blocker(candidate.id, selected)
                if blocker is not None:
                    pack_conflicts.append(
                        PackConflict(
                            winner_pack_id=blocker,
                            dropped_pack_id=candidate.id,
                            reason=_blocked_reason(capability_name, blocker, candidate.id, candidate.effects),
                        )
                    )
                    continue
                selected.add(candidate.id)
                admitted.append(candidate.id)
            owners[capability_name] = tuple(admitted)
            logger.debug("Capability %s (multi-owner) -> %s", capability_name, admitted)
            continue

        override = overrides.get(capability_name)
        if override is not None:
            # Stable sort keeps priority/id order behind the pinned pack
            contenders.sort(key=lambda c: c.id != override)

        blockers = [(c, graph.first_blocker(c.id, selected)) for c in contenders]
        owner = next((c for c, blocker in blockers if blocker is None), None)

        if owner is None:
            owners[capability_name] = ()
            for candidate, blocker in blockers:
                if blocker is None:
                    continue
                pack_conflicts.append(
                    PackConflict(
                        winner_pack_id=blocker,
                        dropped_pack_id=candidate.id,
                        reason=_blocked_reason(capability_name, blocker, candidate.id, candidate.effects),
                    )
                )
            logger.debug("Capability %s has no unblocked candidate", capability_name)
            continue

        selected.add(owner.id)
        owners[capability_name] = (owner.id,)
        logger.debug("Capability %s -> %s", capability_name, owner.id)

        owner_candidate = owner.as_conflict_candidate()
        for challenger in contenders:
            if challenger is owner or challenger.multi_owner:
                continue
            challenger_candidate = challenger.as_conflict_candidate()
            capability_conflicts.append(
                CapabilityConflict(
                    capability=capability_name,
                    owner=owner_candidate,
                    challenger=challenger_candidate,
                    downstream_impact=_downstream_impact(owner_candidate, challenger_candidate),
                )
            )
            blocker = graph.first_blocker(challenger.id, selected)
            if blocker is not None:
                pack_conflicts.append(
                    PackConflict(
                        winner_pack_id=blocker,
                        dropped_pack_id=challenger.id,
                        reason=_blocked_reason(capability_name, blocker, challenger.id, challenger.effects),
                    )
                )

    merged = merge_effects({pack_id: effects_by_id[pack_id] for pack_id in selected})

    return PackResolution(
        scripts=merged["scripts"],
        dependencies=merged["dependencies"],
        dev_dependencies=merged["dev_dependencies"],
        selected_packs=tuple(sorted(selected)),
        capability_owners=owners,
        capability_conflicts=tuple(capability_conflicts),
        pack_conflicts=tuple(pack_conflicts),
    )
