"""Tests for preset bundles."""

from __future__ import annotations

import pytest

from repoforge.bundles import (
    PRESET_BUNDLES,
    PresetBundle,
    find_preset_bundle,
    get_preset_bundles_by_ids,
    resolve_preset_bundles_to_patch,
)
from repoforge.compiler import compile_repo_spec
from repoforge.config import apply_preset_config


class TestCatalog:
    def test_ids_unique(self) -> None:
        ids = [b.id for b in PRESET_BUNDLES]
        assert len(ids) == 6
        assert len(set(ids)) == len(ids)

    def test_find(self) -> None:
        bundle = find_preset_bundle("bundle.stack.go-api")
        assert bundle is not None
        assert bundle.config["stack"]["language"] == "Go"
        assert find_preset_bundle("bundle.unknown") is None

    def test_catalog_order(self) -> None:
        bundles = get_preset_bundles_by_ids(["bundle.stack.docs-site", "bundle.governance.solo-quickstart", "nope"])
        assert [b.id for b in bundles] == ["bundle.governance.solo-quickstart", "bundle.stack.docs-site"]


class TestResolvePatch:
    def test_request_order_does_not_matter(self) -> None:
        forward = resolve_preset_bundles_to_patch(["bundle.governance.solo-quickstart", "bundle.stack.next-full"])
        backward = resolve_preset_bundles_to_patch(["bundle.stack.next-full", "bundle.governance.solo-quickstart"])
        assert forward == backward
        # next-full comes later in the catalog and wins the overlap
        assert forward["quality"]["testing"] is True
        assert forward["security"]["dependency_update_frequency"] == "monthly"

    def test_empty(self) -> None:
        assert resolve_preset_bundles_to_patch([]) == {}


class TestBundleCompilation:
    @pytest.mark.parametrize("bundle", PRESET_BUNDLES, ids=lambda b: b.id)
    def test_expected_packs_selected(self, bundle: PresetBundle) -> None:
        spec = compile_repo_spec(apply_preset_config(resolve_preset_bundles_to_patch([bundle.id])))
        assert spec.packs is not None
        assert set(bundle.packs) <= set(spec.packs.selected_packs)

    def test_go_api_layout(self) -> None:
        spec = compile_repo_spec(apply_preset_config(resolve_preset_bundles_to_patch(["bundle.stack.go-api"])))
        assert spec.name == "go-service-api"
        assert "go.mod" in spec.files
        assert "src/application/use_case.go" in spec.files

    def test_enterprise_release_owner(self) -> None:
        spec = compile_repo_spec(apply_preset_config(resolve_preset_bundles_to_patch(["bundle.governance.enterprise"])))
        assert spec.packs is not None
        assert spec.packs.capability_owners["release:ownership"] == ("pack.release.semantic",)
        assert ".github/CODEOWNERS" in spec.files
