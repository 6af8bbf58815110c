"""Tests for change-plan materialization."""

from __future__ import annotations

import dataclasses

from repoforge.changeplan import CHANGE_PLAN_VERSION, COMPLETE_MESSAGE, materialize_change_plan
from repoforge.compiler import compile_repo_spec
from repoforge.types import PlanConfig


class TestMaterialize:
    def test_operation_order(self, default_config: PlanConfig) -> None:
        plan = materialize_change_plan(compile_repo_spec(default_config))
        ids = [op.id for op in plan.operations]
        assert plan.version == CHANGE_PLAN_VERSION
        assert len(ids) == 20
        assert ids[:4] == ["init", "check", "check-compat", "resolve-packs"]
        assert ids[4:17] == [f"create-{n}" for n in range(1, 14)]
        assert ids[-3:] == ["install", "quality", "complete"]

    def test_create_operations_follow_manifest(self, default_config: PlanConfig) -> None:
        spec = compile_repo_spec(default_config)
        plan = materialize_change_plan(spec)
        creates = [op for op in plan.operations if op.type == "create_file"]
        assert tuple(op.target for op in creates) == spec.files
        assert creates[0].message == "Created .env.example"

    def test_pack_summary_message(self, default_config: PlanConfig) -> None:
        plan = materialize_change_plan(compile_repo_spec(default_config))
        resolve = plan.get("resolve-packs")
        assert resolve is not None
        assert resolve.type == "check"
        assert resolve.message == (
            "Resolved repository packs: pack.docs.templates, pack.quality.format-prettier, "
            "pack.quality.lint-eslint, pack.quality.test-vitest, pack.runtime.framework."
        )

    def test_no_pack_resolution_omits_step(self, default_config: PlanConfig) -> None:
        spec = dataclasses.replace(compile_repo_spec(default_config), packs=None)
        plan = materialize_change_plan(spec)
        assert plan.get("resolve-packs") is None
        assert len(plan.operations) == 19

    def test_install_and_complete_messages(self, default_config: PlanConfig) -> None:
        default_config["stack"]["package_manager"] = "yarn"
        plan = materialize_change_plan(compile_repo_spec(default_config))
        install = plan.get("install")
        complete = plan.get("complete")
        assert install is not None and install.message == "Installing dependencies via yarn..."
        assert complete is not None and complete.message == COMPLETE_MESSAGE

    def test_to_dict_omits_empty_target(self, default_config: PlanConfig) -> None:
        data = materialize_change_plan(compile_repo_spec(default_config)).to_dict()
        assert data["version"] == 1
        assert "target" not in data["operations"][0]
        assert data["operations"][4]["target"] == ".env.example"

    def test_deterministic(self, default_config: PlanConfig) -> None:
        first = materialize_change_plan(compile_repo_spec(default_config))
        second = materialize_change_plan(compile_repo_spec(default_config))
        assert first == second
