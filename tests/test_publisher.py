"""Tests for publisher action mapping and shared validation."""

from __future__ import annotations

import pytest

from repoforge.changeplan import COMPLETE_MESSAGE, materialize_change_plan
from repoforge.compiler import compile_repo_spec
from repoforge.publisher import PublisherAction, branch_name, publish_from_change_plan, slugify
from repoforge.types import PlanConfig
from repoforge.validation import parse_owner_overrides, validate_override_map, validate_publish_target


def _publish(config: PlanConfig, **kwargs: object) -> list[PublisherAction]:
    spec = compile_repo_spec(config)
    return publish_from_change_plan(config, spec, materialize_change_plan(spec), **kwargs)  # type: ignore[arg-type]


class TestSlug:
    def test_slugify(self) -> None:
        assert slugify("  My Cool App!! ") == "my-cool-app"
        assert slugify("already-fine") == "already-fine"
        assert slugify("!!!") == "project"

    def test_branch_name(self) -> None:
        assert branch_name("My App", 3) == "repoforge/my-app/apply-3"


class TestLocalTarget:
    def test_artifacts_then_operations(self, default_config: PlanConfig) -> None:
        actions = _publish(default_config)
        assert len(actions) == 29
        first = actions[0]
        assert (first.id, first.action, first.target, first.source_operation_id) == (
            "local-render-1",
            "local.render",
            ".projenrc.ts",
            "init",
        )
        assert actions[8].action == "local.plan"
        assert actions[8].target == ".github/rulesets/preview.json"
        assert actions[9].id == "local-op-1"

    def test_operation_verbs(self, default_config: PlanConfig) -> None:
        by_source = {a.source_operation_id: a for a in _publish(default_config)[9:]}
        assert by_source["init"].action == "local.workflow"
        assert by_source["init"].target == "Initializing git repository..."
        assert by_source["create-1"].action == "local.write-file"
        assert by_source["create-1"].target == ".env.example"
        assert by_source["install"].action == "local.install-dependencies"
        assert by_source["quality"].action == "local.run-quality-gates"
        assert by_source["complete"].action == "local.complete"
        assert by_source["complete"].target == COMPLETE_MESSAGE


class TestPullRequestTarget:
    def test_branch_per_operation(self, default_config: PlanConfig) -> None:
        actions = _publish(default_config, target="pr")
        assert actions[0].target == "repoforge/my-awesome-project/apply-1:.projenrc.ts"
        create = actions[13]
        assert create.id == "pr-op-5"
        assert create.action == "pr.stage-file"
        assert create.target == "repoforge/my-awesome-project/apply-5:.env.example"
        assert actions[-1].action == "pr.open"

    def test_every_target_has_branch_prefix(self, default_config: PlanConfig) -> None:
        default_config["project_name"] = "  Fancy Name!  "
        actions = _publish(default_config, target="pr")
        assert all(a.target.startswith("repoforge/fancy-name/apply-") for a in actions)


class TestCreateRepoTarget:
    def test_visibility_prefix(self, default_config: PlanConfig) -> None:
        actions = _publish(default_config, target="create-repo")
        assert actions[13].action == "create-repo.seed-file"
        assert actions[13].target == "public:my-awesome-project/.env.example"
        assert actions[-1].action == "create-repo.initialize"

    def test_private_repo(self, default_config: PlanConfig) -> None:
        default_config["visibility"] = "private"
        actions = _publish(default_config, target="create-repo")
        assert all(a.target.startswith("private:my-awesome-project/") for a in actions)


class TestUserMode:
    def test_power_mode_enables_rust_experimental(self, rust_config: PlanConfig) -> None:
        rust_config["stack"]["rust_mode"] = "projen-experimental"
        assert _publish(rust_config, user_mode="power")[0].target == ".projenrc.ts"
        assert _publish(rust_config, user_mode="basic")[0].target == "templates/rust/template-manifest.md"

    def test_unknown_target_raises(self, default_config: PlanConfig) -> None:
        with pytest.raises(ValueError, match="publish target"):
            _publish(default_config, target="ftp")

    def test_unknown_user_mode_raises(self, default_config: PlanConfig) -> None:
        with pytest.raises(ValueError, match="user mode"):
            _publish(default_config, user_mode="admin")


class TestValidation:
    def test_publish_target(self) -> None:
        assert validate_publish_target("pr") == ("pr", None)
        value, error = validate_publish_target(3)
        assert value == ""
        assert error is not None

    def test_parse_overrides(self) -> None:
        overrides, error = parse_owner_overrides(["a:b=pack.one", " a:b = pack.two ", "c:d=pack.three"])
        assert error is None
        assert overrides == {"a:b": "pack.two", "c:d": "pack.three"}

    def test_parse_overrides_rejects_malformed(self) -> None:
        overrides, error = parse_owner_overrides(["missing-separator"])
        assert overrides == {}
        assert error is not None and "CAPABILITY=PACK" in error

    def test_override_map(self) -> None:
        assert validate_override_map(None) == ({}, None)
        assert validate_override_map({"release:ownership": "pack.release.semantic"})[1] is None
        assert validate_override_map(["not", "a", "dict"])[1] is not None
        assert validate_override_map({"release:ownership": ""})[1] is not None
