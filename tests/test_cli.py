"""CLI tests using click's CliRunner."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from click.testing import CliRunner

from repoforge.cli import cli
from repoforge.logging import LOGGER_NAME


class TestCompile:
    def test_text_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["compile"])
        assert result.exit_code == 0, result.output
        assert "Name:            my-awesome-project" in result.output
        assert "Governance:      Team Standard (ruleset: standard)" in result.output
        assert "Files (13):" in result.output

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["compile", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["name"] == "my-awesome-project"
        assert "package.json" in data["files"]

    def test_config_file(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["compile", "--config", str(config_file), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["name"] == "Rusty Service"
        assert data["governance"]["posture"] == "Strict"
        assert data["automation"]["dependabot"]["schedule"] == "daily"
        assert "Cargo.toml" in data["files"]

    def test_missing_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["compile", "--config", str(tmp_path / "absent.json")])
        assert result.exit_code == 1
        assert "Cannot load configuration" in result.output

    def test_unknown_bundle(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["compile", "--bundle", "bundle.nope"])
        assert result.exit_code == 1
        assert "Unknown bundle: bundle.nope" in result.output

    def test_config_file_wins_over_bundle(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["compile", "--bundle", "bundle.stack.go-api", "--config", str(config_file), "--json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["name"] == "Rusty Service"
        assert data["architecture"] == "Clean"
        assert "Cargo.toml" in data["files"]


class TestPacks:
    def test_override(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "packs",
                "--bundle",
                "bundle.governance.team-standard",
                "--override",
                "release:ownership=pack.release.gh-release",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "pack.release.gh-release" in result.output.splitlines()[0]
        assert "Capability conflicts:" in result.output
        assert "pack.release.gh-release drops pack.release.semantic" in result.output
        assert "release: gh release create" in result.output

    def test_malformed_override(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["packs", "--override", "no-separator"])
        assert result.exit_code == 1
        assert "CAPABILITY=PACK" in result.output

    def test_catalog_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["packs", "--catalog", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 11
        assert data[0]["id"] == "pack.runtime.framework"

    def test_resolution_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["packs", "--json"])
        data = json.loads(result.output)
        assert data["capability_owners"]["docs:content"] == ["pack.docs.templates"]


class TestPlanAndRecommend:
    def test_plan_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["plan", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["version"] == 1
        assert len(data["operations"]) == 20

    def test_plan_text(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["plan"])
        assert "Change plan v1 (20 operations)" in result.output

    def test_recommend(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["recommend"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0].startswith("1. Balanced Throughput")


class TestRenderAndPublish:
    def test_render_rust(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["render", "--config", str(config_file), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data[0]["path"] == "templates/rust/template-manifest.md"

    def test_render_apply_wording(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["render", "--apply"])
        assert "[file] .projenrc.ts: Wrote .projenrc.ts" in result.output

    def test_publish_pr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["publish", "--target", "pr", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert all(a["target"].startswith("repoforge/my-awesome-project/apply-") for a in data)
        assert data[-1]["action"] == "pr.open"

    def test_publish_invalid_target(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["publish", "--target", "ftp"])
        assert result.exit_code == 2


class TestBundlesAndSimulate:
    def test_bundles_text(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bundles"])
        assert result.exit_code == 0
        assert "bundle.stack.next-full" in result.output

    def test_bundles_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bundles", "--json"])
        assert len(json.loads(result.output)) == 6

    def test_simulate(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["simulate", "--tick", "0"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "  Initializing git repository..."
        assert "+ Created README.md" in lines
        assert lines[-1] == "* Bootstrap complete. Ready to code."

    def test_simulate_json_lines(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["simulate", "--tick", "0", "--json"])
        assert result.exit_code == 0, result.output
        entries = [json.loads(line) for line in result.output.splitlines()]
        assert entries[0]["message"] == "Initializing git repository..."
        assert entries[-1]["type"] == "success"

    def test_simulate_negative_tick(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["simulate", "--tick", "-1"])
        assert result.exit_code == 2
        assert "--tick" in result.output


class TestGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "repoforge" in result.output

    def test_log_dir(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        try:
            result = cli_runner.invoke(cli, ["--log-dir", str(log_dir), "compile"])
            assert result.exit_code == 0
            assert (log_dir / "repoforge.log").exists()
        finally:
            logger = logging.getLogger(LOGGER_NAME)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
                handler.close()
