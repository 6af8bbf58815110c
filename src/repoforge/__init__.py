"""repoforge: deterministic compiler core for a repository bootstrap wizard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("repoforge")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from repoforge.changeplan import ChangePlan, materialize_change_plan
from repoforge.compiler import RepoSpec, compile_repo_spec
from repoforge.config import create_default_config
from repoforge.publisher import publish_from_change_plan
from repoforge.recommend import recommend_automation_candidates
from repoforge.renderer import render_publisher_artifacts
from repoforge.resolver import resolve_packs

__all__ = [
    "ChangePlan",
    "RepoSpec",
    "__version__",
    "compile_repo_spec",
    "create_default_config",
    "materialize_change_plan",
    "publish_from_change_plan",
    "recommend_automation_candidates",
    "render_publisher_artifacts",
    "resolve_packs",
]
