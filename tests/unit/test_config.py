"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from release_version.config.loader import (
    apply_environment,
    extract_release_version_config,
    find_pyproject_toml,
    load_config,
    load_pyproject_toml,
)
from release_version.config.models import (
    CommitsConfig,
    GitHubConfig,
    ReleaseVersionConfig,
    VersionConfig,
)
from release_version.core.version import Version
from release_version.exceptions import ConfigNotFoundError, ConfigValidationError


class TestReleaseVersionConfig:
    """Tests for ReleaseVersionConfig model."""

    def test_nested_defaults(self):
        """Nested configurations have defaults."""
        config = ReleaseVersionConfig()

        assert config.commits.breaking_marker == "BREAKING CHANGE"
        assert config.commits.prerelease_label == "release-candidate"
        assert config.version.initial_version == "0.0.0"
        assert config.github.api_url == "https://api.github.com"

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            ReleaseVersionConfig.model_validate({"commits": {"nope": 1}})


class TestCommitsConfig:
    def test_custom_label(self):
        assert CommitsConfig(prerelease_label="rc").prerelease_label == "rc"


class TestVersionConfig:
    """Tests for VersionConfig model."""

    def test_defaults(self):
        config = VersionConfig()

        assert config.initial == Version(0, 0, 0)
        assert config.build_metadata is None

    def test_invalid_initial_version(self):
        with pytest.raises(ValidationError):
            VersionConfig(initial_version="1.0")

    def test_unvalidated_initial_version_raises(self):
        """A model built without validation still refuses a bad initial version."""
        config = VersionConfig.model_construct(initial_version="1.0")

        with pytest.raises(ConfigValidationError):
            config.initial

    def test_build_metadata_validated(self):
        """Build metadata must follow the SemVer grammar."""
        assert VersionConfig(build_metadata="sha.abc123").build_metadata == "sha.abc123"
        with pytest.raises(ValidationError):
            VersionConfig(build_metadata="not valid!")

    def test_empty_build_metadata_is_none(self):
        assert VersionConfig(build_metadata="").build_metadata is None


class TestGitHubConfig:
    """Tests for GitHubConfig model."""

    def test_defaults(self):
        config = GitHubConfig()

        assert config.token is None
        assert config.repository is None
        assert config.owner is None
        assert config.repo is None

    def test_owner_and_repo(self):
        config = GitHubConfig(repository="octocat/hello-world")

        assert config.owner == "octocat"
        assert config.repo == "hello-world"

    def test_invalid_repository(self):
        with pytest.raises(ValidationError):
            GitHubConfig(repository="just-a-name")

    def test_token_hidden_from_repr(self):
        assert "secret" not in repr(GitHubConfig(token="secret"))

    def test_github_enterprise_url(self):
        config = GitHubConfig(api_url="https://github.mycompany.com/api/v3")
        assert config.api_url == "https://github.mycompany.com/api/v3"


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_load_valid_toml(self, project_with_pyproject: Path):
        data = load_pyproject_toml(project_with_pyproject / "pyproject.toml")

        assert data["project"]["name"] == "test-project"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "nonexistent.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text("[project\n")
        with pytest.raises(ConfigValidationError):
            load_pyproject_toml(path)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_find_in_current_dir(self, project_with_pyproject: Path):
        assert find_pyproject_toml(project_with_pyproject).name == "pyproject.toml"

    def test_find_in_parent_dir(self, project_with_pyproject: Path):
        subdir = project_with_pyproject / "src" / "package"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == (project_with_pyproject / "pyproject.toml").resolve()


class TestExtractConfig:
    def test_extract_existing_config(self):
        pyproject = {"tool": {"release-version": {"commits": {"prerelease_label": "rc"}}}}

        assert extract_release_version_config(pyproject) == {"commits": {"prerelease_label": "rc"}}

    def test_extract_missing_config(self):
        assert extract_release_version_config({"project": {"name": "test"}}) == {}


class TestApplyEnvironment:
    """Tests for apply_environment()."""

    def test_github_actions_variables(self):
        env = {
            "GITHUB_TOKEN": "tok",
            "GITHUB_REPOSITORY": "octo/hello",
            "GITHUB_EVENT_PATH": "/tmp/event.json",
            "INPUT_BUILD-METADATA": "build.1",
        }
        data = apply_environment({}, env)

        assert data["github"] == {
            "token": "tok",
            "repository": "octo/hello",
            "event_path": "/tmp/event.json",
        }
        assert data["version"] == {"build_metadata": "build.1"}

    def test_input_token_wins(self):
        data = apply_environment({}, {"INPUT_GITHUB_TOKEN": "input", "GITHUB_TOKEN": "env"})
        assert data["github"]["token"] == "input"

    def test_empty_values_ignored(self):
        assert apply_environment({}, {"GITHUB_TOKEN": ""}) == {}

    def test_does_not_mutate_input(self):
        original = {"github": {"api_url": "https://x"}}
        apply_environment(original, {"GITHUB_TOKEN": "tok"})
        assert original == {"github": {"api_url": "https://x"}}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_with_config(self, project_with_pyproject: Path):
        config = load_config(project_with_pyproject, env={})

        assert config.commits.prerelease_label == "rc"
        assert config.version.initial == Version(0, 1, 0)

    def test_pyproject_path_accepted(self, project_with_pyproject: Path):
        config = load_config(project_with_pyproject / "pyproject.toml", env={})
        assert config.commits.prerelease_label == "rc"

    def test_defaults_without_pyproject(self, tmp_path: Path):
        config = load_config(tmp_path, env={"GITHUB_REPOSITORY": "octo/hello"})

        assert config.github.repository == "octo/hello"
        assert config.version.initial_version == "0.0.0"

    def test_invalid_values_raise(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[tool.release-version.version]\ninitial_version = "x"\n')

        with pytest.raises(ConfigValidationError):
            load_config(tmp_path, env={})

    def test_invalid_environment_raises(self, tmp_path: Path):
        with pytest.raises(ConfigValidationError):
            load_config(tmp_path, env={"GITHUB_REPOSITORY": "broken"})
