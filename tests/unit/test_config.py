"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_flow.config.loader import (
    extract_release_flow_config,
    find_config_file,
    find_pyproject_toml,
    load_config,
    load_config_file,
    load_toml,
    locate_config,
    parse_config,
)
from release_flow.config.models import (
    DEFAULT_COMMIT_MESSAGE,
    BumpFileConfig,
    ChangelogConfig,
    ReleaseFlowConfig,
    VersionConfig,
)
from release_flow.core.commits import PreReleaseMode
from release_flow.exceptions import ConfigNotFoundError, ConfigValidationError


class TestReleaseFlowConfig:
    """Tests for ReleaseFlowConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = ReleaseFlowConfig()

        assert config.annotated_tags is False
        assert config.env == {}
        assert config.bumps == []
        assert config.changelog_path == Path("CHANGELOG.md")
        assert config.commit.message == DEFAULT_COMMIT_MESSAGE

    def test_nested_defaults(self):
        """Nested configurations have defaults."""
        config = ReleaseFlowConfig()

        assert config.hooks.before == []
        assert config.git.push_options == []
        assert config.version.prerelease_mode is PreReleaseMode.NONE
        assert config.version.prerelease_type == "alpha"
        assert config.version.patch_types == ["fix", "perf", "security"]

    def test_dashed_keys(self):
        """Keys are accepted with dashes as written in TOML."""
        config = ReleaseFlowConfig.model_validate(
            {
                "annotated-tags": True,
                "hooks": {"before-bump": ["make build"]},
                "git": {"push-options": ["ci.skip"]},
            }
        )

        assert config.annotated_tags
        assert config.hooks.before_bump == ["make build"]
        assert config.git.push_options == ["ci.skip"]

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            ReleaseFlowConfig.model_validate({"unknown": 1})


class TestSectionValidation:
    """Tests for section-level validators."""

    def test_sort_lowercased(self):
        assert ChangelogConfig(sort="ASC").sort == "asc"

    def test_invalid_sort(self):
        with pytest.raises(ValueError):
            ChangelogConfig(sort="random")

    def test_empty_pattern(self):
        with pytest.raises(ValueError, match="pattern cannot be empty"):
            ChangelogConfig(include=["  "])

    def test_invalid_pattern(self):
        with pytest.raises(ValueError, match="invalid regex"):
            ChangelogConfig(exclude=["(unclosed"])

    def test_prerelease_mode(self):
        assert VersionConfig(prerelease_mode="AUTO").prerelease_mode is PreReleaseMode.AUTO

    def test_patch_types_merged(self):
        assert VersionConfig(patch_types=["deps", "fix"]).patch_types == [
            "fix",
            "perf",
            "security",
            "deps",
        ]

    def test_bump_regex_needs_token(self):
        with pytest.raises(ValueError, match="{version}"):
            BumpFileConfig(file=Path("x.py"), regex="__version__ = ")

    def test_bump_without_regex(self):
        bump = BumpFileConfig(file=Path("pyproject.toml"))

        assert bump.regex is None
        assert bump.count == 0


class TestLoadToml:
    """Tests for TOML reading helpers."""

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            load_toml(tmp_path / "nope.toml")

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("this is = = not toml")

        with pytest.raises(ConfigValidationError, match="Invalid TOML"):
            load_toml(path)

    def test_extract(self):
        data = {"tool": {"release-flow": {"annotated-tags": True}, "ruff": {}}}

        assert extract_release_flow_config(data) == {"annotated-tags": True}
        assert extract_release_flow_config({}) == {}

    def test_parse_config_error_names_source(self, tmp_path: Path):
        with pytest.raises(ConfigValidationError, match="bad.toml"):
            parse_config({"bumps": [{"regex": "{version}"}]}, tmp_path / "bad.toml")

    def test_find_pyproject_in_parent(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_pyproject_toml(nested) == (tmp_path / "pyproject.toml").resolve()


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults_without_files(self, tmp_path: Path):
        assert load_config(tmp_path) == ReleaseFlowConfig()

    def test_dedicated_file(self, tmp_path: Path):
        (tmp_path / "release-flow.toml").write_text(
            'annotated-tags = true\n\n[changelog]\npath = "docs/CHANGES.md"\n'
        )

        config = load_config(tmp_path)

        assert config.annotated_tags
        assert config.changelog.path == Path("docs/CHANGES.md")

    def test_dotfile(self, tmp_path: Path):
        (tmp_path / ".release-flow.toml").write_text("[version]\nprerelease-mode = 'always'\n")

        assert load_config(tmp_path).version.prerelease_mode is PreReleaseMode.ALWAYS

    def test_lookup_order(self, tmp_path: Path):
        (tmp_path / "release-flow.toml").write_text("annotated-tags = true\n")
        (tmp_path / ".release-flow.toml").write_text("annotated-tags = false\n")

        assert find_config_file(tmp_path) == tmp_path / "release-flow.toml"
        assert load_config(tmp_path).annotated_tags

    def test_pyproject_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            "[project]\nname = 'x'\n\n"
            "[tool.release-flow]\nenv = { STAGE = 'prod' }\n\n"
            "[[tool.release-flow.bumps]]\nfile = 'src/x/__init__.py'\n"
            "regex = '__version__ = \"{version}\"'\n"
        )

        config = load_config(tmp_path)

        assert config.env == {"STAGE": "prod"}
        assert config.bumps[0].file == Path("src/x/__init__.py")
        assert config.bumps[0].regex == '__version__ = "{version}"'

    def test_pyproject_without_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")

        assert load_config(tmp_path) == ReleaseFlowConfig()

    def test_invalid_values(self, tmp_path: Path):
        (tmp_path / "release-flow.toml").write_text("[changelog]\nsort = 'sideways'\n")

        with pytest.raises(ConfigValidationError, match="Invalid configuration"):
            load_config(tmp_path)


class TestLocateConfig:
    """Tests for locate_config() and load_config_file()."""

    def test_dedicated_file(self, tmp_path: Path):
        (tmp_path / ".release-flow.toml").write_text("annotated-tags = true\n")

        assert locate_config(tmp_path) == tmp_path / ".release-flow.toml"

    def test_pyproject_with_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[tool.release-flow]\nannotated-tags = true\n")

        path = locate_config(tmp_path)

        assert path == tmp_path / "pyproject.toml"
        assert load_config_file(path).annotated_tags

    def test_pyproject_without_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'demo'\n")

        assert locate_config(tmp_path) is None

    def test_nothing(self, tmp_path: Path):
        assert locate_config(tmp_path) is None

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text("[version]\nprerelease-mode = 'sometimes'\n")

        with pytest.raises(ConfigValidationError, match="custom.toml"):
            load_config_file(path)
