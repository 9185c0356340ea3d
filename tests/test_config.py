"""Tests for configuration loading and validation."""

import dataclasses

import pytest

from corpus_forensics.config import DEFAULT_CONFIG, EngineConfig, load_config
from corpus_forensics.exceptions import ConfigurationError, ErrorCode


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep real user/project config files and FORENSICS_* variables out of the way."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for field in dataclasses.fields(EngineConfig):
        monkeypatch.delenv(f"FORENSICS_{field.name.upper()}", raising=False)
    return home, project


class TestEngineConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.patch_cache_size == 32
        assert DEFAULT_CONFIG.snapshot_cache_size == 32
        assert DEFAULT_CONFIG.max_diff_lines == 8000
        assert DEFAULT_CONFIG.index_batch_size == 3
        assert DEFAULT_CONFIG.single_search_limit == 50
        assert DEFAULT_CONFIG.corpus_search_limit == 100
        assert (DEFAULT_CONFIG.snippet_before, DEFAULT_CONFIG.snippet_after) == (40, 60)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.max_diff_lines = 1

    @pytest.mark.parametrize(
        "field,value",
        [
            ("patch_cache_size", 0),
            ("max_diff_lines", 0),
            ("index_batch_size", 0),
            ("snippet_before", -1),
            ("verbosity", "loud"),
        ],
    )
    def test_validation(self, field, value):
        with pytest.raises(ValueError):
            EngineConfig(**{field: value})


class TestLoadConfig:
    def test_no_sources_gives_defaults(self):
        assert load_config() == DEFAULT_CONFIG

    def test_overrides(self):
        assert load_config(max_diff_lines=4000).max_diff_lines == 4000

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"

    def test_invalid_override(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(index_batch_size=0)
        assert exc_info.value.code == ErrorCode.CF202

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(not_a_setting=1)
        assert exc_info.value.code == ErrorCode.CF202

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text("max_diff_lines = 1234\nsnippet_after = 10\n")
        config = load_config(path)
        assert config.max_diff_lines == 1234
        assert config.snippet_after == 10

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "nope.toml")
        assert exc_info.value.code == ErrorCode.CF200

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("max_diff_lines = = 3\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert exc_info.value.code == ErrorCode.CF201

    def test_project_overrides_global(self, isolated_environment):
        home, project = isolated_environment
        (home / ".corpus-forensics.toml").write_text("max_diff_lines = 50\npatch_cache_size = 4\n")
        (project / "corpus-forensics.toml").write_text("max_diff_lines = 100\n")
        config = load_config()
        assert config.max_diff_lines == 100
        assert config.patch_cache_size == 4

    def test_environment_overrides_files(self, isolated_environment, monkeypatch):
        _, project = isolated_environment
        (project / "corpus-forensics.toml").write_text("max_diff_lines = 100\n")
        monkeypatch.setenv("FORENSICS_MAX_DIFF_LINES", "4000")
        monkeypatch.setenv("FORENSICS_VERBOSITY", "quiet")
        config = load_config()
        assert config.max_diff_lines == 4000
        assert config.verbosity == "quiet"

    def test_keyword_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("FORENSICS_MAX_DIFF_LINES", "4000")
        assert load_config(max_diff_lines=10).max_diff_lines == 10

    def test_bad_environment_value(self, monkeypatch):
        monkeypatch.setenv("FORENSICS_INDEX_BATCH_SIZE", "three")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()
        assert exc_info.value.code == ErrorCode.CF203
        assert exc_info.value.context["variable"] == "FORENSICS_INDEX_BATCH_SIZE"
