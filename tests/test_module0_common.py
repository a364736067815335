# file: tests/test_module0_common.py

"""
Unit tests for Module 0: configuration, errors and randomness sources.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from module0_common import (
    DEFAULT_CONFIG,
    ConfigurationError,
    DendecError,
    InputFormatError,
    SeededRandomSource,
    SystemRandomSource,
    load_config,
    merge_config,
    resolve_config,
    validate_config,
)
from module0_common.config import CONFIG_ENV_VAR


class TestLoadConfig:
    """Test YAML loading and default fallback."""

    def test_defaults_without_file(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_partial_override_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "dendec.yaml"
        path.write_text("crypto:\n  kdf:\n    time_cost: 5\nformat:\n  group: 8\n")

        config = load_config(str(path))

        assert config['crypto']['kdf']['time_cost'] == 5
        assert config['crypto']['kdf']['memory_cost'] == 65536
        assert config['format']['group'] == 8
        assert config['format']['alphabet'] == "ATGC"

    def test_env_var_is_used(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("wrap:\n  suffix: .seq\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_config()['wrap']['suffix'] == ".seq"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_shipped_default_config_matches_defaults(self):
        path = Path(__file__).parent.parent / "config" / "default_config.yaml"
        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("crypto: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(path))

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(str(path))


class TestValidateConfig:
    """Test rejection of unusable values."""

    def test_defaults_are_valid(self):
        validate_config(DEFAULT_CONFIG)

    def test_short_hash_len(self):
        with pytest.raises(ConfigurationError, match="hash_len"):
            merge_config({'crypto': {'kdf': {'hash_len': 32}}})

    def test_alphabet_with_duplicates(self):
        with pytest.raises(ConfigurationError, match="4 distinct"):
            merge_config({'format': {'alphabet': "AATG"}})

    def test_alphabet_wrong_length(self):
        with pytest.raises(ConfigurationError, match="4 distinct"):
            merge_config({'format': {'alphabet': "ACGTU"}})

    def test_separator_overlapping_alphabet(self):
        with pytest.raises(ConfigurationError, match="overlap"):
            merge_config({'format': {'separators': "-A"}})

    def test_bad_magic(self):
        with pytest.raises(ConfigurationError, match="magic"):
            merge_config({'format': {'magic': "DNA"}})

    def test_version_out_of_range(self):
        with pytest.raises(ConfigurationError, match="version"):
            merge_config({'format': {'version': 256}})

    def test_threshold_out_of_range(self):
        with pytest.raises(ConfigurationError, match="binary_threshold"):
            merge_config({'wrap': {'binary_threshold': 1.5}})

    def test_suffix_without_dot(self):
        with pytest.raises(ConfigurationError, match="suffix"):
            merge_config({'wrap': {'suffix': "dna"}})

    def test_missing_section(self):
        with pytest.raises(ConfigurationError, match="Missing required config key"):
            validate_config({'crypto': {}})

    def test_merge_does_not_mutate_defaults(self):
        merge_config({'crypto': {'kdf': {'time_cost': 9}}})
        assert DEFAULT_CONFIG['crypto']['kdf']['time_cost'] == 3

    def test_resolve_passes_through(self):
        config = merge_config({})
        assert resolve_config(config) is config


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(ConfigurationError, DendecError)
        assert issubclass(InputFormatError, DendecError)


class TestRandomSources:
    def test_system_source_lengths(self):
        source = SystemRandomSource()
        assert len(source.token_bytes(16)) == 16
        assert source.token_bytes(12) != source.token_bytes(12)

    def test_seeded_source_is_reproducible(self):
        a = SeededRandomSource(7)
        b = SeededRandomSource(7)
        assert a.token_bytes(16) == b.token_bytes(16)
        assert a.token_bytes(12) == b.token_bytes(12)

    def test_seeded_sources_differ_by_seed(self):
        assert SeededRandomSource(1).token_bytes(16) != SeededRandomSource(2).token_bytes(16)
