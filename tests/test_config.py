"""
Tests for configuration loading.
"""

import pytest

from scd_extract.config import ExtractConfig, load_config, validate_config
from scd_extract.exceptions import InvalidConfigError


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Test defaults are used when no scd-extract.yaml exists."""
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config == ExtractConfig()
        assert config.indent == "  "
        assert config.enum_policy == "preserve"
        assert config.verbatim_containers == ["Private"]

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        """Test scd-extract.yaml in the working directory is picked up."""
        (tmp_path / "scd-extract.yaml").write_text("extract:\n  enum_policy: prune\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().enum_policy == "prune"

    def test_explicit_file(self, tmp_path):
        """Test every setting is read from an explicit file."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(
            "format:\n"
            "  indent: '    '\n"
            "  declaration: '<?xml version=\"1.0\" encoding=\"UTF-8\"?>'\n"
            "  verbatim_containers: [Private, Script]\n"
            "extract:\n"
            "  enum_policy: prune\n"
            "  strict_references: true\n"
            "  output_extension: .iid\n"
        )

        config = load_config(config_file)

        assert config.indent == "    "
        assert config.declaration == '<?xml version="1.0" encoding="UTF-8"?>'
        assert config.verbatim_containers == ["Private", "Script"]
        assert config.enum_policy == "prune"
        assert config.strict_references is True
        assert config.output_extension == ".iid"

    def test_partial_file_keeps_defaults(self, tmp_path):
        """Test unspecified settings keep their defaults."""
        config_file = tmp_path / "partial.yaml"
        config_file.write_text("format:\n  indent: \"\\t\"\n")

        config = load_config(config_file)

        assert config.indent == "\t"
        assert config.output_extension == ".cid"

    def test_missing_explicit_file(self, tmp_path):
        """Test an explicit path that does not exist raises."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        """Test an empty config file is rejected."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(config_file)
        assert "empty" in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(config_file)
        assert "list" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors are reported as config errors."""
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("format: [unclosed\n")

        with pytest.raises(InvalidConfigError):
            load_config(config_file)


class TestValidateConfig:
    """Tests for schema validation."""

    def test_valid(self):
        """Test a valid mapping passes."""
        validate_config({"format": {"indent": "  "}, "extract": {"enum_policy": "preserve"}})

    def test_unknown_enum_policy(self):
        """Test enum_policy is restricted to known values."""
        with pytest.raises(InvalidConfigError) as exc_info:
            validate_config({"extract": {"enum_policy": "sometimes"}})
        assert "extract.enum_policy" in str(exc_info.value)

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(InvalidConfigError):
            validate_config({"llm": {"provider": "mock"}})

    def test_indent_must_be_whitespace(self):
        """Test the indent unit cannot contain visible characters."""
        with pytest.raises(InvalidConfigError):
            validate_config({"format": {"indent": "--"}})

    def test_wrong_type(self):
        """Test strict_references must be a boolean."""
        with pytest.raises(InvalidConfigError):
            validate_config({"extract": {"strict_references": "yes"}})
