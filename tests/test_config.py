"""Tests for alignment and workspace configuration."""

import json

import pytest

from hdlalign.config import AlignConfig, find_config_file, load_workspace_config
from hdlalign.errors import AlignConfigError
from hdlalign.formatting import DefaultAlignRules


class TestAlignConfig:
    """Test the column table."""

    def test_defaults(self):
        """Every option has a default."""
        config = AlignConfig()
        assert (config.port_num1, config.port_num5) == (4, 80)
        assert config.inst_port_value_col == 60
        assert config.assign_num3 == 0
        assert (config.upbound, config.lowbound) == (2, 2)

    def test_from_mapping_accepts_prefixed_keys(self):
        """Dotted editor keys and string numbers are accepted."""
        config = AlignConfig.from_mapping({"hdlalign.port_num1": "8", "signal_num4": 40})
        assert config.port_num1 == 8
        assert config.signal_num4 == 40
        assert config.port_num2 == 16

    def test_unknown_keys_are_ignored(self):
        """Unknown options do not raise."""
        assert AlignConfig.from_mapping({"colour": "blue"}) == AlignConfig()
        assert AlignConfig.from_mapping(None) == AlignConfig()

    @pytest.mark.parametrize("value", ["wide", -1, True, 1.5])
    def test_invalid_values(self, value):
        """Non-integer and negative values are rejected up front."""
        with pytest.raises(AlignConfigError):
            AlignConfig.from_mapping({"port_num1": value})

    def test_get_and_mapping(self):
        """get() looks options up by (prefixed) name."""
        config = AlignConfig()
        assert config.get("hdlalign.param_num3") == 50
        assert config.get("missing", 7) == 7
        assert config.to_mapping()["array_num5"] == 60
        assert config.with_overrides(port_num4=44).port_num4 == 44


class TestWorkspaceConfig:
    """Test configuration files."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """No file means the default table and no parser."""
        workspace = load_workspace_config(tmp_path)
        assert workspace.align == AlignConfig()
        assert not workspace.parser.enabled
        assert workspace.source is None

    def test_toml_file(self, tmp_path):
        """[align] and [parser] tables are read from hdlalign.toml."""
        (tmp_path / "hdlalign.toml").write_text(
            "[align]\nport_num4 = 40\n\n[parser]\ncommand = \"parse {source} {output}\"\ntimeout = 5\n",
            encoding="utf-8",
        )
        workspace = load_workspace_config(tmp_path)
        assert workspace.align.port_num4 == 40
        assert workspace.parser.command == ["parse", "{source}", "{output}"]
        assert workspace.parser.timeout == 5.0
        assert workspace.parser.tree_suffix == ".ast.json"

    def test_flat_json_file(self, tmp_path):
        """A JSON file may hold the options at the top level."""
        (tmp_path / ".hdlalign.json").write_text(json.dumps({"hdlalign.upbound": 3}), encoding="utf-8")
        assert find_config_file(tmp_path) == tmp_path / ".hdlalign.json"
        assert load_workspace_config(tmp_path).align.upbound == 3

    def test_explicit_missing_file(self, tmp_path):
        """A named file that does not exist is an error."""
        with pytest.raises(AlignConfigError):
            load_workspace_config(tmp_path, tmp_path / "other.toml")

    def test_unreadable_file(self, tmp_path):
        """Syntax errors are reported as AlignConfigError."""
        path = tmp_path / "hdlalign.toml"
        path.write_text("[align\n", encoding="utf-8")
        with pytest.raises(AlignConfigError) as exc_info:
            load_workspace_config(tmp_path)
        assert "Could not read configuration" in exc_info.value.message

    def test_bad_parser_command(self, tmp_path):
        """parser.command must be a string or a list."""
        (tmp_path / "hdlalign.toml").write_text("[parser]\ncommand = 3\n", encoding="utf-8")
        with pytest.raises(AlignConfigError):
            load_workspace_config(tmp_path)


class TestDefaultAlignRules:
    """Test the presets."""

    def test_presets(self):
        """Presets are complete configs selectable by name."""
        assert DefaultAlignRules.by_name("standard") == AlignConfig()
        assert DefaultAlignRules.by_name("compact").port_num4 < AlignConfig().port_num4
        assert DefaultAlignRules.by_name("wide").port_num4 > AlignConfig().port_num4
        assert set(DefaultAlignRules.styles()) == {"standard", "compact", "wide"}

    def test_unknown_preset(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            DefaultAlignRules.by_name("huge")
