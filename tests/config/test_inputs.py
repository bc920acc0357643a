"""
Unit tests for option loading and layering.
"""

import pytest

from ccachekit.config.inputs import (
    ActionInputs,
    load_inputs,
    parse_bool,
    read_env_inputs,
)
from ccachekit.core.exceptions import ConfigError
from ccachekit.packages.catalog import Variant
from ccachekit.packages.strategy import InstallPolicy


class TestParseBool:
    """Test boolean parsing."""

    @pytest.mark.parametrize("value", ["true", "True", "TRUE"])
    def test_true(self, value):
        """Test accepted true spellings."""
        assert parse_bool(value, "save") is True

    @pytest.mark.parametrize("value", ["false", "False", "FALSE"])
    def test_false(self, value):
        """Test accepted false spellings."""
        assert parse_bool(value, "save") is False

    @pytest.mark.parametrize("value", ["yes", "1", "tRuE", ""])
    def test_rejected(self, value):
        """Test anything else is a configuration error naming the option."""
        with pytest.raises(ConfigError, match="'save' must be a boolean"):
            parse_bool(value, "save")


class TestDefaults:
    """Test defaults."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Test values when nothing is configured."""
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))

        inputs = load_inputs(env={})

        assert inputs.variant is Variant.CCACHE
        assert inputs.install is InstallPolicy.DETECT
        assert inputs.key == ""
        assert inputs.restore_keys == []
        assert inputs.append_timestamp is True
        assert inputs.restore is True
        assert inputs.save is True
        assert inputs.max_size == "500M"
        assert inputs.create_symlink is False
        assert inputs.update_package_index is False
        assert inputs.evict_old_files == ""
        assert inputs.store_dir.name == "store"


class TestLayering:
    """Test defaults < config file < environment < command line."""

    def test_env_inputs(self):
        """Test INPUT_<NAME> variables, hyphens included."""
        env = {
            "INPUT_VARIANT": "sccache",
            "INPUT_RESTORE-KEYS": "a\nb\n",
            "INPUT_KEY": "",
            "OTHER": "x",
        }
        assert read_env_inputs(env) == {"variant": "sccache", "restore-keys": "a\nb\n"}

    def test_config_file(self, tmp_path):
        """Test YAML values with underscores, booleans and lists."""
        config = tmp_path / "ccachekit.yaml"
        config.write_text(
            "variant: sccache\n"
            "append_timestamp: false\n"
            "restore-keys:\n"
            "  - linux\n"
            "  - any\n"
            f"store-dir: {tmp_path / 'store'}\n"
        )

        inputs = load_inputs(config_file=config, env={})

        assert inputs.variant is Variant.SCCACHE
        assert inputs.append_timestamp is False
        assert inputs.restore_keys == ["linux", "any"]
        assert inputs.store_dir == tmp_path / "store"

    def test_precedence(self, tmp_path):
        """Test later sources win."""
        config = tmp_path / "ccachekit.yaml"
        config.write_text("key: from-file\nmax-size: 1G\ninstall: no_such\n")

        inputs = load_inputs(
            config_file=config,
            env={"INPUT_KEY": "from-env", "INPUT_INSTALL": "binary"},
            overrides={"key": "from-cli", "max_size": None},
        )

        assert inputs.key == "from-cli"
        assert inputs.max_size == "1G"
        assert inputs.install is InstallPolicy.BINARY

    def test_cli_restore_keys_list(self):
        """Test repeated command-line restore keys."""
        inputs = load_inputs(env={}, overrides={"restore-keys": ["a", "b"]})
        assert inputs.restore_keys == ["a", "b"]

    def test_unknown_option_in_file(self, tmp_path):
        """Test unknown options in the config file are rejected."""
        config = tmp_path / "ccachekit.yaml"
        config.write_text("colour: blue\n")

        with pytest.raises(ConfigError, match="Unknown option 'colour'"):
            load_inputs(config_file=config, env={})

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors."""
        config = tmp_path / "ccachekit.yaml"
        config.write_text("key: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_inputs(config_file=config, env={})

    def test_missing_file(self, tmp_path):
        """Test a missing config file."""
        with pytest.raises(ConfigError, match="not found"):
            load_inputs(config_file=tmp_path / "missing.yaml", env={})

    def test_invalid_values(self):
        """Test unknown variant and policy values."""
        with pytest.raises(ConfigError, match="Unknown variant"):
            load_inputs(env={"INPUT_VARIANT": "distcc"})
        with pytest.raises(ConfigError, match="Unknown install policy"):
            load_inputs(env={"INPUT_INSTALL": "always"})


def test_dataclass_defaults_match_option_defaults():
    """Test the dataclass defaults agree with the raw option defaults."""
    defaults = ActionInputs()
    assert defaults.variant is Variant.CCACHE
    assert defaults.install is InstallPolicy.DETECT
    assert defaults.max_size == "500M"


def test_yaml_boolean_install_policy(tmp_path):
    """Test an unquoted 'install: no' in YAML means the no policy."""
    config = tmp_path / "ccachekit.yaml"
    config.write_text("install: no\n")

    assert load_inputs(config_file=config, env={}).install is InstallPolicy.NO
