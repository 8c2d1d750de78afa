"""
Tests for configuration loading from YAML and environment variables.
"""
import logging

import yaml

from formula_cli.config import ConfigManager, FormulaCLIConfig, get_config_manager


class TestConfigManager:
    """Loading and saving configuration"""

    def test_defaults_without_file(self, isolated_home):
        config = ConfigManager(config_dir=isolated_home / "cfg").load_config()
        assert config == FormulaCLIConfig()
        assert config.cursor_color == "#000000"
        assert config.placeholder_when_empty is True

    def test_load_from_file(self, isolated_home):
        config_dir = isolated_home / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(yaml.dump({
            "cursor_color": "1E88E5",
            "placeholder_when_empty": False,
            "indent": 4,
            "functions": {"vec": {"expression": "\\vec", "args": ["braces"]}},
            "symbols": {"alpha": "\\alpha"},
        }))
        config = ConfigManager(config_dir=config_dir).load_config()
        assert config.cursor_color == "#1e88e5"
        assert config.placeholder_when_empty is False
        assert config.indent == 4
        assert config.build_catalogue().lookup("alpha") == "\\alpha"
        assert config.build_catalogue().function("vec").expression == "\\vec"

    def test_environment_overrides_file(self, isolated_home, monkeypatch):
        config_dir = isolated_home / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("cursor_color: '#ff0000'\n")
        monkeypatch.setenv("FORMULA_CLI_CURSOR_COLOR", "#00ff00")
        monkeypatch.setenv("FORMULA_CLI_PLACEHOLDER", "no")
        monkeypatch.setenv("FORMULA_CLI_LOG_LEVEL", "debug")
        config = ConfigManager(config_dir=config_dir).load_config()
        assert config.cursor_color == "#00ff00"
        assert config.placeholder_when_empty is False
        assert config.log_level == "DEBUG"

    def test_invalid_values_are_ignored(self, isolated_home, caplog):
        config_dir = isolated_home / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("cursor_color: red\nindent: wide\n")
        with caplog.at_level(logging.WARNING, logger="formula_cli.config"):
            config = ConfigManager(config_dir=config_dir).load_config()
        assert config.cursor_color == "#000000"
        assert config.indent == 2
        assert "Ignoring cursor color" in caplog.text

    def test_broken_yaml_keeps_defaults(self, isolated_home, caplog):
        config_dir = isolated_home / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("cursor_color: [unclosed\n")
        with caplog.at_level(logging.WARNING, logger="formula_cli.config"):
            config = ConfigManager(config_dir=config_dir).load_config()
        assert config == FormulaCLIConfig()
        assert "Could not load config file" in caplog.text

    def test_save_and_reload(self, isolated_home):
        config_dir = isolated_home / "cfg"
        manager = ConfigManager(config_dir=config_dir)
        config = FormulaCLIConfig(cursor_color="#123456", symbols={"alpha": "\\alpha"})
        manager.save_config(config)
        reloaded = ConfigManager(config_dir=config_dir).load_config()
        assert reloaded.cursor_color == "#123456"
        assert reloaded.symbols == {"alpha": "\\alpha"}

    def test_config_info(self, isolated_home):
        manager = ConfigManager(config_dir=isolated_home / "cfg")
        manager.create_default_config()
        info = manager.get_config_info()
        assert info["config_exists"] is True
        assert info["extra_functions"] == []

    def test_global_manager_uses_home(self, isolated_home):
        manager = get_config_manager()
        assert manager.config_file == isolated_home / ".formula-cli" / "config.yaml"
        assert get_config_manager() is manager
