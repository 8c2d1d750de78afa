"""
Configuration management for Formula CLI.

Handles loading and managing configuration from the YAML config file and
environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.tex_builder import color_to_hex
from .editor.catalogue import FunctionCatalogue

logger = logging.getLogger(__name__)


@dataclass
class FormulaCLIConfig:
    """Main configuration for Formula CLI."""

    # Rendering
    cursor_color: str = "#000000"
    placeholder_when_empty: bool = True

    # JSON output
    indent: int = 2

    # Extra catalogue entries: name -> {expression, args, description}
    functions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    # Extra symbols: name -> TeX
    symbols: Dict[str, str] = field(default_factory=dict)

    log_level: str = "WARNING"

    def build_catalogue(self) -> FunctionCatalogue:
        return FunctionCatalogue.from_config(self.functions, self.symbols)


class ConfigManager:
    """Manages Formula CLI configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.formula-cli'
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[FormulaCLIConfig] = None

    def load_config(self) -> FormulaCLIConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        # Start with defaults
        config = FormulaCLIConfig()

        # Load from file if it exists
        if self.config_file.exists():
            file_config = self._load_from_file()
            config = self._merge_configs(config, file_config)

        # Override with environment variables
        env_config = self._load_from_env()
        config = self._merge_configs(config, env_config)

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file}: expected a mapping")
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        cursor_color = os.getenv('FORMULA_CLI_CURSOR_COLOR')
        if cursor_color:
            env_config['cursor_color'] = cursor_color

        placeholder = os.getenv('FORMULA_CLI_PLACEHOLDER')
        if placeholder:
            env_config['placeholder_when_empty'] = placeholder.lower() in ('true', '1', 'yes', 'on')

        log_level = os.getenv('FORMULA_CLI_LOG_LEVEL')
        if log_level:
            env_config['log_level'] = log_level

        return env_config

    def _merge_configs(self, base: FormulaCLIConfig, override: Dict[str, Any]) -> FormulaCLIConfig:
        """Merge a configuration dictionary into ``base``."""
        if 'cursor_color' in override:
            try:
                base.cursor_color = color_to_hex(override['cursor_color'])
            except ValueError as e:
                logger.warning(f"Ignoring cursor color: {e}")

        if 'placeholder_when_empty' in override:
            base.placeholder_when_empty = bool(override['placeholder_when_empty'])

        if 'indent' in override:
            try:
                base.indent = int(override['indent'])
            except (TypeError, ValueError):
                logger.warning(f"Ignoring indent: {override['indent']!r}")

        if 'log_level' in override:
            base.log_level = str(override['log_level']).upper()

        if isinstance(override.get('functions'), dict):
            base.functions.update(override['functions'])

        if isinstance(override.get('symbols'), dict):
            base.symbols.update(override['symbols'])

        return base

    def save_config(self, config: FormulaCLIConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'cursor_color': config.cursor_color,
            'placeholder_when_empty': config.placeholder_when_empty,
            'indent': config.indent,
            'log_level': config.log_level,
            'functions': config.functions,
            'symbols': config.symbols,
        }

        try:
            with open(self.config_file, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config file: {e}")
            return
        self._config = config

    def create_default_config(self) -> None:
        """Create a default configuration file."""
        self.save_config(FormulaCLIConfig())
        logger.info(f"Created default configuration at {self.config_file}")

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'cursor_color': config.cursor_color,
            'placeholder_when_empty': config.placeholder_when_empty,
            'extra_functions': sorted(config.functions),
            'extra_symbols': sorted(config.symbols),
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> FormulaCLIConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
