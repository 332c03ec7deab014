"""
Configuration system for componentlint

Provides configuration management with support for files and environment variables.
Includes validation, default value handling, and configuration merging.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any, Tuple
import logging

logger = logging.getLogger(__name__)

RULE_PREFER_STATELESS = "prefer-stateless-function"
RULE_SORT_DEFAULT_PROPS = "sort-default-props"
KNOWN_RULES = (RULE_PREFER_STATELESS, RULE_SORT_DEFAULT_PROPS)

# camelCase option spellings accepted alongside the snake_case names
_OPTION_ALIASES = {
    "ignoreCase": "ignore_case",
    "ignorePureComponents": "ignore_pure_components",
    "createClass": "create_class",
    "enabledRules": "enabled_rules",
    "maxFileSize": "max_file_size",
}


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


def parse_version(version: str) -> Tuple[int, int, int]:
    """Parse 'major.minor.patch' (missing or non-numeric parts count as 0)."""
    parts: List[int] = []
    for piece in str(version).strip().split(".")[:3]:
        digits = ""
        for char in piece:
            if not char.isdigit():
                break
            digits += char
        parts.append(int(digits) if digits else 0)
    while len(parts) < 3:
        parts.append(0)
    return parts[0], parts[1], parts[2]


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in data.items():
        key = _OPTION_ALIASES.get(key, key)
        if isinstance(value, dict):
            value = _normalize_keys(value)
        result[key] = value
    return result


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "componentlint.json",
        "componentlint.yaml",
        "componentlint.yml",
        ".componentlint.json",
        ".componentlint.yaml",
        ".componentlint.yml",
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")
        return _normalize_keys(data)

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        settings = {}
        if os.getenv("COMPONENTLINT_PRAGMA"):
            settings["pragma"] = os.getenv("COMPONENTLINT_PRAGMA")
        if os.getenv("COMPONENTLINT_CREATE_CLASS"):
            settings["create_class"] = os.getenv("COMPONENTLINT_CREATE_CLASS")
        if os.getenv("COMPONENTLINT_VERSION"):
            settings["version"] = os.getenv("COMPONENTLINT_VERSION")
        if settings:
            config["settings"] = settings

        if os.getenv("COMPONENTLINT_IGNORE_PURE_COMPONENTS"):
            config["prefer_stateless"] = {
                "ignore_pure_components": os.getenv("COMPONENTLINT_IGNORE_PURE_COMPONENTS").lower()
                == "true"
            }

        if os.getenv("COMPONENTLINT_IGNORE_CASE"):
            config["sort_default_props"] = {
                "ignore_case": os.getenv("COMPONENTLINT_IGNORE_CASE").lower() == "true"
            }

        analysis = {}
        if os.getenv("COMPONENTLINT_MAX_FILE_SIZE"):
            try:
                analysis["max_file_size"] = int(os.getenv("COMPONENTLINT_MAX_FILE_SIZE"))
            except ValueError:
                logger.warning("Invalid COMPONENTLINT_MAX_FILE_SIZE value, using default")
        if os.getenv("COMPONENTLINT_EXCLUDED_PATTERNS"):
            analysis["exclude_patterns"] = os.getenv("COMPONENTLINT_EXCLUDED_PATTERNS").split(",")
        if analysis:
            config["analysis"] = analysis

        if os.getenv("COMPONENTLINT_ENABLED_RULES"):
            config["enabled_rules"] = [
                rule.strip() for rule in os.getenv("COMPONENTLINT_ENABLED_RULES").split(",") if rule.strip()
            ]

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result: Dict[str, Any] = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        if "settings" in config_data:
            settings = config_data["settings"]
            for key in ("pragma", "create_class"):
                if key in settings and (not isinstance(settings[key], str) or not settings[key]):
                    raise ConfigurationError(f"settings.{key} must be a non-empty string")
            if "version" in settings and not isinstance(settings["version"], (str, int, float)):
                raise ConfigurationError("settings.version must be a version string")

        for section, option in (
            ("prefer_stateless", "ignore_pure_components"),
            ("sort_default_props", "ignore_case"),
        ):
            if section in config_data and option in config_data[section]:
                if not isinstance(config_data[section][option], bool):
                    raise ConfigurationError(f"{section}.{option} must be a boolean")

        if "analysis" in config_data:
            analysis = config_data["analysis"]
            if "max_file_size" in analysis and analysis["max_file_size"] <= 0:
                raise ConfigurationError("max_file_size must be positive")

        if "enabled_rules" in config_data:
            unknown = [rule for rule in config_data["enabled_rules"] if rule not in KNOWN_RULES]
            if unknown:
                raise ConfigurationError(f"Unknown rules: {unknown}; valid rules: {list(KNOWN_RULES)}")


@dataclass
class SettingsConfig:
    """Framework settings shared by all rules."""

    pragma: str = "React"
    create_class: str = "createReactClass"
    version: str = "999.999.999"

    @property
    def version_tuple(self) -> Tuple[int, int, int]:
        return parse_version(self.version)

    @property
    def supports_null_return(self) -> bool:
        """Function components may return null/false from 15.0 on."""
        return self.version_tuple >= (15, 0, 0)

    @property
    def component_bases(self) -> Tuple[str, ...]:
        return (
            "Component",
            "PureComponent",
            f"{self.pragma}.Component",
            f"{self.pragma}.PureComponent",
        )

    @property
    def pure_bases(self) -> Tuple[str, ...]:
        return ("PureComponent", f"{self.pragma}.PureComponent")

    @property
    def legacy_factories(self) -> Tuple[str, ...]:
        return (self.create_class, f"{self.pragma}.createClass")


@dataclass
class PreferStatelessConfig:
    """Options of the prefer-stateless-function rule."""

    ignore_pure_components: bool = False


@dataclass
class SortDefaultPropsConfig:
    """Options of the sort-default-props rule."""

    ignore_case: bool = False


@dataclass
class AnalysisConfig:
    """Configuration for file discovery."""

    max_file_size: int = 1024 * 1024  # 1MB
    include_patterns: List[str] = field(default_factory=lambda: ["**/*.js", "**/*.jsx", "**/*.mjs"])
    exclude_patterns: List[str] = field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.git/**",
            "**/dist/**",
            "**/build/**",
            "**/*.min.js",
        ]
    )


@dataclass
class ComponentLintConfig:
    """Main configuration class for componentlint."""

    settings: SettingsConfig = field(default_factory=SettingsConfig)
    prefer_stateless: PreferStatelessConfig = field(default_factory=PreferStatelessConfig)
    sort_default_props: SortDefaultPropsConfig = field(default_factory=SortDefaultPropsConfig)
    analysis_settings: AnalysisConfig = field(default_factory=AnalysisConfig)
    enabled_rules: List[str] = field(default_factory=lambda: list(KNOWN_RULES))

    @classmethod
    def default(cls) -> "ComponentLintConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any], validate: bool = True) -> "ComponentLintConfig":
        """Build a configuration from a (possibly partial) mapping."""
        config_data = _normalize_keys(config_data or {})
        if validate:
            ConfigurationManager.validate_config(config_data)

        sections = (
            ("settings", SettingsConfig),
            ("prefer_stateless", PreferStatelessConfig),
            ("sort_default_props", SortDefaultPropsConfig),
            ("analysis", AnalysisConfig),
        )
        built = {}
        for section, section_cls in sections:
            section_config = section_cls()
            for key, value in (config_data.get(section) or {}).items():
                if hasattr(section_config, key):
                    if key == "version":
                        value = str(value)
                    setattr(section_config, key, value)
                else:
                    logger.warning(f"Ignoring unknown configuration option {section}.{key}")
            built[section] = section_config

        config = cls(
            settings=built["settings"],
            prefer_stateless=built["prefer_stateless"],
            sort_default_props=built["sort_default_props"],
            analysis_settings=built["analysis"],
        )
        if "enabled_rules" in config_data:
            config.enabled_rules = list(config_data["enabled_rules"])
        return config

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
    ) -> "ComponentLintConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
        """
        configs_to_merge = []

        file_config = {}
        if config_path:
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            configs_to_merge.append(ConfigurationManager.load_env_config())

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)
        return cls.from_dict(merged_config, validate=validate)

    def rule_enabled(self, rule_id: str) -> bool:
        return rule_id in self.enabled_rules

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "settings": asdict(self.settings),
            "prefer_stateless": asdict(self.prefer_stateless),
            "sort_default_props": asdict(self.sort_default_props),
            "analysis": asdict(self.analysis_settings),
            "enabled_rules": list(self.enabled_rules),
        }

    def save(self, config_path: str) -> None:
        """Save configuration to file (JSON or YAML by extension)."""
        data = self.to_dict()
        with open(config_path, "w", encoding="utf-8") as f:
            if config_path.endswith((".yaml", ".yml")):
                yaml.safe_dump(data, f, sort_keys=False)
            else:
                json.dump(data, f, indent=2)


def load_config(config_path: Optional[str] = None) -> ComponentLintConfig:
    """Convenience wrapper around ComponentLintConfig.load()."""
    return ComponentLintConfig.load(config_path)
