"""Configuration system for the patchwindow CLI with proper precedence handling.

Configuration is merged from multiple sources, highest precedence first:
CLI flags > environment variables > config file > discovered config file > defaults
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, EmailStr, Field, field_validator

from ..notify import SMTPConfig, notifier_registry
from ..platform import platform_registry
from ..reporting import DEFAULT_LOG_FILENAME
from ..scheduling import DEFAULT_EXCLUDE_PATTERNS, CollectionFilterError
from ..scheduling.filters import compile_wildcard


class FilterConfig(BaseModel):
    """Collection discovery options."""
    pattern: str = Field(default="*", description="Wildcard pattern collection names must match")
    exclude_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Wildcard patterns of collection names to skip"
    )


class PlatformConfig(BaseModel):
    """Management platform options."""
    type: str = Field(default="inventory", description="Platform backend type")
    inventory_path: Optional[Path] = Field(default=None, description="Inventory file for the inventory backend")
    read_only: bool = Field(default=False, description="Never write applied schedules back")


class NotificationConfig(BaseModel):
    """Report notification options."""
    enabled: bool = Field(default=True, description="Send the report by email")
    notifier: str = Field(default="email", description="Notifier type")
    recipient: Optional[EmailStr] = Field(default=None, description="Report recipient address")
    from_email: Optional[EmailStr] = Field(default=None, description="Sender address")
    from_name: Optional[str] = Field(default=None, description="Sender display name")
    subject_prefix: str = Field(default="[Patch Window]", description="Subject line prefix")
    smtp: SMTPConfig = Field(default_factory=SMTPConfig)


class ReportConfig(BaseModel):
    """Report log options."""
    log_dir: Optional[Path] = Field(default=Path("logs"), description="Directory for report logs")
    log_filename: str = Field(default=DEFAULT_LOG_FILENAME, description="strftime template for the log file name")


class ExecutionConfig(BaseModel):
    """Execution options."""
    dry_run: bool = Field(default=False, description="Compute and report without applying")
    verbose: bool = Field(default=False, description="Verbose logging")


class PatchWindowConfiguration(BaseModel):
    """Complete configuration with all sections."""

    site: Optional[str] = Field(default=None, description="Management site code")

    filter: FilterConfig = Field(default_factory=FilterConfig)
    platform: PlatformConfig = Field(default_factory=PlatformConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)

    # Metadata
    config_file_path: Optional[Path] = Field(default=None, description="Source config file")
    loaded_from: List[str] = Field(default_factory=list, description="Configuration sources")

    @field_validator('site')
    @classmethod
    def normalize_site(cls, v):
        return v.strip().upper() if v else v


class ConfigurationLoader:
    """Loads and merges configuration from multiple sources with proper precedence."""

    ENV_PREFIX = "PATCHWINDOW_"

    # Searched in order
    DEFAULT_CONFIG_FILES = [
        "patchwindow.yaml",
        "patchwindow.yml",
        ".patchwindow.yaml",
        ".patchwindow.yml",
        "patchwindow.json",
        ".patchwindow.json"
    ]

    BOOL_KEYS = ('.read_only', '.enabled', '.use_tls', '.use_ssl', '.dry_run', '.verbose')
    INT_KEYS = ('.port', '.max_retries')
    FLOAT_KEYS = ('.timeout_seconds', '.retry_delay_seconds')
    PATH_KEYS = ('.inventory_path', '.log_dir')

    def __init__(self):
        self.loaded_sources: List[str] = []

    def load_configuration(
        self,
        config_file: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        search_paths: Optional[List[Path]] = None
    ) -> PatchWindowConfiguration:
        """Load configuration with proper precedence.

        Args:
            config_file: Explicitly specified config file
            cli_overrides: CLI flag overrides
            search_paths: Paths to search for config files

        Returns:
            Merged configuration

        Raises:
            FileNotFoundError: If the explicit config file does not exist
            ValueError: If a config file cannot be parsed
        """
        self.loaded_sources = []

        config_data = {}
        self.loaded_sources.append("defaults")

        if not config_file:
            discovered_config = self._discover_config_file(search_paths or [Path.cwd()])
            if discovered_config:
                source = discovered_config.pop("_source_file")
                config_data = self._merge_config(config_data, discovered_config)
                self.loaded_sources.append(f"auto-discovered: {source}")

        if config_file:
            if not config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_file}")

            file_config = self._load_config_file(config_file)
            config_data = self._merge_config(config_data, file_config)
            self.loaded_sources.append(f"config file: {config_file}")

        env_config = self._load_environment_variables()
        if env_config:
            config_data = self._merge_config(config_data, env_config)
            self.loaded_sources.append("environment variables")

        if cli_overrides:
            config_data = self._merge_config(config_data, cli_overrides)
            self.loaded_sources.append("CLI flags")

        config_data["loaded_from"] = self.loaded_sources
        if config_file:
            config_data["config_file_path"] = config_file

        return PatchWindowConfiguration(**config_data)

    def _discover_config_file(self, search_paths: List[Path]) -> Optional[Dict[str, Any]]:
        """Discover configuration file in search paths."""
        for search_path in search_paths:
            for config_filename in self.DEFAULT_CONFIG_FILES:
                config_path = search_path / config_filename
                if config_path.exists() and config_path.is_file():
                    config_data = self._load_config_file(config_path)
                    config_data["_source_file"] = str(config_path)
                    return config_data
        return None

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from a file."""
        try:
            content = config_path.read_text(encoding='utf-8')

            if config_path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(content) or {}
            elif config_path.suffix.lower() == '.json':
                data = json.loads(content)
            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except OSError as e:
            raise ValueError(f"Error loading config file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        env_mapping = {
            f"{self.ENV_PREFIX}SITE": "site",
            f"{self.ENV_PREFIX}FILTER": "filter.pattern",
            f"{self.ENV_PREFIX}PLATFORM": "platform.type",
            f"{self.ENV_PREFIX}INVENTORY": "platform.inventory_path",
            f"{self.ENV_PREFIX}READ_ONLY": "platform.read_only",
            f"{self.ENV_PREFIX}NOTIFY": "notification.enabled",
            f"{self.ENV_PREFIX}RECIPIENT": "notification.recipient",
            f"{self.ENV_PREFIX}FROM": "notification.from_email",
            f"{self.ENV_PREFIX}SMTP_HOST": "notification.smtp.host",
            f"{self.ENV_PREFIX}SMTP_PORT": "notification.smtp.port",
            f"{self.ENV_PREFIX}SMTP_USERNAME": "notification.smtp.username",
            f"{self.ENV_PREFIX}SMTP_PASSWORD": "notification.smtp.password",
            f"{self.ENV_PREFIX}SMTP_USE_TLS": "notification.smtp.use_tls",
            f"{self.ENV_PREFIX}SMTP_USE_SSL": "notification.smtp.use_ssl",
            f"{self.ENV_PREFIX}LOG_DIR": "report.log_dir",
            f"{self.ENV_PREFIX}DRY_RUN": "execution.dry_run",
            f"{self.ENV_PREFIX}VERBOSE": "execution.verbose",
        }

        for env_var, config_path in env_mapping.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                converted_value = self._convert_env_value(env_value, config_path)
                self._set_nested_value(config, config_path, converted_value)

        return config

    def _convert_env_value(self, value: str, config_path: str) -> Any:
        """Convert environment variable string to appropriate type."""
        if config_path.endswith(self.BOOL_KEYS):
            return value.lower() in ('true', '1', 'yes', 'on')

        if config_path.endswith(self.INT_KEYS):
            return int(value)
        elif config_path.endswith(self.FLOAT_KEYS):
            return float(value)

        if config_path.endswith(self.PATH_KEYS):
            return Path(value) if value else None

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any):
        """Set a nested configuration value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries, with override taking precedence."""
        if not override:
            return base

        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result


def load_configuration(
    config_file: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    search_paths: Optional[List[Path]] = None
) -> PatchWindowConfiguration:
    """Convenience function to load configuration."""
    loader = ConfigurationLoader()
    return loader.load_configuration(config_file, cli_overrides, search_paths)


def print_configuration(config: PatchWindowConfiguration, format: str = "yaml") -> str:
    """Render configuration in the given format (yaml, json) for debugging.

    The SMTP password is masked.
    """
    config_dict = config.model_dump(
        mode="json",
        exclude={'loaded_from', 'config_file_path'},
        exclude_none=False
    )
    if config_dict["notification"]["smtp"].get("password"):
        config_dict["notification"]["smtp"]["password"] = "********"

    if format.lower() == "json":
        return json.dumps(config_dict, indent=2, default=str)
    else:
        return yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=True)


def validate_configuration(config: PatchWindowConfiguration) -> List[str]:
    """Validate configuration and return list of validation errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    for pattern in [config.filter.pattern, *config.filter.exclude_patterns]:
        try:
            compile_wildcard(pattern)
        except CollectionFilterError as e:
            errors.append(str(e))

    if config.platform.type not in platform_registry.list_platform_types():
        errors.append(f"Unknown platform type: {config.platform.type}")
    elif config.platform.type == "inventory":
        if not config.platform.inventory_path:
            errors.append("Inventory platform requires platform.inventory_path (--inventory)")
        elif not config.platform.inventory_path.exists():
            errors.append(f"Inventory file not found: {config.platform.inventory_path}")

    notification = config.notification
    if notification.enabled:
        if notification.notifier not in notifier_registry.list_notifier_types():
            errors.append(f"Unknown notifier type: {notification.notifier}")
        elif notification.notifier == "email":
            if not notification.recipient:
                errors.append("Email notification requires a recipient (--to)")
            if not notification.from_email:
                errors.append("Email notification requires notification.from_email")
            if notification.smtp.use_ssl and notification.smtp.use_tls:
                errors.append("Cannot use both SSL and TLS - choose one")

    if config.report.log_dir:
        try:
            config.report.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            errors.append(f"Cannot create log directory {config.report.log_dir}: {e}")

    return errors
