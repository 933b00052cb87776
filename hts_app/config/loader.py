"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .defaults import AnalysisParams, DefaultConfig, StoreParams, WebhookParams, get_default_config

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "HTS_WEBHOOK_URL": ("webhook", "url"),
    "HTS_BYPASS_MODE": ("webhook", "bypass_mode"),
    "HTS_MAX_ATTEMPTS": ("webhook", "max_attempts"),
    "HTS_DB_PATH": ("store", "db_path"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=config_dir,
            defaults=get_default_config(),
            environ=dict(os.environ if environ is None else environ),
        )

    def load_settings_file(self) -> dict[str, Any]:
        """Load overrides from settings.yaml, if present."""
        settings_file = self.config_dir / "settings.yaml"

        if not settings_file.exists():
            return {}

        with open(settings_file) as f:
            settings = yaml.safe_load(f)

        return settings or {}

    def load_env_overrides(self) -> dict[str, Any]:
        """Collect overrides from HTS_* environment variables."""
        overrides: dict[str, Any] = {}

        for env_name, (section, key) in ENV_OVERRIDES.items():
            if env_name not in self.environ:
                continue
            raw = self.environ[env_name]
            if key == "bypass_mode":
                value: Any = raw.strip().lower() in _TRUE_VALUES
            elif key == "max_attempts":
                value = int(raw)
            else:
                value = raw
            overrides.setdefault(section, {})[key] = value

        return overrides

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. settings.yaml, then HTS_* environment variables
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_settings_file())
        config = self._deep_merge(config, self.load_env_overrides())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def build_webhook_params(config: dict[str, Any]) -> WebhookParams:
    """Materialize WebhookParams from a merged configuration dict."""
    section = config.get("webhook", {})
    known = WebhookParams.__dataclass_fields__.keys()
    return WebhookParams(**{k: v for k, v in section.items() if k in known})


def build_store_params(config: dict[str, Any]) -> StoreParams:
    """Materialize StoreParams from a merged configuration dict."""
    section = config.get("store", {})
    known = StoreParams.__dataclass_fields__.keys()
    return StoreParams(**{k: v for k, v in section.items() if k in known})


def build_analysis_params(config: dict[str, Any]) -> AnalysisParams:
    """Materialize AnalysisParams from a merged configuration dict."""
    section = config.get("analysis", {})
    known = AnalysisParams.__dataclass_fields__.keys()
    return AnalysisParams(**{k: v for k, v in section.items() if k in known})
