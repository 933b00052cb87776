"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_webhook_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate webhook dispatch parameters."""
        errors = []

        # Validate bypass_mode
        bypass = params.get("bypass_mode", False)
        if not isinstance(bypass, bool):
            errors.append(ValidationError(
                field="bypass_mode",
                message="Must be a boolean",
                value=bypass
            ))

        # URL is only required when the network is actually used
        if bypass is not True:
            value = params.get("url", "")
            parsed = urlparse(value) if isinstance(value, str) else None
            if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(ValidationError(
                    field="url",
                    message="Must be an absolute http(s) URL",
                    value=value
                ))

        # Validate max_attempts
        if "max_attempts" in params:
            value = params["max_attempts"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="max_attempts",
                    message="Must be a positive integer",
                    value=value
                ))

        # Validate base_delay_ms
        if "base_delay_ms" in params:
            value = params["base_delay_ms"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="base_delay_ms",
                    message="Must be a non-negative integer",
                    value=value
                ))

        # Validate timeout_ms
        if "timeout_ms" in params:
            value = params["timeout_ms"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_ms",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_store_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate data store parameters."""
        errors = []

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="db_path",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_analysis_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate analysis defaults against the known literals."""
        errors = []

        if "default_direction" in params:
            value = params["default_direction"]
            if value not in ("Import", "Export"):
                errors.append(ValidationError(
                    field="default_direction",
                    message='Must be "Import" or "Export"',
                    value=value
                ))

        if "default_time_range" in params:
            value = params["default_time_range"]
            if value not in ("current", "two_years", "five_years"):
                errors.append(ValidationError(
                    field="default_time_range",
                    message="Must be one of current, two_years, five_years",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "webhook" in config:
            errors.extend(ConfigValidator.validate_webhook_params(config["webhook"]))

        if "store" in config:
            errors.extend(ConfigValidator.validate_store_params(config["store"]))

        if "analysis" in config:
            errors.extend(ConfigValidator.validate_analysis_params(config["analysis"]))

        return errors
