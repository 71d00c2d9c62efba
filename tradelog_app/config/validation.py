"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

VALID_MARKETS = ("stock", "crypto", "forex", "futures")
VALID_SIDES = ("Buy", "Sell")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_form_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trade-entry form parameters."""
        errors = []

        if "default_market" in params:
            value = params["default_market"]
            if value not in VALID_MARKETS:
                errors.append(ValidationError(
                    field="default_market",
                    message=f"Must be one of {', '.join(VALID_MARKETS)}",
                    value=value
                ))

        if "default_side" in params:
            value = params["default_side"]
            if value not in VALID_SIDES:
                errors.append(ValidationError(
                    field="default_side",
                    message="Must be Buy or Sell",
                    value=value
                ))

        if "dashboard_route" in params:
            value = params["dashboard_route"]
            if not isinstance(value, str) or not value.startswith("/"):
                errors.append(ValidationError(
                    field="dashboard_route",
                    message="Must be an absolute route starting with '/'",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_strategy_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate strategy association parameters."""
        errors = []

        if "load_limit" in params:
            value = params["load_limit"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="load_limit",
                    message="Must be a positive integer",
                    value=value
                ))

        if "active_only" in params:
            value = params["active_only"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="active_only",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_sync_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate synchronization key and channel names."""
        errors = []

        for field in ("event_channel", "storage_key", "simple_storage_key", "source", "action"):
            if field in params:
                value = params[field]
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a non-empty string",
                        value=value
                    ))

        if params.get("storage_key") and params.get("storage_key") == params.get("simple_storage_key"):
            errors.append(ValidationError(
                field="simple_storage_key",
                message="Must differ from storage_key",
                value=params["simple_storage_key"]
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "form" in config:
            errors.extend(ConfigValidator.validate_form_params(config["form"]))

        if "strategy" in config:
            errors.extend(ConfigValidator.validate_strategy_params(config["strategy"]))

        if "sync" in config:
            errors.extend(ConfigValidator.validate_sync_params(config["sync"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
