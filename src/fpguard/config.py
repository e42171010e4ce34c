"""Configuration loading and validation for fpguard."""
from __future__ import annotations

import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any

from fpguard.constants import (
    CONFIG_FILENAME,
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDE,
    DEFAULT_SEVERITIES,
    OutputFormat,
    Severity,
    canonical_rule_id,
)
from fpguard.types import (
    ConfigError,
    FpGuardConfig,
    IgnoreGovernance,
    RuleConfig,
)


class ConfigLoader:
    """Loads and validates fpguard configuration."""

    @staticmethod
    def find_config_file(start_path: Path | None = None) -> Path | None:
        """
        Find fpguard.toml by walking up from start_path.

        Args:
            start_path: Directory to start searching from. Defaults to cwd.

        Returns:
            Path to fpguard.toml if found, None otherwise.
        """
        if start_path is None:
            start_path = Path.cwd()

        start_path = start_path.resolve()

        for directory in [start_path, *start_path.parents]:
            config_path: Path = directory / CONFIG_FILENAME
            if config_path.is_file():
                return config_path

        return None

    @staticmethod
    def load(path: Path | None = None) -> FpGuardConfig:
        """
        Load configuration from fpguard.toml.

        Args:
            path: Explicit path to the config file. If None, searches upward.

        Returns:
            Validated FpGuardConfig instance.

        Raises:
            ConfigError: If configuration is invalid.
        """
        if path is None:
            path = ConfigLoader.find_config_file()

        if path is None:
            return FpGuardConfig()

        try:
            with open(path, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML: {e}", path=path) from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=path) from e

        return ConfigLoader._parse_config(data, config_path=path)

    @staticmethod
    def _parse_config(
        data: dict[str, Any],
        *,
        config_path: Path | None = None,
    ) -> FpGuardConfig:
        """Parse and validate configuration dictionary."""
        errors: list[str] = []

        include: tuple[str, ...] = ConfigLoader._parse_patterns(
            data, "include", DEFAULT_INCLUDE, errors,
        )
        exclude: tuple[str, ...] = ConfigLoader._parse_patterns(
            data, "exclude", DEFAULT_EXCLUDES, errors,
        )

        output_format: OutputFormat = OutputFormat.HUMAN
        if "output_format" in data:
            try:
                output_format = OutputFormat(data["output_format"])
            except ValueError:
                valid: list[str] = [f.value for f in OutputFormat]
                errors.append(f"output_format must be one of {valid}")

        show_source: bool = data.get("show_source", True)
        if not isinstance(show_source, bool):
            errors.append("show_source must be a boolean")
            show_source = True

        jobs: int = data.get("jobs", 1)
        if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
            errors.append("jobs must be a positive integer")
            jobs = 1

        rules: RuleConfig = ConfigLoader._parse_rules(data.get("rules", {}), errors)

        ignores: IgnoreGovernance = ConfigLoader._parse_ignores(
            data.get("ignores", {}), errors
        )

        if errors:
            error_msg: str = "Configuration errors:\n" + "\n".join(
                f"  - {e}" for e in errors
            )
            raise ConfigError(error_msg, path=config_path)

        return FpGuardConfig(
            config_path=config_path,
            include=include,
            exclude=exclude,
            output_format=output_format,
            show_source=show_source,
            jobs=jobs,
            rules=rules,
            ignores=ignores,
        )

    @staticmethod
    def _parse_patterns(
        data: dict[str, Any],
        key: str,
        default: tuple[str, ...],
        errors: list[str],
    ) -> tuple[str, ...]:
        raw: Any = data.get(key)
        if raw is None:
            return default
        if not isinstance(raw, list) or not all(isinstance(p, str) for p in raw):
            errors.append(f"{key} must be a list of strings")
            return default
        return tuple(raw)

    @staticmethod
    def _parse_rules(data: Any, errors: list[str]) -> RuleConfig:
        """Parse the [rules] table of per-rule severities."""
        severities: dict[str, Severity] = dict(DEFAULT_SEVERITIES)
        if not isinstance(data, dict):
            errors.append("rules must be a table")
            return RuleConfig(severities=MappingProxyType(severities))

        valid: list[str] = [s.value for s in Severity]
        for key, value in data.items():
            rule_id: str | None = canonical_rule_id(key)
            if rule_id is None:
                errors.append(f"rules.{key} is not a known rule")
                continue

            raw_severity: Any = value
            label: str = f"rules.{key}"
            if isinstance(value, dict):
                raw_severity = value.get("severity")
                label = f"rules.{key}.severity"
            if not isinstance(raw_severity, str):
                errors.append(f"{label} must be one of {valid}")
                continue
            try:
                severities[rule_id] = Severity(raw_severity.lower())
            except ValueError:
                errors.append(f"{label} must be one of {valid}")

        return RuleConfig(severities=MappingProxyType(severities))

    @staticmethod
    def _parse_ignores(data: Any, errors: list[str]) -> IgnoreGovernance:
        """Parse ignore governance configuration."""
        if not isinstance(data, dict):
            errors.append("ignores must be a table")
            return IgnoreGovernance()

        require_reason: bool = data.get("require_reason", True)
        if not isinstance(require_reason, bool):
            errors.append("ignores.require_reason must be a boolean")
            require_reason = True

        raw_disallow: Any = data.get("disallow", [])
        disallow: frozenset[str]
        if isinstance(raw_disallow, list):
            resolved: dict[str, str | None] = {
                str(c): canonical_rule_id(str(c)) for c in raw_disallow
            }
            invalid_codes: list[str] = [c for c, r in resolved.items() if r is None]
            if invalid_codes:
                errors.append(
                    f"ignores.disallow contains unknown rule ids: {invalid_codes}"
                )
            disallow = frozenset(r for r in resolved.values() if r is not None)
        else:
            errors.append("ignores.disallow must be a list")
            disallow = frozenset()

        max_per_file: int | None = data.get("max_per_file")
        if max_per_file is not None and (
            isinstance(max_per_file, bool) or not isinstance(max_per_file, int)
        ):
            errors.append("ignores.max_per_file must be an integer or null")
            max_per_file = None

        return IgnoreGovernance(
            require_reason=require_reason,
            disallow=disallow,
            max_per_file=max_per_file,
        )


def load_config(path: Path | None = None) -> FpGuardConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Optional explicit path to fpguard.toml.

    Returns:
        Validated configuration.
    """
    return ConfigLoader.load(path)
