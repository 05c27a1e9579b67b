"""Configuration loading from CLI args, env vars, and optional YAML file."""

import logging
import os
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE = "MSSQLSERVER"
OUTPUT_FORMATS = ("table", "json", "csv")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised for an unreadable config file or an invalid target entry."""


@dataclass(frozen=True)
class TargetSpec:
    name: str                 # SQL instance name, e.g. "SQL01\\REPORTING"
    computer_name: str
    instance_name: str
    log_directory: str = ""
    admin_share: bool = False  # read C:\... as \\computer\C$\...


@dataclass(frozen=True)
class Config:
    targets: list[TargetSpec] = field(default_factory=list)
    log_type: str = "IndexOptimize"
    output: str = "table"
    log_level: str = "WARNING"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def split_instance_name(name: str) -> tuple[str, str]:
    """'SQL01\\REPORTING' → ('SQL01', 'REPORTING'); 'SQL01' → ('SQL01', 'MSSQLSERVER')."""
    computer, sep, instance = name.partition("\\")
    if not sep or not instance:
        return computer, DEFAULT_INSTANCE
    return computer, instance


def parse_target(name: str, **overrides) -> TargetSpec:
    """Build a TargetSpec from an instance name plus optional YAML fields."""
    if not name or not str(name).strip():
        raise ConfigError("Target entry has no name")
    name = str(name).strip()
    computer, instance = split_instance_name(name)
    return TargetSpec(
        name=name,
        computer_name=overrides.get("computer_name") or computer,
        instance_name=overrides.get("instance_name") or instance,
        log_directory=overrides.get("log_directory") or "",
        admin_share=_parse_bool(overrides.get("admin_share", False)),
    )


def load_yaml_config(path: str | None) -> dict:
    """Load targets and settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _yaml_targets(yaml_data: dict) -> list[TargetSpec]:
    entries = yaml_data.get("targets") or []
    if not isinstance(entries, list):
        raise ConfigError(f"targets must be a list, got {type(entries).__name__}")
    targets = []
    for entry in entries:
        if isinstance(entry, str):
            targets.append(parse_target(entry))
        elif isinstance(entry, dict):
            fields = {k: v for k, v in entry.items() if k != "name"}
            targets.append(parse_target(entry.get("name", ""), **fields))
        else:
            raise ConfigError(f"Unsupported target entry: {entry!r}")
    return targets


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config from CLI args, env vars, and parsed YAML data.

    CLI targets are added after the YAML ones; CLI flags beat env vars,
    env vars beat YAML.
    """
    targets = _yaml_targets(yaml_data)
    for name in getattr(cli_args, "targets", None) or []:
        targets.append(parse_target(name))

    log_type = (
        getattr(cli_args, "log_type", None)
        or os.environ.get("MAINTLOG_LOG_TYPE")
        or yaml_data.get("log_type")
        or Config.log_type
    )
    output = (
        getattr(cli_args, "output", None)
        or os.environ.get("MAINTLOG_OUTPUT")
        or yaml_data.get("output")
        or Config.output
    )
    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format: {output}")

    log_level = (
        getattr(cli_args, "log_level", None)
        or os.environ.get("MAINTLOG_LOG_LEVEL")
        or Config.log_level
    ).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {log_level}")

    return Config(
        targets=targets,
        log_type=log_type,
        output=output,
        log_level=log_level,
    )
