"""Pipeline configuration: defaults, TOML overrides and logger setup."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Mapping

CONFIG_FILE_PATH = "rstracer.toml"
LOG_FILE_NAME = "rstracer.log"

_DEFAULTS: dict[str, Any] = {
    "in_memory": "false",
    "vacuum": {"bronze": 15, "silver": 15, "gold": 600},
    "schedule": {"silver": 10, "gold": 10, "vacuum": 15, "file": 300, "export": 60},
    "request": {"channel_size": 100, "consumer_batch_size": 20},
    "ps": {"producer_frequency": 3000, "consumer_batch_size": 200},
    "lsof": {
        "regular": {"producer_frequency": 20000, "consumer_batch_size": 200},
        "network": {"producer_frequency": 3000, "consumer_batch_size": 200},
    },
    "network": {
        "channel_size": 500,
        "producer_frequency": 1000,
        "consumer_batch_size": 200,
    },
    "export": {"directory": "export/", "format": "parquet"},
    "logger": {"level": "INFO"},
}

_LEVELS = {
    "TRACE": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_ROTATIONS = {"MINUTELY": "M", "HOURLY": "H", "DAILY": "D"}

_LOG_FORMAT = (
    "%(asctime)s %(levelname)s [thread %(thread)d] %(filename)s:%(lineno)d: %(message)s"
)

_TRUE_WORDS = {"true", "1", "yes", "on", "y"}
_FALSE_WORDS = {"false", "0", "no", "off", "n"}


class ConfigError(Exception):
    """Raised when the configuration cannot be read or is invalid."""


@dataclass(frozen=True)
class ChannelConfig:
    channel_size: int | None
    producer_frequency: int | None
    consumer_batch_size: int


@dataclass(frozen=True)
class LsofConfig:
    regular: ChannelConfig
    network: ChannelConfig


@dataclass(frozen=True)
class VacuumConfig:
    bronze: int
    silver: int
    gold: int

    def to_list(self) -> list[tuple[str, int]]:
        """Retention seconds per layer, in layer order."""
        return [("bronze", self.bronze), ("silver", self.silver), ("gold", self.gold)]


@dataclass(frozen=True)
class ExportConfig:
    directory: str
    format: str


@dataclass(frozen=True)
class ScheduleConfig:
    silver: int
    gold: int
    vacuum: int
    file: int
    export: int

    def to_list(self) -> list[tuple[str, int]]:
        """Schedule period in seconds for each task, in task order."""
        return [
            ("silver", self.silver),
            ("gold", self.gold),
            ("vacuum", self.vacuum),
            ("file", self.file),
            ("export", self.export),
        ]


@dataclass(frozen=True)
class LoggerConfig:
    level: str
    directory: str | None = None
    rotation: str | None = None


@dataclass(frozen=True)
class Config:
    in_memory: bool
    request: ChannelConfig
    ps: ChannelConfig
    lsof: LsofConfig
    network: ChannelConfig
    vacuum: VacuumConfig
    export: ExportConfig
    schedule: ScheduleConfig
    logger: LoggerConfig


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def _section(data: Mapping[str, Any], key: str, path: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise ConfigError(f"invalid type for '{path}': expected a table")
    return value


def _uint(data: Mapping[str, Any], key: str, path: str, optional: bool = False) -> int | None:
    if key not in data:
        if optional:
            return None
        raise ConfigError(f"missing field '{path}'")
    value = data[key]
    if isinstance(value, bool):
        raise ConfigError(f"invalid type for '{path}': expected an unsigned integer")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise ConfigError(
                f"invalid type for '{path}': expected an unsigned integer"
            ) from exc
    if not isinstance(value, int) or value < 0:
        raise ConfigError(f"invalid value for '{path}': expected an unsigned integer")
    return value


def _bool(data: Mapping[str, Any], key: str, path: str) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"invalid type for '{path}': expected a boolean")


def _str(data: Mapping[str, Any], key: str, path: str, optional: bool = False) -> str | None:
    if key not in data:
        if optional:
            return None
        raise ConfigError(f"missing field '{path}'")
    value = data[key]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"invalid type for '{path}': expected a string")


def _channel(data: Mapping[str, Any], path: str) -> ChannelConfig:
    return ChannelConfig(
        channel_size=_uint(data, "channel_size", f"{path}.channel_size", optional=True),
        producer_frequency=_uint(
            data, "producer_frequency", f"{path}.producer_frequency", optional=True
        ),
        consumer_batch_size=_uint(
            data, "consumer_batch_size", f"{path}.consumer_batch_size"
        ),
    )


def _build(data: Mapping[str, Any]) -> Config:
    lsof = _section(data, "lsof", "lsof")
    vacuum = _section(data, "vacuum", "vacuum")
    schedule = _section(data, "schedule", "schedule")
    export = _section(data, "export", "export")
    logger = _section(data, "logger", "logger")
    return Config(
        in_memory=_bool(data, "in_memory", "in_memory"),
        request=_channel(_section(data, "request", "request"), "request"),
        ps=_channel(_section(data, "ps", "ps"), "ps"),
        lsof=LsofConfig(
            regular=_channel(_section(lsof, "regular", "lsof.regular"), "lsof.regular"),
            network=_channel(_section(lsof, "network", "lsof.network"), "lsof.network"),
        ),
        network=_channel(_section(data, "network", "network"), "network"),
        vacuum=VacuumConfig(
            **{name: _uint(vacuum, name, f"vacuum.{name}") for name in ("bronze", "silver", "gold")}
        ),
        export=ExportConfig(
            directory=_str(export, "directory", "export.directory"),
            format=_str(export, "format", "export.format"),
        ),
        schedule=ScheduleConfig(
            **{
                name: _uint(schedule, name, f"schedule.{name}")
                for name in ("silver", "gold", "vacuum", "file", "export")
            }
        ),
        logger=LoggerConfig(
            level=_str(logger, "level", "logger.level"),
            directory=_str(logger, "directory", "logger.directory", optional=True),
            rotation=_str(logger, "rotation", "logger.rotation", optional=True),
        ),
    )


def read_config(path: str | Path | None = None) -> Config:
    """Read the configuration, applying the TOML file over the defaults if it exists."""
    config_file = Path(path if path is not None else CONFIG_FILE_PATH)
    data: dict[str, Any] = dict(_DEFAULTS)
    if config_file.exists():
        try:
            with config_file.open("rb") as handle:
                overrides = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"cannot read '{config_file}': {exc}") from exc
        data = _merge(data, overrides)
    return _build(data)


def subscribe_logger(config: LoggerConfig) -> logging.Handler:
    """Install the root log handler described by the logger configuration."""
    level_name = config.level.upper()
    if level_name not in _LEVELS:
        raise ConfigError(f"Unknown logger level '{level_name}'")
    level = _LEVELS[level_name]

    handler: logging.Handler
    if config.directory is not None:
        if config.rotation is None:
            when = _ROTATIONS["HOURLY"]
        else:
            rotation = config.rotation.upper()
            if rotation not in _ROTATIONS:
                raise ConfigError(f"Unknown log rotation '{rotation}'")
            when = _ROTATIONS[rotation]
        directory = Path(config.directory)
        directory.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            directory / LOG_FILE_NAME, when=when, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return handler