"""
Handler configuration definitions.

Purpose:
    Provide a validated, immutable configuration object for
    :class:`~entity_events.events.event_handler.EventHandler` so callers tune
    dispatch behaviour through typed settings instead of loose keyword
    dictionaries.
External Dependencies:
    ``pydantic`` for validation and ``PyYAML`` for configuration files.
Fallback Semantics:
    When no explicit configuration is provided, handlers use
    `get_default_handler_config()`, which isolates listener failures and
    aliases the delegating methods onto the entity.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from entity_events.exceptions import ConfigurationError
from entity_events.utils.logging import resolve_level

logger = logging.getLogger(__name__)

CONFIG_SECTION = "entity_events"
ENV_PREFIX = "ENTITY_EVENTS_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class HandlerConfig(BaseModel):
    """Immutable configuration values for an event handler.

    Attributes:
        isolate_errors: When true, an exception raised by one listener is
            logged and recorded on the event record, and delivery continues to
            the remaining listeners. When false the first failure aborts the
            trigger as a ``ListenerExecutionError``.
        declared_events: Event names whose buckets are created up front.
        alias_entity: Whether the handler installs delegating ``on``/``once``/
            ``off``/``trigger`` methods on its entity at construction.
        warn_listener_count: Optional bucket size past which a warning is
            logged, to surface listeners that are registered repeatedly and
            never removed.
        log_level: Optional level name (``"DEBUG"``, ``"info"``, ...) applied to
            the ``entity_events`` logger when a handler is built.
    """

    isolate_errors: bool = Field(
        default=True,
        description="Keep delivering to remaining listeners when one raises.",
    )
    declared_events: tuple[str, ...] = Field(
        default=(),
        description="Event names registered eagerly when the handler is built.",
    )
    alias_entity: bool = Field(
        default=True,
        description="Install delegating methods on the entity at construction.",
    )
    warn_listener_count: Optional[int] = Field(
        default=None,
        ge=1,
        description="Log a warning once a single bucket holds more listeners than this.",
    )
    log_level: Optional[str] = Field(
        default=None,
        description="Level for the entity_events logger; unset leaves logging untouched.",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("declared_events", mode="before")
    @classmethod
    def split_declared_events(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("declared_events")
    @classmethod
    def reject_blank_event_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            if not name.strip():
                raise ValueError("declared event names must be non-empty strings")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        resolve_level(value)
        return value.strip().upper()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], *, source: Optional[str] = None) -> "HandlerConfig":
        """Build a configuration from a plain mapping.

        Args:
            mapping: Raw configuration values keyed by field name.
            source: Optional description of where the values came from, used
                in error messages.

        Returns:
            Validated configuration instance.

        Raises:
            ConfigurationError: If the mapping contains unknown keys or values
                that fail validation.
        """

        try:
            return cls.model_validate(dict(mapping))
        except ValidationError as error:
            raise ConfigurationError(
                f"Invalid handler configuration: {error}", source=source
            ) from error


def get_default_handler_config() -> HandlerConfig:
    """Return the configuration used when a handler is built without one."""

    return HandlerConfig()


def load_handler_config(path: str | os.PathLike[str]) -> HandlerConfig:
    """Load handler configuration from a YAML file.

    The file may either contain the settings at the top level or nest them
    under an ``entity_events`` section so the settings can share a file with
    the rest of an application's configuration.

    Args:
        path: Location of the YAML document.

    Returns:
        Validated configuration instance.

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, or does
            not describe a valid configuration.
    """

    file_path = Path(path)
    try:
        with file_path.open("r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except FileNotFoundError as error:
        logger.error("Configuration file not found: %s", file_path)
        raise ConfigurationError(f"Configuration file not found: {file_path}", source=str(file_path)) from error
    except yaml.YAMLError as error:
        logger.error("Error parsing YAML in %s: %s", file_path, error)
        raise ConfigurationError(f"Error parsing YAML in {file_path}: {error}", source=str(file_path)) from error

    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigurationError(f"Invalid configuration format in {file_path}", source=str(file_path))

    section = document.get(CONFIG_SECTION, document)
    if not isinstance(section, Mapping):
        raise ConfigurationError(
            f"Section '{CONFIG_SECTION}' in {file_path} must be a mapping", source=str(file_path)
        )

    logger.debug("Loaded handler configuration from %s", file_path)
    return HandlerConfig.from_mapping(section, source=str(file_path))


def load_handler_config_from_env(environ: Optional[Mapping[str, str]] = None) -> HandlerConfig:
    """Build handler configuration from ``ENTITY_EVENTS_*`` environment variables.

    Recognised variables are ``ENTITY_EVENTS_ISOLATE_ERRORS``,
    ``ENTITY_EVENTS_DECLARED_EVENTS`` (comma separated),
    ``ENTITY_EVENTS_ALIAS_ENTITY``, ``ENTITY_EVENTS_WARN_LISTENER_COUNT`` and
    ``ENTITY_EVENTS_LOG_LEVEL``.
    Unset variables keep their defaults.

    Raises:
        ConfigurationError: If a variable holds a value that cannot be parsed.
    """

    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    for field_name in ("isolate_errors", "alias_entity"):
        raw = env.get(ENV_PREFIX + field_name.upper())
        if raw is not None:
            values[field_name] = _parse_bool(raw, ENV_PREFIX + field_name.upper())

    declared = env.get(ENV_PREFIX + "DECLARED_EVENTS")
    if declared is not None:
        values["declared_events"] = declared

    level = env.get(ENV_PREFIX + "LOG_LEVEL")
    if level is not None and level.strip():
        values["log_level"] = level

    count = env.get(ENV_PREFIX + "WARN_LISTENER_COUNT")
    if count is not None and count.strip():
        values["warn_listener_count"] = count.strip()

    return HandlerConfig.from_mapping(values, source="environment")


def _parse_bool(raw: str, variable: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{variable} must be a boolean flag, received {raw!r}", source=variable)


__all__ = [
    "CONFIG_SECTION",
    "ENV_PREFIX",
    "HandlerConfig",
    "get_default_handler_config",
    "load_handler_config",
    "load_handler_config_from_env",
]
