"""\
Configurations
=============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides various configurations that are used throughout this
framework, namely where the error-class catalog is loaded from, how the
framework logs, and whether telemetry is exported.
"""

from __future__ import annotations

import os
import threading
import typing as t

from errata.core.error import ConfigValidationError


if t.TYPE_CHECKING:
    from collections.abc import Iterable

__all__: tuple[str, ...] = (
    "CatalogConfig",
    "Config",
    "ConsoleLoggerConfig",
    "FileLoggerConfig",
    "LoggerConfig",
    "TTYLoggerConfig",
    "TelemetryConfig",
    "config_property",
)

_ALLOWED_LOG_LEVELS: tuple[str, ...] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)
# NOTE(xames3): The default log format uses the `extra` attribute which
# is populated by `errata.utils.logging.ErrataFormatter`. For classified
# errors this carries the error class and the SQL state of the logged
# exception.
_DEFAULT_LOG_FMT: t.Final[str] = (
    "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(extra)s: %(message)s"
)
_DEFAULT_LOG_DATEFMT: t.Final[str] = "%Y-%m-%dT%H:%M:%SZ"


class config_property[T]:  # noqa: N801
    """Descriptor for configuration properties.

    This descriptor class creates and provides functionalities like
    Python's built-in `property` object decorator, but with additional
    features for configuration management.

    The implementation balances simplicity and performance, with
    maintainability in mind by using direct validation logic compiled at
    class creation time.
    """

    __slots__: tuple[str, ...] = (
        "allowed",
        "between",
        "check",
        "default",
        "description",
        "frozen",
        "locks",
        "property",
        "validate",
    )

    _global_lock: threading.Lock = threading.Lock()

    def __init__(
        self,
        default: T,
        *,
        frozen: bool = False,
        description: str | None = None,
        allowed: Iterable[T] | None = None,
        check: t.Callable[[T], bool] | None = None,
        between: tuple[int | float, ...] | None = None,
    ) -> None:
        """Initialise configuration property."""
        self.default = default
        self.frozen = frozen
        self.description = description
        self.allowed = allowed
        self.check = check
        self.between = between
        self.property: str = ""
        self.validate: bool = any([self.between, self.check, self.allowed])
        self.locks: dict[int, threading.RLock] = {}

    def __set_name__(self, instance: type, value: str) -> None:
        """Configure and set the property value on the instance.

        This method sets the name of the property and initialises the
        default value on the instance.

        :param instance: The class where the property is being set.
        :param value: The name of the property to be set.
        :raises ConfigValidationError: If the default value does not
            satisfy the constraints of the property.
        """
        self.property = f"_{value}"
        if self.default is not None and self.validate:
            try:
                self.__validate__(self.default)
            except ConfigValidationError as error:
                raise ConfigValidationError(
                    f"got invalid value for {value!r}: {error}"
                ) from error
        setattr(instance, self.property, self.default)

    @t.overload
    def __get__(self, instance: None, owner: type) -> config_property[T]: ...

    @t.overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(
        self,
        instance: object | None,
        owner: type,
    ) -> config_property[T] | T:
        """Get and return the property value from the instance.

        :param instance: The class instance where the property is being
            accessed.
        :param owner: The owner class of the property (not used).
        :return: The value of the property from the instance.
        """
        if instance is None:
            return self
        return getattr(instance, self.property, self.default)

    def __set__(self, instance: object, value: T) -> None:
        """Set the property with validation & immutability checks.

        :param instance: The class instance where the property is being
            set.
        :param value: The value to be set for the property.
        :raises ConfigValidationError: If the property is frozen or the
            value fails validation.
        """
        if self.frozen:
            raise ConfigValidationError(
                f"cannot modify frozen property: {self.property[1:]!r}",
            )
        if self.validate:
            with self._acquire_lock(instance):
                self.__validate__(value)
        setattr(instance, self.property, value)

    def __validate__(self, value: t.Any) -> None:
        """Validate the property value based on constraints.

        This method performs validation checks on the property value
        based on the provided constraints such as `allowed`, `check`,
        and `between`.

        :param value: The value to be validated.
        :raises ConfigValidationError: If the value does not meet the
            validation criteria.
        """
        if self.allowed is not None and value not in self.allowed:
            raise ConfigValidationError(
                f"{value!r} is not one of the allowed values "
                f"({', '.join(str(item) for item in self.allowed)})"
            )
        if self.check is not None:
            try:
                if not self.check(value):
                    raise ConfigValidationError("property validation failed")
            except ConfigValidationError:
                raise
            except Exception as error:
                raise ConfigValidationError(
                    f"property validation failed for {value!r} with "
                    f"message: {error}"
                ) from error
        if self.between is not None and len(self.between) == 2:
            minimum, maximum = self.between
            if not all(
                isinstance(num, int | float) for num in (minimum, maximum)
            ):
                raise ConfigValidationError("must be a tuple of two numbers")
            if not (minimum <= value <= maximum):
                raise ConfigValidationError(
                    f"{value} is not between {minimum} and {maximum}"
                )

    def _acquire_lock(self, instance: object) -> threading.RLock:
        """Return the lock guarding validation for an instance.

        :param instance: The class instance where the property is being
            accessed.
        :return: A re-entrant lock dedicated to the instance.
        """
        instance_id = id(instance)
        lock = self.locks.get(instance_id)
        if lock is not None:
            return lock
        with self._global_lock:
            return self.locks.setdefault(instance_id, threading.RLock())


class CatalogConfig:
    """Error-class catalog configuration.

    When `path` is `None`, the catalog bundled with this package is
    used. Otherwise the JSON file at `path` is loaded instead.
    """

    path: config_property[str | None] = config_property(
        None,
        check=lambda x: x is None or os.path.isfile(x),
    )
    encoding: config_property[str] = config_property("utf-8", frozen=True)


class FileLoggerConfig:
    """File logger configuration.

    This class provides configuration options for logging to a file with
    options for log rotation and backup retention.
    """

    enable: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    level: config_property[str] = config_property(
        "INFO",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    path: config_property[str] = config_property(
        "logs",
        check=lambda x: isinstance(x, str) and bool(x),
    )
    output: config_property[str] = config_property("errata.log")
    encoding: config_property[str] = config_property("utf-8", frozen=True)
    max_bytes: config_property[int] = config_property(10485760)
    backups: config_property[int] = config_property(5, check=lambda x: x >= 0)


class ConsoleLoggerConfig:
    """Console logger configuration.

    This class provides configuration options for logging to the console
    or the tty.
    """

    enable: config_property[bool] = config_property(
        True,
        allowed=[True, False],
    )
    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    colour: config_property[bool] = config_property(
        True,
        allowed=[True, False],
    )


TTYLoggerConfig = ConsoleLoggerConfig


class LoggerConfig:
    """Logger configuration.

    This class provides a unified configuration for logging. It combines
    various logger configurations to provide a comprehensive logging
    configuration setup.
    """

    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    as_json: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    file: FileLoggerConfig = FileLoggerConfig()
    tty: TTYLoggerConfig = TTYLoggerConfig()


class TelemetryConfig:
    """Telemetry configuration."""

    enabled: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    name: config_property[str | None] = config_property(None)


class Config:
    """Configuration.

    This class serves as the main configuration object for the framework.
    It provides a centralised place to manage the catalog source, logging
    and telemetry settings.
    """

    name: config_property[str] = config_property("errata", frozen=True)
    version: config_property[str] = config_property("18.10.2026", frozen=True)
    debug: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    catalog: CatalogConfig = CatalogConfig()
    logger: LoggerConfig = LoggerConfig()
    telemetry: TelemetryConfig = TelemetryConfig()
