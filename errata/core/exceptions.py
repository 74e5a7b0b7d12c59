"""\
Exception
=========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module defines the classified exceptions of the framework. Every
exception here is, at the same time, a native Python exception of a
specific kind (`ArithmeticError`, `OSError`, `IndexError` and so on)
and a carrier of a stable error class identifier whose message and SQL
state come from the error-class catalog.

Code handling these errors programmatically should match on
`error_class`, never on the message text or the native exception type.
The message is meant for humans and may be reworded in the catalog
without notice.

.. code-block:: python

    try:
        raise ErrataArithmeticError("DIVIDE_BY_ZERO", ["7"])
    except ArithmeticError as error:
        assert error.error_class == "DIVIDE_BY_ZERO"

An error without an error class can still be created with
`from_message`, for call sites that have not been moved to the catalog
yet. Such errors report `None` for both `error_class` and `sql_state`.
"""

from __future__ import annotations

import enum
import typing as t
from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from types import MappingProxyType

from errata.core.catalog import get_catalog

if t.TYPE_CHECKING:
    from errata.core.catalog import ErrorCatalog
    from errata.core.catalog import MessageParameters

__all__: tuple[str, ...] = (
    "DatabaseError",
    "DeadWorkerError",
    "DriverExecutionError",
    "ErrataArithmeticError",
    "ErrataClassNotFoundError",
    "ErrataConcurrentModificationError",
    "ErrataDateTimeError",
    "ErrataException",
    "ErrataFileAlreadyExistsError",
    "ErrataFileNotFoundError",
    "ErrataIOError",
    "ErrataIndexOutOfBoundsError",
    "ErrataNoSuchMethodError",
    "ErrataRuntimeError",
    "ErrataSQLError",
    "ErrataSQLFeatureNotSupportedError",
    "ErrataSecurityError",
    "ErrataThrowable",
    "NativeCategory",
    "NotSupportedError",
    "UpgradeError",
    "UserAppExitError",
    "VARIANTS",
    "make_error",
)


class DatabaseError(Exception):
    """Exception raised for errors related to the database.

    Python has no built-in SQL exception, so this follows the
    `DatabaseError` of the DB-API 2.0 (PEP 249) exception hierarchy.
    """


class NotSupportedError(DatabaseError):
    """Exception raised when a database feature is not supported."""


class NativeCategory(enum.StrEnum):
    """Native failure categories of the classified errors.

    Each category is bound to exactly one built-in exception type and to
    exactly one classified error variant. The set is closed; a new kind
    of failure means a new category and a new variant.
    """

    GENERIC = "generic"
    ARITHMETIC = "arithmetic"
    CLASS_NOT_FOUND = "class-not-found"
    CONCURRENT_MODIFICATION = "concurrent-modification"
    DATETIME = "datetime"
    FILE_ALREADY_EXISTS = "file-already-exists"
    FILE_NOT_FOUND = "file-not-found"
    NO_SUCH_METHOD = "no-such-method"
    INDEX_OUT_OF_BOUNDS = "index-out-of-bounds"
    IO = "io"
    RUNTIME = "runtime"
    SECURITY = "security"
    SQL = "sql"
    SQL_FEATURE_NOT_SUPPORTED = "sql-feature-not-supported"

    @property
    def base(self) -> type[Exception]:
        """Get the built-in exception type of this category."""
        return _NATIVE_BASES[self]


_NATIVE_BASES: t.Final[dict[NativeCategory, type[Exception]]] = {
    NativeCategory.GENERIC: Exception,
    NativeCategory.ARITHMETIC: ArithmeticError,
    NativeCategory.CLASS_NOT_FOUND: ImportError,
    NativeCategory.CONCURRENT_MODIFICATION: RuntimeError,
    NativeCategory.DATETIME: ValueError,
    NativeCategory.FILE_ALREADY_EXISTS: FileExistsError,
    NativeCategory.FILE_NOT_FOUND: FileNotFoundError,
    NativeCategory.NO_SUCH_METHOD: AttributeError,
    NativeCategory.INDEX_OUT_OF_BOUNDS: IndexError,
    NativeCategory.IO: OSError,
    NativeCategory.RUNTIME: RuntimeError,
    NativeCategory.SECURITY: PermissionError,
    NativeCategory.SQL: DatabaseError,
    NativeCategory.SQL_FEATURE_NOT_SUPPORTED: NotSupportedError,
}


class ErrataThrowable(ABC):
    """Capability of an error to report its error class and SQL state.

    Anything implementing this contract exposes an error class, which is
    `None` for errors that were never classified, and a SQL state that
    is derived from the error class through the catalog.

    .. note::

        Absent values are always `None`. There is no empty-string
        sentinel for a missing SQL state.
    """

    __slots__: tuple[str, ...] = ()

    @property
    @abstractmethod
    def error_class(self) -> str | None:
        """Get the error class identifier, if any."""
        raise NotImplementedError("Subclasses must implement error_class")

    @property
    def sql_state(self) -> str | None:
        """Get the SQL state derived from the error class, if any."""
        return get_catalog().sql_state_of(self.error_class)


def _freeze(parameters: MessageParameters) -> MessageParameters:
    """Return a read-only copy of the message parameters."""
    if isinstance(parameters, Mapping):
        return MappingProxyType(dict(parameters))
    return tuple(parameters)


def _restore(
    cls: type[_ClassifiedError],
    message: str,
    cause: BaseException | None,
) -> _ClassifiedError:
    """Rebuild an error without going through the catalog again."""
    return cls.from_message(message, cause=cause)


class _ClassifiedError(ErrataThrowable):
    """Shared implementation of every classified error variant.

    The concrete variants only pair this class with a built-in exception
    type. Construction goes through the catalog: the message is whatever
    the catalog formats for the error class and its parameters. Catalog
    lookup faults are never caught here.

    Errors can be copied with `copy.copy` and `copy.deepcopy`; a copy
    keeps the message and the catalog of the original instead of
    formatting the message again. Pickling is not supported.

    :param error_class: The error class identifier.
    :param message_parameters: Positional or named parameters for the
        message template, defaults to no parameters.
    :param cause: The error that caused this one, defaults to `None`.
    :param catalog: The catalog to format the message with, defaults to
        the process-wide catalog.
    :raises ErrorClassNotFoundError: If the error class is unknown.
    :raises MessageParameterError: If the parameters do not fit the
        message template.
    """

    category: t.ClassVar[NativeCategory]

    def __init__(
        self,
        error_class: str,
        message_parameters: MessageParameters = (),
        *,
        cause: BaseException | None = None,
        catalog: ErrorCatalog | None = None,
    ) -> None:
        """Initialise the error from its error class."""
        if catalog is None:
            catalog = get_catalog()
        message = catalog.format_message(error_class, message_parameters)
        self._initialise(
            message,
            cause,
            error_class=error_class,
            parameters=message_parameters,
            catalog=catalog,
        )

    @classmethod
    def from_message(
        cls,
        message: str,
        *,
        cause: BaseException | None = None,
    ) -> t.Self:
        """Create an unclassified error from a free-text message.

        :param message: The error message, used verbatim.
        :param cause: The error that caused this one, defaults to
            `None`.
        :return: An error without error class and SQL state.
        """
        error = cls.__new__(cls, message)
        error._initialise(message, cause)
        return error

    def _initialise(
        self,
        message: str,
        cause: BaseException | None,
        *,
        error_class: str | None = None,
        parameters: MessageParameters = (),
        catalog: ErrorCatalog | None = None,
    ) -> None:
        """Set the native message and the classification state."""
        super().__init__(message)
        self._message = message
        self._error_class = error_class
        self._parameters = _freeze(parameters)
        self._catalog = catalog
        self._cause = cause
        self.__cause__ = cause

    def __repr__(self) -> str:
        """Return a string representation of the error."""
        if self._error_class is None:
            return f"<{type(self).__name__}(message={self._message!r})>"
        return (
            f"<{type(self).__name__}(error_class={self._error_class!r}, "
            f"message={self._message!r})>"
        )

    def __reduce__(self) -> tuple[t.Any, ...]:
        """Return the state `copy` rebuilds the error from."""
        state = dict(self.__dict__)
        if isinstance(self._parameters, Mapping):
            state["_parameters"] = dict(self._parameters)
        return _restore, (type(self), self._message, self._cause), state

    def __setstate__(self, state: dict[str, t.Any]) -> None:
        """Restore the classification state of a copied error."""
        self.__dict__.update(state)
        self._parameters = _freeze(self._parameters)

    @property
    def message(self) -> str:
        """Get the error message."""
        return self._message

    @property
    def error_class(self) -> str | None:
        """Get the error class identifier, if any."""
        return self._error_class

    @property
    def message_parameters(self) -> MessageParameters:
        """Get the parameters the message was formatted with."""
        return self._parameters

    @property
    def sql_state(self) -> str | None:
        """Get the SQL state of the error class, if any."""
        if self._catalog is None:
            return None
        return self._catalog.sql_state_of(self._error_class)

    @property
    def cause(self) -> BaseException | None:
        """Get the error this one was created from, if any."""
        return self._cause


class ErrataException(_ClassifiedError, Exception):
    """Generic classified exception."""

    category = NativeCategory.GENERIC


@t.final
class ErrataArithmeticError(_ClassifiedError, ArithmeticError):
    """Arithmetic error with an error class."""

    category = NativeCategory.ARITHMETIC


@t.final
class ErrataClassNotFoundError(_ClassifiedError, ImportError):
    """Error raised when a class cannot be loaded by name."""

    category = NativeCategory.CLASS_NOT_FOUND


@t.final
class ErrataConcurrentModificationError(_ClassifiedError, RuntimeError):
    """Error raised when an object is modified while being iterated."""

    category = NativeCategory.CONCURRENT_MODIFICATION


@t.final
class ErrataDateTimeError(_ClassifiedError, ValueError):
    """Error raised for invalid or unrepresentable dates and times."""

    category = NativeCategory.DATETIME


@t.final
class ErrataFileAlreadyExistsError(_ClassifiedError, FileExistsError):
    """File already exists error with an error class."""

    category = NativeCategory.FILE_ALREADY_EXISTS


@t.final
class ErrataFileNotFoundError(_ClassifiedError, FileNotFoundError):
    """File not found error with an error class."""

    category = NativeCategory.FILE_NOT_FOUND


@t.final
class ErrataNoSuchMethodError(_ClassifiedError, AttributeError):
    """Error raised when a method cannot be found on an object."""

    category = NativeCategory.NO_SUCH_METHOD


@t.final
class ErrataIndexOutOfBoundsError(_ClassifiedError, IndexError):
    """Index out of bounds error with an error class."""

    category = NativeCategory.INDEX_OUT_OF_BOUNDS


@t.final
class ErrataIOError(_ClassifiedError, OSError):
    """I/O error with an error class."""

    category = NativeCategory.IO


@t.final
class ErrataRuntimeError(_ClassifiedError, RuntimeError):
    """Runtime error with an error class."""

    category = NativeCategory.RUNTIME


@t.final
class ErrataSecurityError(_ClassifiedError, PermissionError):
    """Security error with an error class."""

    category = NativeCategory.SECURITY


@t.final
class ErrataSQLError(_ClassifiedError, DatabaseError):
    """SQL error with an error class."""

    category = NativeCategory.SQL


@t.final
class ErrataSQLFeatureNotSupportedError(_ClassifiedError, NotSupportedError):
    """SQL feature not supported error with an error class."""

    category = NativeCategory.SQL_FEATURE_NOT_SUPPORTED


VARIANTS: t.Final[Mapping[NativeCategory, type[_ClassifiedError]]] = (
    MappingProxyType(
        {
            variant.category: variant
            for variant in (
                ErrataException,
                ErrataArithmeticError,
                ErrataClassNotFoundError,
                ErrataConcurrentModificationError,
                ErrataDateTimeError,
                ErrataFileAlreadyExistsError,
                ErrataFileNotFoundError,
                ErrataNoSuchMethodError,
                ErrataIndexOutOfBoundsError,
                ErrataIOError,
                ErrataRuntimeError,
                ErrataSecurityError,
                ErrataSQLError,
                ErrataSQLFeatureNotSupportedError,
            )
        }
    )
)


def make_error(
    category: NativeCategory | str,
    error_class: str,
    message_parameters: MessageParameters = (),
    *,
    cause: BaseException | None = None,
    catalog: ErrorCatalog | None = None,
) -> _ClassifiedError:
    """Create the classified error variant of a native category.

    :param category: The native category, or its value.
    :param error_class: The error class identifier.
    :param message_parameters: Positional or named parameters for the
        message template, defaults to no parameters.
    :param cause: The error that caused this one, defaults to `None`.
    :param catalog: The catalog to format the message with, defaults to
        the process-wide catalog.
    :return: The classified error, ready to be raised.
    :raises ValueError: If the category is unknown.
    """
    variant = VARIANTS[NativeCategory(category)]
    return variant(
        error_class,
        message_parameters,
        cause=cause,
        catalog=catalog,
    )


# NOTE(xames3): The exceptions below carry process-control information
# rather than a failure diagnosis. None of them is ever classified.


@t.final
class DriverExecutionError(ErrataException):
    """Exception raised when user code running in the driver fails.

    This covers user callbacks executed by the coordinating process, not
    by a worker, for instance a misbehaving ordering or an accumulator
    update.

    :param cause: The error raised by the user code.
    :raises TypeError: If no cause is given.
    """

    def __init__(self, cause: BaseException) -> None:
        """Initialise the error with the failing user code's error."""
        if cause is None:
            raise TypeError("driver execution error requires a cause")
        self._initialise("Execution error", cause)


@t.final
class UserAppExitError(ErrataException):
    """Exception raised to forward the exit code of a user application.

    This is used when the main user code runs as a child process and the
    parent launcher should exit with the same exit code.

    :param exit_code: The exit code of the user application.
    """

    def __init__(self, exit_code: int) -> None:
        """Initialise the error with the exit code."""
        self._initialise(f"User application exited with {exit_code}", None)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> int:
        """Get the exit code of the user application."""
        return self._exit_code


@t.final
class DeadWorkerError(ErrataException):
    """Exception raised when the worker to access is dead."""

    def __init__(self, message: str) -> None:
        """Initialise the error with a message naming the worker."""
        self._initialise(message, None)


class UpgradeError(RuntimeError):
    """Exception raised when a result may differ after an upgrade.

    This is informational and deliberately carries no error class, so it
    does not implement `ErrataThrowable`.

    :param version: The version that changed the behaviour.
    :param message: Explanation of the behaviour change.
    :param cause: The error that revealed the change, defaults to
        `None`.
    """

    def __init__(
        self,
        version: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        """Initialise the error with the version and explanation."""
        super().__init__(
            "You may get a different result due to the upgrading to "
            f"{version}: {message}"
        )
        self.version = version
        self.cause = cause
        self.__cause__ = cause
