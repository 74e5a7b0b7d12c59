"""\
Error-class catalog
===================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the catalog of error classes used by the classified
errors of this framework. The catalog maps a stable error class
identifier to a message template and, optionally, to a SQL state code.

Catalog data is a JSON object in the following layout::

    {
        "DIVIDE_BY_ZERO": {
            "message": ["cannot divide {0} by zero"],
            "sqlState": "22012"
        },
        "INVALID_PARAMETER": {
            "message": ["The value of parameter {name} is invalid."],
            "subClass": {
                "CHARSET": {"message": ["Expected one of {charsets}."]}
            }
        }
    }

Message lines are joined with a newline. A sub-class is addressed as
`MAIN.SUB`, its template is the main template followed by a space and
the sub-class template, and it shares the SQL state of the main class.

Templates use `str.format` placeholders. A template is either positional
(`{0}`, `{1}`, ...) or named (`{table}`), never both. Templates are
checked when the catalog is loaded so that a malformed entry fails at
startup rather than at the failure site.

The catalog is immutable once built and is safe to read from any number
of threads. A single process-wide catalog is available through
`get_catalog`, loaded lazily from the configured path or from the
catalog bundled with this package.
"""

from __future__ import annotations

import json
import string
import threading
import typing as t
from collections.abc import Mapping
from collections.abc import Sequence
from importlib import resources
from types import MappingProxyType

from errata.core.config import Config
from errata.core.error import CatalogLoadError
from errata.core.error import ErrorClassNotFoundError
from errata.core.error import MessageParameterError
from errata.utils.logging import get_logger

if t.TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Iterator

__all__: tuple[str, ...] = (
    "ErrorCatalog",
    "ErrorClassInfo",
    "MessageTemplate",
    "get_catalog",
    "install_catalog",
    "load_catalog",
)

MessageParameters = Sequence[str] | Mapping[str, str]

_BUNDLED_CATALOG: t.Final[str] = "error-classes.json"
_SUBCLASS_SEPARATOR: t.Final[str] = "."

_formatter = string.Formatter()
_CONVERSIONS: t.Final[frozenset[str | None]] = frozenset(
    {None, "r", "s", "a"}
)
_catalog: ErrorCatalog | None = None
_catalog_lock = threading.Lock()

logger = get_logger(__name__)


class MessageTemplate:
    """Validated message template of an error class.

    The placeholders of the template are inspected once, when the
    template is created, so that rendering only has to compare the
    provided parameters against what the template expects.

    :param text: The raw template text.
    :param owner: Name of the error class owning this template, used
        for error reporting.
    :raises CatalogLoadError: If the template text is malformed, mixes
        positional and named placeholders, skips positional indices or
        uses a format specification that cannot format a string.
    """

    __slots__: tuple[str, ...] = ("_text", "_arity", "_names")

    def __init__(self, text: str, *, owner: str) -> None:
        """Initialise and validate the message template."""
        self._text = text
        positional: set[int] = set()
        names: set[str] = set()
        automatic = 0
        try:
            fields = [item[1:] for item in _formatter.parse(text)]
        except ValueError as error:
            raise CatalogLoadError(
                f"malformed message template for {owner!r}: {error}"
            ) from error
        for field, format_spec, conversion in fields:
            if field is None:
                continue
            if format_spec and "{" in format_spec:
                raise CatalogLoadError(
                    f"nested placeholders are not supported in message "
                    f"template for {owner!r}"
                )
            if conversion not in _CONVERSIONS:
                raise CatalogLoadError(
                    f"unsupported conversion !{conversion} in message "
                    f"template for {owner!r}"
                )
            try:
                format("", format_spec)
            except ValueError as error:
                raise CatalogLoadError(
                    f"invalid format specification {format_spec!r} in "
                    f"message template for {owner!r}: {error}"
                ) from error
            if field == "":
                automatic += 1
            elif field.isdigit():
                positional.add(int(field))
            elif field.isidentifier():
                names.add(field)
            else:
                raise CatalogLoadError(
                    f"unsupported placeholder {{{field}}} in message "
                    f"template for {owner!r}"
                )
        if automatic and positional:
            raise CatalogLoadError(
                f"cannot mix automatic and manual numbering in message "
                f"template for {owner!r}"
            )
        if names and (automatic or positional):
            raise CatalogLoadError(
                f"cannot mix positional and named placeholders in message "
                f"template for {owner!r}"
            )
        if positional and positional != set(range(max(positional) + 1)):
            raise CatalogLoadError(
                f"positional placeholders must be numbered from 0 without "
                f"gaps in message template for {owner!r}"
            )
        self._arity = automatic or len(positional)
        self._names = frozenset(names)

    def __repr__(self) -> str:
        """Return a string representation of the template."""
        return f"<{type(self).__name__}({self._text!r})>"

    @property
    def text(self) -> str:
        """Get the raw template text."""
        return self._text

    @property
    def arity(self) -> int:
        """Get the number of positional parameters expected."""
        return self._arity

    @property
    def names(self) -> frozenset[str]:
        """Get the names of the named parameters expected."""
        return self._names

    def render(self, error_class: str, parameters: MessageParameters) -> str:
        """Substitute the parameters into the template.

        Parameters are never truncated or padded. Anything other than an
        exact match of the expected arity (or names) is rejected.

        :param error_class: Name of the error class being rendered, used
            for error reporting.
        :param parameters: Ordered sequence of positional parameters or
            a mapping of named parameters.
        :return: The rendered message.
        :raises MessageParameterError: If the parameters do not fit the
            template.
        """
        if isinstance(parameters, str | bytes):
            raise MessageParameterError(
                error_class,
                "expected a sequence of strings, got a single string",
            )
        if isinstance(parameters, Mapping):
            if self._arity:
                raise MessageParameterError(
                    error_class,
                    f"expected {self._arity} positional parameter(s), got "
                    "named parameters",
                )
            provided = set(parameters)
            if provided != self._names:
                missing = ", ".join(sorted(self._names - provided)) or "-"
                unexpected = ", ".join(sorted(provided - self._names)) or "-"
                raise MessageParameterError(
                    error_class,
                    f"missing: {missing}; unexpected: {unexpected}",
                )
            return self._format(error_class, **parameters)
        values = tuple(parameters)
        if self._names:
            raise MessageParameterError(
                error_class,
                "expected named parameters "
                f"({', '.join(sorted(self._names))}), got positional ones",
            )
        if len(values) != self._arity:
            raise MessageParameterError(
                error_class,
                f"expected {self._arity} parameter(s), got {len(values)}",
            )
        return self._format(error_class, *values)

    def _format(
        self,
        error_class: str,
        /,
        *args: t.Any,
        **kwargs: t.Any,
    ) -> str:
        """Format the template, reporting values it cannot format."""
        try:
            return self._text.format(*args, **kwargs)
        except ValueError as error:
            raise MessageParameterError(error_class, str(error)) from error


class ErrorClassInfo:
    """Catalog entry of a single error class.

    :param name: The error class identifier.
    :param template: The message template of the error class.
    :param sql_state: The SQL state of the error class, defaults to
        `None`.
    """

    __slots__: tuple[str, ...] = ("_name", "_template", "_sql_state")

    def __init__(
        self,
        name: str,
        template: MessageTemplate,
        sql_state: str | None = None,
    ) -> None:
        """Initialise a catalog entry."""
        self._name = name
        self._template = template
        self._sql_state = sql_state

    def __repr__(self) -> str:
        """Return a string representation of the entry."""
        return (
            f"<{type(self).__name__}(name={self._name!r}, "
            f"sql_state={self._sql_state!r})>"
        )

    @property
    def name(self) -> str:
        """Get the error class identifier."""
        return self._name

    @property
    def template(self) -> MessageTemplate:
        """Get the message template."""
        return self._template

    @property
    def sql_state(self) -> str | None:
        """Get the SQL state, if any."""
        return self._sql_state


def _join(owner: str, message: t.Any) -> str:
    """Join the message lines of a catalog entry."""
    if isinstance(message, str):
        return message
    if isinstance(message, list) and all(
        isinstance(line, str) for line in message
    ):
        return "\n".join(message)
    raise CatalogLoadError(
        f"message of {owner!r} must be a string or a list of strings"
    )


def _entries(name: t.Any, entry: t.Any) -> Iterator[ErrorClassInfo]:
    """Yield the catalog entries defined by one top-level error class."""
    if not isinstance(name, str) or not name:
        raise CatalogLoadError(f"invalid error class name: {name!r}")
    if _SUBCLASS_SEPARATOR in name:
        raise CatalogLoadError(
            f"error class name {name!r} must not contain "
            f"{_SUBCLASS_SEPARATOR!r}"
        )
    if not isinstance(entry, Mapping):
        raise CatalogLoadError(f"entry of {name!r} must be an object")
    message = _join(name, entry.get("message"))
    sql_state = entry.get("sqlState")
    if sql_state is not None and not isinstance(sql_state, str):
        raise CatalogLoadError(f"SQL state of {name!r} must be a string")
    yield ErrorClassInfo(name, MessageTemplate(message, owner=name), sql_state)
    sub_classes = entry.get("subClass", {})
    if not isinstance(sub_classes, Mapping):
        raise CatalogLoadError(f"sub-classes of {name!r} must be an object")
    for sub, sub_entry in sub_classes.items():
        qualified = f"{name}{_SUBCLASS_SEPARATOR}{sub}"
        if not isinstance(sub_entry, Mapping):
            raise CatalogLoadError(f"entry of {qualified!r} must be an object")
        text = f"{message} {_join(qualified, sub_entry.get('message'))}"
        yield ErrorClassInfo(
            qualified,
            MessageTemplate(text, owner=qualified),
            sql_state,
        )


class ErrorCatalog:
    """Immutable registry of error classes.

    This class is the lookup service behind every classified error. It
    formats messages for an error class and reports its SQL state. Once
    built it never changes, which makes it safe to share between
    threads without any synchronisation.

    :param classes: The catalog entries to register.
    :raises CatalogLoadError: If an error class is registered twice.

    .. code-block:: python

        catalog = ErrorCatalog.from_mapping(
            {"DIVIDE_BY_ZERO": {"message": ["cannot divide {0} by zero"]}}
        )
        catalog.format_message("DIVIDE_BY_ZERO", ["7"])
    """

    __slots__: tuple[str, ...] = ("_classes",)

    def __init__(self, classes: Iterable[ErrorClassInfo] = ()) -> None:
        """Initialise the catalog with its entries."""
        registry: dict[str, ErrorClassInfo] = {}
        for info in classes:
            if info.name in registry:
                raise CatalogLoadError(
                    f"error class {info.name!r} is defined more than once"
                )
            registry[info.name] = info
        self._classes: Mapping[str, ErrorClassInfo] = MappingProxyType(
            registry
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, t.Any]) -> ErrorCatalog:
        """Build a catalog from decoded catalog data.

        :param data: Mapping of error class names to their entries.
        :return: The catalog.
        :raises CatalogLoadError: If the data is malformed.
        """
        if not isinstance(data, Mapping):
            raise CatalogLoadError("catalog data must be an object")
        return cls(
            info
            for name, entry in data.items()
            for info in _entries(name, entry)
        )

    @classmethod
    def from_json(cls, path: str, encoding: str = "utf-8") -> ErrorCatalog:
        """Build a catalog from a JSON file.

        :param path: Path of the JSON file.
        :param encoding: Encoding of the file, defaults to `utf-8`.
        :return: The catalog.
        :raises CatalogLoadError: If the file cannot be read or decoded,
            or its content is malformed.
        """
        try:
            with open(path, encoding=encoding) as f:
                data = json.load(f)
        except (OSError, ValueError) as error:
            raise CatalogLoadError(
                f"cannot load catalog from {path!r}: {error}"
            ) from error
        catalog = cls.from_mapping(data)
        logger.info(
            f"Loaded {len(catalog)} error classes",
            extra={"source": path},
        )
        return catalog

    @classmethod
    def default(cls) -> ErrorCatalog:
        """Build the catalog bundled with this package."""
        source = resources.files("errata.resources") / _BUNDLED_CATALOG
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, ValueError) as error:
            raise CatalogLoadError(
                f"cannot load bundled catalog: {error}"
            ) from error
        catalog = cls.from_mapping(data)
        logger.info(
            f"Loaded {len(catalog)} error classes",
            extra={"source": _BUNDLED_CATALOG},
        )
        return catalog

    def __contains__(self, error_class: object) -> bool:
        """Check if an error class is registered."""
        return error_class in self._classes

    def __iter__(self) -> Iterator[str]:
        """Iterate over the registered error class names."""
        return iter(self._classes)

    def __len__(self) -> int:
        """Return the number of registered error classes."""
        return len(self._classes)

    def __repr__(self) -> str:
        """Return a string representation of the catalog."""
        return f"<{type(self).__name__}(classes={len(self._classes)})>"

    def __copy__(self) -> ErrorCatalog:
        """Return the catalog itself, it is immutable."""
        return self

    def __deepcopy__(self, memo: dict[int, t.Any]) -> ErrorCatalog:
        """Return the catalog itself, it is immutable."""
        return self

    def info(self, error_class: str) -> ErrorClassInfo:
        """Return the catalog entry of an error class.

        :param error_class: The error class identifier.
        :return: The catalog entry.
        :raises ErrorClassNotFoundError: If the error class is unknown.
        """
        try:
            return self._classes[error_class]
        except KeyError:
            logger.error(
                f"Error class {error_class!r} is not in the catalog",
                extra={"error_class": error_class},
            )
            raise ErrorClassNotFoundError(error_class) from None

    def format_message(
        self,
        error_class: str,
        parameters: MessageParameters = (),
    ) -> str:
        """Format the message of an error class.

        :param error_class: The error class identifier.
        :param parameters: Positional or named message parameters,
            defaults to no parameters.
        :return: The formatted message.
        :raises ErrorClassNotFoundError: If the error class is unknown.
        :raises MessageParameterError: If the parameters do not fit the
            message template.
        """
        template = self.info(error_class).template
        try:
            return template.render(error_class, parameters)
        except MessageParameterError as error:
            logger.error(str(error), extra={"error_class": error_class})
            raise

    def sql_state_of(self, error_class: str | None) -> str | None:
        """Return the SQL state of an error class.

        :param error_class: The error class identifier.
        :return: The SQL state, or `None` if the error class is absent,
            unknown or has no SQL state.
        """
        if error_class is None:
            return None
        info = self._classes.get(error_class)
        return info.sql_state if info is not None else None


def load_catalog(
    path: str | None = None,
    *,
    config: Config | None = None,
) -> ErrorCatalog:
    """Load a catalog from a file or from the bundled data.

    :param path: Path of a JSON catalog, defaults to `None`. If not
        provided, the path from the configuration is used and, failing
        that, the catalog bundled with this package.
    :param config: Configuration to read the catalog settings from,
        defaults to a new `Config` instance.
    :return: The loaded catalog.
    """
    if config is None:
        config = Config()
    path = path or config.catalog.path
    if path is None:
        return ErrorCatalog.default()
    return ErrorCatalog.from_json(path, encoding=config.catalog.encoding)


def get_catalog() -> ErrorCatalog:
    """Return the process-wide catalog, loading it on first use."""
    global _catalog
    catalog = _catalog
    if catalog is None:
        with _catalog_lock:
            if _catalog is None:
                _catalog = load_catalog()
            catalog = _catalog
    return catalog


def install_catalog(catalog: ErrorCatalog | None) -> ErrorCatalog | None:
    """Install the process-wide catalog.

    This is meant to be called once, at startup, before any classified
    error is created. Passing `None` drops the installed catalog so the
    next `get_catalog` call loads it again.

    :param catalog: The catalog to install.
    :return: The previously installed catalog, if any.
    """
    global _catalog
    with _catalog_lock:
        previous, _catalog = _catalog, catalog
    logger.debug(f"Installed catalog {catalog!r}")
    return previous
