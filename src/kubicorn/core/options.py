"""Option descriptors and layered value resolution.

Options are declared as immutable :class:`OptionDescriptor` values.
:func:`resolve_options` turns a table of descriptors plus the three
input layers into resolved values, with precedence::

    flag > environment > file > default

The function is pure: it never reads ``os.environ`` or the filesystem
itself, so the precedence rules are testable without a command tree.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from kubicorn.exceptions import ConfigValueError, OptionError, OptionUnresolvedError

ENV_PREFIX: str = "KUBICORN"
"""Prefix shared by every environment variable that overlays an option."""


class OptionKind(str, Enum):
    """Value type of a declared option."""

    INT = "int"
    BOOL = "bool"
    STRING = "string"


class ValueSource(str, Enum):
    """Layer that supplied an option's final value."""

    FLAG = "flag"
    ENV = "env"
    FILE = "file"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class OptionDescriptor:
    """Declarative description of one named option."""

    name: str
    """Long name, unique across the whole command tree (``verbose``)."""

    kind: OptionKind
    default: Any
    shorthand: str | None = None
    """Single-character alias (``v``), or ``None``."""

    help: str = ""
    persistent: bool = False
    """Whether descendants of the declaring node accept the option too."""

    @property
    def dest(self) -> str:
        """Attribute name used on the parsed argparse namespace."""
        return self.name.replace("-", "_")

    @property
    def negatable(self) -> bool:
        """Whether a generated ``--no-<name>`` spelling sets the option false.

        Names already reading as a negation (``no-headers``) get none.
        """
        return self.kind is OptionKind.BOOL and not self.name.startswith("no-")

    @property
    def env_suffix(self) -> str:
        return self.name.upper().replace("-", "_")

    def env_var(self, prefix: str = ENV_PREFIX) -> str:
        """Environment variable overlaying this option (``KUBICORN_VERBOSE``)."""
        return f"{prefix}_{self.env_suffix}"


@dataclass(frozen=True, slots=True)
class ResolvedValue:
    """Final value of an option together with the layer it came from."""

    value: Any
    source: ValueSource


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

_TRUE_WORDS: frozenset[str] = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE_WORDS: frozenset[str] = frozenset({"0", "f", "false", "n", "no", "off"})


def coerce_value(descriptor: OptionDescriptor, raw: Any, *, origin: str) -> Any:
    """Convert *raw* to the descriptor's kind.

    *origin* names the layer in error messages (``"environment variable
    KUBICORN_VERBOSE"``, ``"configuration file"``).

    Raises
    ------
    ConfigValueError
        When *raw* cannot represent a value of the declared kind.
    """
    kind = descriptor.kind

    if kind is OptionKind.BOOL:
        if isinstance(raw, bool):
            return raw
        word = str(raw).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False

    elif kind is OptionKind.INT:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            try:
                return int(raw.strip(), 10)
            except ValueError:
                pass

    elif kind is OptionKind.STRING:
        if isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
            return str(raw)

    raise ConfigValueError(
        f"Invalid {kind.value} value {raw!r} for option '{descriptor.name}' "
        f"from {origin}.",
        hint=_kind_hint(descriptor),
    )


def _kind_hint(descriptor: OptionDescriptor) -> str:
    if descriptor.kind is OptionKind.BOOL:
        return "Use one of: true, false, yes, no, on, off, 1, 0."
    if descriptor.kind is OptionKind.INT:
        return "Use a whole number, e.g. 3."
    return "Use a plain string."


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_option(
    descriptor: OptionDescriptor,
    *,
    flags: Mapping[str, Any],
    environ: Mapping[str, str],
    file_values: Mapping[str, Any],
    env_prefix: str = ENV_PREFIX,
) -> ResolvedValue:
    """Resolve one option against the flag, environment and file layers.

    *flags* must contain only options that were explicitly supplied on
    the command line; an absent key falls through to the next layer.
    An empty environment variable and a ``None`` file value count as
    absent.
    """
    name = descriptor.name

    if name in flags:
        return ResolvedValue(flags[name], ValueSource.FLAG)

    env_var = descriptor.env_var(env_prefix)
    if environ.get(env_var):
        value = coerce_value(
            descriptor, environ[env_var], origin=f"environment variable {env_var}",
        )
        return ResolvedValue(value, ValueSource.ENV)

    if file_values.get(name) is not None:
        value = coerce_value(descriptor, file_values[name], origin="configuration file")
        return ResolvedValue(value, ValueSource.FILE)

    return ResolvedValue(descriptor.default, ValueSource.DEFAULT)


def resolve_options(
    descriptors: Iterable[OptionDescriptor],
    *,
    flags: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    file_values: Mapping[str, Any] | None = None,
    env_prefix: str = ENV_PREFIX,
) -> dict[str, ResolvedValue]:
    """Resolve every descriptor; returns a mapping keyed by option name."""
    return {
        descriptor.name: resolve_option(
            descriptor,
            flags=flags or {},
            environ=environ or {},
            file_values=file_values or {},
            env_prefix=env_prefix,
        )
        for descriptor in descriptors
    }


# ---------------------------------------------------------------------------
# Storage cell
# ---------------------------------------------------------------------------

class OptionCell:
    """Storage cell bound to one declared option.

    The cell is written exactly once, when configuration initializes,
    and is read-only afterwards.
    """

    __slots__ = ("descriptor", "_resolved")

    def __init__(self, descriptor: OptionDescriptor) -> None:
        self.descriptor: OptionDescriptor = descriptor
        self._resolved: ResolvedValue | None = None

    def __repr__(self) -> str:
        state = "unresolved" if self._resolved is None else repr(self._resolved.value)
        return f"OptionCell({self.descriptor.name}={state})"

    @property
    def resolved(self) -> bool:
        return self._resolved is not None

    @property
    def value(self) -> Any:
        """The final resolved value.

        Raises
        ------
        OptionUnresolvedError
            If configuration has not been (successfully) initialized.
        """
        if self._resolved is None:
            raise OptionUnresolvedError(
                f"Option '--{self.descriptor.name}' has no resolved value.",
                hint="Configuration was not loaded; check the configuration file.",
            )
        return self._resolved.value

    @property
    def source(self) -> ValueSource:
        if self._resolved is None:
            raise OptionUnresolvedError(
                f"Option '--{self.descriptor.name}' has no resolved value.",
            )
        return self._resolved.source

    def bind(self, resolved: ResolvedValue) -> None:
        """Store the final value.  A cell cannot be bound twice."""
        if self._resolved is not None:
            raise OptionError(
                f"Option '--{self.descriptor.name}' is already resolved.",
            )
        self._resolved = resolved
