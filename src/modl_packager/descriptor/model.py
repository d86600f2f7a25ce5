"""Module descriptor data model.

The descriptor is the validated, immutable record of everything that goes
into a ``.modl`` bundle: module identity, host compatibility, optional
license/documentation references and three scoped collections (archives,
entry-point hooks and module dependencies).

Classes
-------
- Scope             Three-value enum of host subsystems (G / D / C).
- EntryKind         Rendering rules shared by one scoped collection.
- ScopedEntry       Base record ``{value, scope}`` for all scoped collections.
- ArchiveEntry      A jar to copy into the bundle.
- EntryPoint        A hook class loaded by the host.
- Dependency        Another module this one depends on.
- ModuleDescriptor  Frozen pydantic model for the whole module.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import PureWindowsPath
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_PLATFORM_VERSION: str = "8.1.45"
DEFAULT_FRAMEWORK_VERSION: str = "8"


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


class Scope(str, Enum):
    """Host subsystem an archive, hook or dependency applies to.

    Values
    ------
    GATEWAY:
        Loaded by the gateway service.
    DESIGNER:
        Loaded by the designer application.
    CLIENT:
        Loaded by runtime clients.
    """

    GATEWAY = "G"
    DESIGNER = "D"
    CLIENT = "C"


VALID_SCOPES: frozenset[str] = frozenset(scope.value for scope in Scope)


def archive_basename(path: str) -> str:
    """Return the file name of *path*, accepting ``/`` and ``\\`` separators.

    >>> archive_basename("build/libs/gateway.jar")
    'gateway.jar'
    >>> archive_basename("build\\\\libs\\\\client.jar")
    'client.jar'
    """
    return PureWindowsPath(path).name


def _verbatim(value: str) -> str:
    return value


# ---------------------------------------------------------------------------
# Scoped entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntryKind:
    """How one scoped collection is named and rendered.

    Attributes
    ----------
    element:
        XML element name in ``module.xml``.
    label:
        Human-readable kind used in log messages.
    render:
        Maps the entry value to the element's text content.
    """

    element: str
    label: str
    render: Callable[[str], str]


ARCHIVE_KIND = EntryKind(element="jar", label="jar", render=archive_basename)
ENTRY_POINT_KIND = EntryKind(element="hook", label="hook", render=_verbatim)
DEPENDENCY_KIND = EntryKind(element="depends", label="dependency", render=_verbatim)


class ScopedEntry(BaseModel):
    """A ``{value, scope}`` pair belonging to one of the scoped collections.

    Subclasses name their value field through ``value_field`` and their
    rendering rules through ``kind``.  A bare string is accepted as
    shorthand for an entry without a scope.
    """

    kind: ClassVar[EntryKind]
    value_field: ClassVar[str]

    scope: str | None = None

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "populate_by_name": True,
        "alias_generator": to_camel,
        "coerce_numbers_to_str": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_value(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {cls.value_field: data}
        return data

    @property
    def value(self) -> str | None:
        """Return the entry's primary value (path, class name or module id)."""
        return getattr(self, self.value_field)

    def render(self) -> str:
        """Return the text content of this entry's manifest element."""
        if self.value is None:
            return ""
        return self.kind.render(self.value)


class ArchiveEntry(ScopedEntry):
    """A jar, referenced by a path relative to the project root."""

    kind: ClassVar[EntryKind] = ARCHIVE_KIND
    value_field: ClassVar[str] = "path"

    path: str | None = None


class EntryPoint(ScopedEntry):
    """A fully-qualified hook class name."""

    kind: ClassVar[EntryKind] = ENTRY_POINT_KIND
    value_field: ClassVar[str] = "class_name"

    class_name: str | None = None


class Dependency(ScopedEntry):
    """The identifier of a module this module depends on."""

    kind: ClassVar[EntryKind] = DEPENDENCY_KIND
    value_field: ClassVar[str] = "module_id"

    module_id: str | None = None


# ---------------------------------------------------------------------------
# Module descriptor
# ---------------------------------------------------------------------------


class ModuleDescriptor(BaseModel):
    """Everything that is packaged into a single module bundle.

    Required fields (``id``, ``name``, ``version``) may be ``None`` here;
    they are enforced when the descriptor is validated for packaging so
    that the error names the exact missing field.

    Attributes
    ----------
    id:
        Globally unique module identifier, e.g. ``"com.example.module"``.
    name:
        Display name.
    description:
        Optional free-text description.
    version:
        Module version string.  Opaque to the packager.
    required_platform_version:
        Minimum host platform version.  Defaults to ``"8.1.45"``.
    required_framework_version:
        Minimum framework major version.  Defaults to ``"8"``.
    license:
        Optional bundle-relative path to a license document.
    documentation:
        Optional bundle-relative path to a documentation document.
    archives:
        Jars to copy into the bundle, in manifest order.
    entry_points:
        Hook classes, in manifest order.
    dependencies:
        Module dependencies, in manifest order.
    """

    id: str | None = None
    name: str | None = None
    description: str | None = None
    version: str | None = None
    required_platform_version: str = DEFAULT_PLATFORM_VERSION
    required_framework_version: str = DEFAULT_FRAMEWORK_VERSION
    license: str | None = None
    documentation: str | None = None
    archives: tuple[ArchiveEntry, ...] = Field(default_factory=tuple)
    entry_points: tuple[EntryPoint, ...] = Field(default_factory=tuple)
    dependencies: tuple[Dependency, ...] = Field(default_factory=tuple)

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "populate_by_name": True,
        "alias_generator": to_camel,
        "coerce_numbers_to_str": True,
    }

    @field_validator(
        "id",
        "version",
        "required_platform_version",
        "required_framework_version",
        mode="before",
    )
    @classmethod
    def _reject_float(cls, value: Any) -> Any:
        # 1.10 and 1.1 are the same float; the written text is already gone.
        if isinstance(value, float):
            raise ValueError(
                f"got the number {value!r}; quote the value so its text is kept"
            )
        return value

    def scoped_entries(self) -> Iterator[ScopedEntry]:
        """Yield archives, then entry points, then dependencies."""
        yield from self.archives
        yield from self.entry_points
        yield from self.dependencies


__all__ = [
    "ARCHIVE_KIND",
    "DEFAULT_FRAMEWORK_VERSION",
    "DEFAULT_PLATFORM_VERSION",
    "DEPENDENCY_KIND",
    "ENTRY_POINT_KIND",
    "VALID_SCOPES",
    "ArchiveEntry",
    "Dependency",
    "EntryKind",
    "EntryPoint",
    "ModuleDescriptor",
    "Scope",
    "ScopedEntry",
    "archive_basename",
]
