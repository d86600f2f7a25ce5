"""Exception hierarchy for modl-packager.

Classes
-------
- ModlPackagerError          Base class for every error raised by the package.
- PackagingError             Top-level assembly failure; wraps the root cause.
- MissingRequiredFieldError  ``id``, ``name`` or ``version`` absent or blank.
- SourceFileNotFoundError    A referenced archive does not exist on disk.
- InvalidManifestTextError   A value cannot be written to an XML 1.0 document.
- ConfigurationError         A packaging configuration file cannot be used.
"""
from __future__ import annotations

from pathlib import Path


class ModlPackagerError(Exception):
    """Base class for all modl-packager errors."""


class PackagingError(ModlPackagerError):
    """Raised when a bundle cannot be assembled.

    The underlying failure is attached as ``__cause__`` so callers see a
    single error type while keeping the full diagnostic chain.
    """


class MissingRequiredFieldError(PackagingError, ValueError):
    """Raised when a mandatory descriptor field is absent or blank.

    Attributes
    ----------
    field_name:
        Name of the missing field: ``"id"``, ``"name"`` or ``"version"``.
    """

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Module {field_name} is required")


class SourceFileNotFoundError(ModlPackagerError, FileNotFoundError):
    """Raised when an archive path does not resolve to an existing file.

    Attributes
    ----------
    path:
        The archive path as written in the descriptor.
    resolved:
        The absolute location that was checked.
    """

    def __init__(self, path: str, resolved: Path) -> None:
        self.path = path
        self.resolved = resolved
        super().__init__(f"Jar file not found: {path} (looked in {resolved})")


class InvalidManifestTextError(PackagingError, ValueError):
    """Raised when a descriptor value holds characters XML 1.0 forbids.

    Attributes
    ----------
    element:
        Manifest element (or ``element@attribute``) the value belongs to.
    value:
        The offending value.
    """

    def __init__(self, element: str, value: str) -> None:
        self.element = element
        self.value = value
        super().__init__(
            f"Value for <{element}> contains characters not allowed in XML: {value!r}"
        )


class ConfigurationError(ModlPackagerError, ValueError):
    """Raised when a packaging configuration file is missing or malformed."""


__all__ = [
    "ConfigurationError",
    "InvalidManifestTextError",
    "MissingRequiredFieldError",
    "ModlPackagerError",
    "PackagingError",
    "SourceFileNotFoundError",
]
