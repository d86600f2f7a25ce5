"""modl-packager — Build ``.modl`` module bundles for the Ignition platform.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import modl_packager
>>> modl_packager.__version__
'0.1.0'

Descriptor
----------
>>> from modl_packager import ModuleDescriptor, ArchiveEntry, EntryPoint
>>> descriptor = ModuleDescriptor(
...     id="com.example.module",
...     name="Example Module",
...     version="1.0.0",
...     archives=[ArchiveEntry(path="build/libs/gateway.jar", scope="G")],
...     entry_points=[EntryPoint(class_name="com.example.GatewayHook", scope="G")],
... )

Manifest
--------
>>> from modl_packager import ManifestGenerator
>>> xml_bytes = ManifestGenerator().generate(descriptor)

Bundle
------
>>> from pathlib import Path
>>> from modl_packager import BundleAssembler, load_config
>>> config = load_config(Path("modl.yaml"))  # doctest: +SKIP
>>> BundleAssembler().package(config)  # doctest: +SKIP
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from modl_packager.errors import (
    ConfigurationError,
    InvalidManifestTextError,
    MissingRequiredFieldError,
    ModlPackagerError,
    PackagingError,
    SourceFileNotFoundError,
)

# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------
from modl_packager.descriptor.loader import (
    PackagingConfig,
    load_config,
    load_descriptor,
    parse_config,
)
from modl_packager.descriptor.model import (
    DEFAULT_FRAMEWORK_VERSION,
    DEFAULT_PLATFORM_VERSION,
    VALID_SCOPES,
    ArchiveEntry,
    Dependency,
    EntryPoint,
    ModuleDescriptor,
    Scope,
    ScopedEntry,
)
from modl_packager.descriptor.validation import (
    ScopeIssue,
    ScopeIssueType,
    check_scopes,
    validate_required_fields,
    validate_scopes,
)

# ---------------------------------------------------------------------------
# Bundler
# ---------------------------------------------------------------------------
from modl_packager.bundler.assembler import BundleAssembler, bundle_file_name
from modl_packager.bundler.manifest import MANIFEST_FILE_NAME, ManifestGenerator

__all__ = [
    # Version
    "__version__",
    # Errors
    "ConfigurationError",
    "InvalidManifestTextError",
    "MissingRequiredFieldError",
    "ModlPackagerError",
    "PackagingError",
    "SourceFileNotFoundError",
    # Descriptor: model
    "DEFAULT_FRAMEWORK_VERSION",
    "DEFAULT_PLATFORM_VERSION",
    "VALID_SCOPES",
    "ArchiveEntry",
    "Dependency",
    "EntryPoint",
    "ModuleDescriptor",
    "Scope",
    "ScopedEntry",
    # Descriptor: validation
    "ScopeIssue",
    "ScopeIssueType",
    "check_scopes",
    "validate_required_fields",
    "validate_scopes",
    # Descriptor: loader
    "PackagingConfig",
    "load_config",
    "load_descriptor",
    "parse_config",
    # Bundler
    "MANIFEST_FILE_NAME",
    "BundleAssembler",
    "ManifestGenerator",
    "bundle_file_name",
]
