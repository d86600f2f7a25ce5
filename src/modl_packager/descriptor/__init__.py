"""Module descriptor sub-package for modl-packager.

Provides the descriptor data model, its validation helpers, and the YAML
configuration loader that builds descriptors from packaging files.
"""
from __future__ import annotations

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

__all__ = [
    "DEFAULT_FRAMEWORK_VERSION",
    "DEFAULT_PLATFORM_VERSION",
    "VALID_SCOPES",
    "ArchiveEntry",
    "Dependency",
    "EntryPoint",
    "ModuleDescriptor",
    "PackagingConfig",
    "Scope",
    "ScopeIssue",
    "ScopeIssueType",
    "ScopedEntry",
    "check_scopes",
    "load_config",
    "load_descriptor",
    "parse_config",
    "validate_required_fields",
    "validate_scopes",
]
