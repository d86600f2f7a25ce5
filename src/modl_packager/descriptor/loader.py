"""Packaging configuration loader.

Reads a YAML packaging file and produces a :class:`PackagingConfig`: the
module descriptor plus everything needed to place the bundle (project
root, output directory, artifact naming).

File layout
-----------
.. code-block:: yaml

    artifact_id: example-module      # default: module id
    artifact_version: 1.0.0          # default: module version
    output_dir: dist                 # relative to project_root
    project_root: .                  # relative to this file
    bundle_extension: modl
    module:
      id: com.example.module
      name: Example Module
      version: 1.0.0
      archives:
        - {path: build/libs/gateway.jar, scope: G}
      entry_points:
        - {class_name: com.example.GatewayHook, scope: G}
      dependencies:
        - {module_id: com.inductiveautomation.vision, scope: D}
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from modl_packager.descriptor.model import ModuleDescriptor
from modl_packager.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR: str = "dist"
DEFAULT_BUNDLE_EXTENSION: str = "modl"

_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "artifact_id",
        "artifact_version",
        "output_dir",
        "project_root",
        "bundle_extension",
        "module",
    }
)


def bundle_file_name(
    artifact_id: str,
    version: str,
    extension: str = DEFAULT_BUNDLE_EXTENSION,
) -> str:
    """Return the bundle file name ``<artifact_id>-<version>.<extension>``.

    >>> bundle_file_name("test-module", "1.0.0")
    'test-module-1.0.0.modl'
    """
    return f"{artifact_id}-{version}.{extension}"


# ---------------------------------------------------------------------------
# Configuration value object
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackagingConfig:
    """Everything needed for one packaging run.

    Attributes
    ----------
    descriptor:
        The module to package.
    project_root:
        Directory archive paths are resolved against.
    output_dir:
        Directory the bundle is written to.
    artifact_id:
        First part of the bundle file name.
    artifact_version:
        Second part of the bundle file name.
    bundle_extension:
        Bundle file extension, without the dot.
    """

    descriptor: ModuleDescriptor
    project_root: Path
    output_dir: Path
    artifact_id: str
    artifact_version: str
    bundle_extension: str = DEFAULT_BUNDLE_EXTENSION

    @property
    def output_name(self) -> str:
        """Return ``<artifact_id>-<artifact_version>.<bundle_extension>``."""
        return bundle_file_name(
            self.artifact_id, self.artifact_version, self.bundle_extension
        )

    def with_project_root(self, project_root: Path) -> PackagingConfig:
        """Return a copy rooted at *project_root*.

        An output directory inside the old project root moves with it, so
        ``output_dir: dist`` keeps meaning ``<project_root>/dist``.  An
        output directory outside the old root is kept as is.
        """
        project_root = project_root.resolve()
        output_dir = self.output_dir
        if output_dir.is_relative_to(self.project_root):
            output_dir = project_root / output_dir.relative_to(self.project_root)
        return replace(self, project_root=project_root, output_dir=output_dir)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class _TextScalarLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric scalars as the text written in the file.

    Versions such as ``1.10`` or ``8.10`` would otherwise become floats and
    lose their trailing zero before they ever reach the descriptor.
    """


def _construct_scalar_text(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> str:
    return loader.construct_scalar(node)


for _tag in ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float"):
    _TextScalarLoader.add_constructor(_tag, _construct_scalar_text)


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        data = yaml.load(path.read_text(encoding="utf-8"), Loader=_TextScalarLoader)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {path}, got {type(data).__name__}"
        )
    return data


def _build_descriptor(data: Any, source: str) -> ModuleDescriptor:
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"'module' in {source} must be a mapping, got {type(data).__name__}"
        )
    try:
        return ModuleDescriptor.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid module descriptor in {source}:\n{exc}") from exc


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    return str(value)


def parse_config(
    data: dict[str, Any],
    base_dir: Path,
    source: str = "<config>",
) -> PackagingConfig:
    """Build a PackagingConfig from an already-parsed mapping.

    Parameters
    ----------
    data:
        Mapping with the layout described in the module docstring.
    base_dir:
        Directory relative ``project_root`` values are resolved against.
    source:
        Label used in error messages.

    Raises
    ------
    ConfigurationError
        On unknown keys, a missing ``module`` section, or an invalid
        descriptor.
    """
    unknown = sorted(set(data) - _CONFIG_KEYS)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys in {source}: {', '.join(unknown)}"
        )
    if "module" not in data:
        raise ConfigurationError(f"Missing 'module' section in {source}")

    descriptor = _build_descriptor(data["module"], source)

    project_root = base_dir / (_optional_str(data, "project_root") or ".")
    output_dir = project_root / (_optional_str(data, "output_dir") or DEFAULT_OUTPUT_DIR)

    config = PackagingConfig(
        descriptor=descriptor,
        project_root=project_root.resolve(),
        output_dir=output_dir.resolve(),
        artifact_id=_optional_str(data, "artifact_id") or descriptor.id or "",
        artifact_version=(
            _optional_str(data, "artifact_version") or descriptor.version or ""
        ),
        bundle_extension=(
            _optional_str(data, "bundle_extension") or DEFAULT_BUNDLE_EXTENSION
        ).lstrip("."),
    )
    logger.debug(
        "Loaded packaging config from %s (project_root=%s, output_dir=%s)",
        source,
        config.project_root,
        config.output_dir,
    )
    return config


def load_config(path: Path) -> PackagingConfig:
    """Load a packaging configuration file.

    Relative ``project_root`` values resolve against the file's directory.

    Raises
    ------
    ConfigurationError
        If the file is missing, is not valid YAML, or does not describe a
        valid packaging run.
    """
    data = _read_yaml(path)
    return parse_config(data, base_dir=path.parent, source=str(path))


def load_descriptor(path: Path) -> ModuleDescriptor:
    """Load a bare module descriptor file (no packaging settings).

    A file that does contain a ``module`` section is accepted too; only
    that section is used.
    """
    data = _read_yaml(path)
    if "module" in data:
        data = data["module"]
    return _build_descriptor(data, str(path))


__all__ = [
    "DEFAULT_BUNDLE_EXTENSION",
    "DEFAULT_OUTPUT_DIR",
    "PackagingConfig",
    "bundle_file_name",
    "load_config",
    "load_descriptor",
    "parse_config",
]
