"""Tests for modl_packager.descriptor.loader.

Covers:
- load_config: defaults, overrides, relative path resolution
- load_descriptor: bare descriptor files and full packaging files
- parse_config on in-memory mappings
- Error cases: missing file, bad YAML, non-mapping, unknown keys,
  missing module section, invalid descriptor fields
"""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from modl_packager.descriptor.loader import (
    DEFAULT_BUNDLE_EXTENSION,
    DEFAULT_OUTPUT_DIR,
    PackagingConfig,
    load_config,
    load_descriptor,
    parse_config,
)
from modl_packager.descriptor.model import ModuleDescriptor
from modl_packager.errors import ConfigurationError

_FULL_CONFIG = """\
artifact_id: test-module
artifact_version: 2.0.0-SNAPSHOT
output_dir: target
bundle_extension: .modl
module:
  id: com.example.test
  name: Test Module
  description: A module under test
  version: 2.0.0
  requiredPlatformVersion: 8.1.33
  license: license.html
  documentation: doc/readme.html
  archives:
    - {path: jars/module-gateway-1.0.0.jar, scope: G}
    - jars/module-client-1.0.0.jar
  entry_points:
    - {class_name: com.example.GatewayHook, scope: G}
  dependencies:
    - {module_id: com.inductiveautomation.vision, scope: D}
"""

_MINIMAL_CONFIG = """\
module:
  id: com.example.minimal
  name: Minimal Module
  version: 1.0.0
"""


def _write(tmp_path: Path, content: str, name: str = "modl.yaml") -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_full_config(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, _FULL_CONFIG))
        assert isinstance(config, PackagingConfig)
        assert config.artifact_id == "test-module"
        assert config.artifact_version == "2.0.0-SNAPSHOT"
        assert config.bundle_extension == "modl"
        assert config.output_name == "test-module-2.0.0-SNAPSHOT.modl"
        assert config.project_root == tmp_path.resolve()
        assert config.output_dir == (tmp_path / "target").resolve()

    def test_descriptor_fields(self, tmp_path: Path) -> None:
        descriptor = load_config(_write(tmp_path, _FULL_CONFIG)).descriptor
        assert descriptor.id == "com.example.test"
        assert descriptor.required_platform_version == "8.1.33"
        assert descriptor.required_framework_version == "8"
        assert [a.path for a in descriptor.archives] == [
            "jars/module-gateway-1.0.0.jar",
            "jars/module-client-1.0.0.jar",
        ]
        assert descriptor.archives[1].scope is None
        assert descriptor.entry_points[0].class_name == "com.example.GatewayHook"
        assert descriptor.dependencies[0].scope == "D"

    def test_minimal_defaults(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, _MINIMAL_CONFIG))
        assert config.artifact_id == "com.example.minimal"
        assert config.artifact_version == "1.0.0"
        assert config.bundle_extension == DEFAULT_BUNDLE_EXTENSION
        assert config.output_dir == (tmp_path / DEFAULT_OUTPUT_DIR).resolve()
        assert config.output_name == "com.example.minimal-1.0.0.modl"

    def test_relative_project_root(self, tmp_path: Path) -> None:
        (tmp_path / "build").mkdir()
        content = "project_root: ..\n" + _MINIMAL_CONFIG
        config = load_config(_write(tmp_path / "build", content))
        assert config.project_root == tmp_path.resolve()
        assert config.output_dir == (tmp_path / "dist").resolve()

    def test_unquoted_versions_keep_their_text(self, tmp_path: Path) -> None:
        content = """\
        module:
          id: m
          name: M
          version: 1.10
          requiredPlatformVersion: 8.10
          requiredFrameworkVersion: 8
        """
        config = load_config(_write(tmp_path, content))
        assert config.descriptor.version == "1.10"
        assert config.descriptor.required_platform_version == "8.10"
        assert config.descriptor.required_framework_version == "8"
        assert config.output_name == "m-1.10.modl"

    def test_unquoted_artifact_version_keeps_its_text(self, tmp_path: Path) -> None:
        content = "artifact_version: 2.0\n" + _MINIMAL_CONFIG
        config = load_config(_write(tmp_path, content))
        assert config.artifact_version == "2.0"

    @pytest.mark.parametrize("written", ["007", "1e3", "0x1F", "1_000"])
    def test_number_like_ids_keep_their_text(self, tmp_path: Path, written: str) -> None:
        content = f"module: {{id: {written}, name: M, version: 1.0.0}}\n"
        config = load_config(_write(tmp_path, content))
        assert config.descriptor.id == written

    def test_missing_required_field_is_not_a_config_error(self, tmp_path: Path) -> None:
        content = """\
        module:
          name: No Id
          version: 1.0.0
        """
        config = load_config(_write(tmp_path, content))
        assert config.descriptor.id is None


class TestLoadConfigErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(_write(tmp_path, "module: [unclosed\n"))

    def test_top_level_list(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Expected a mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Missing 'module'"):
            load_config(_write(tmp_path, ""))

    def test_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="outptu_dir"):
            load_config(_write(tmp_path, "outptu_dir: x\n" + _MINIMAL_CONFIG))

    def test_module_not_a_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_config(_write(tmp_path, "module: just-a-string\n"))

    def test_invalid_descriptor_field(self, tmp_path: Path) -> None:
        content = """\
        module:
          id: m
          name: M
          version: 1.0.0
          jars: []
        """
        with pytest.raises(ConfigurationError, match="Invalid module descriptor") as info:
            load_config(_write(tmp_path, content))
        assert info.value.__cause__ is not None

    def test_float_version_in_mapping_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="quote the value"):
            parse_config({"module": {"id": "m", "name": "M", "version": 1.10}}, tmp_path)

    def test_is_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            load_config(tmp_path / "absent.yaml")


# ---------------------------------------------------------------------------
# load_descriptor
# ---------------------------------------------------------------------------


class TestLoadDescriptor:
    def test_bare_descriptor(self, tmp_path: Path) -> None:
        content = """\
        id: com.example.bare
        name: Bare
        version: 0.1.0
        entryPoints:
          - {className: com.example.Hook, scope: C}
        """
        descriptor = load_descriptor(_write(tmp_path, content))
        assert isinstance(descriptor, ModuleDescriptor)
        assert descriptor.id == "com.example.bare"
        assert descriptor.entry_points[0].scope == "C"

    def test_packaging_file_uses_module_section(self, tmp_path: Path) -> None:
        descriptor = load_descriptor(_write(tmp_path, _FULL_CONFIG))
        assert descriptor.id == "com.example.test"
        assert len(descriptor.archives) == 2


# ---------------------------------------------------------------------------
# parse_config
# ---------------------------------------------------------------------------


class TestParseConfig:
    def test_in_memory_mapping(self, tmp_path: Path) -> None:
        config = parse_config(
            {
                "artifact_id": "x",
                "module": {"id": "m", "name": "M", "version": "3"},
            },
            base_dir=tmp_path,
        )
        assert config.output_name == "x-3.modl"
        assert config.project_root == tmp_path.resolve()

    def test_config_is_frozen(self, tmp_path: Path) -> None:
        config = parse_config({"module": {"id": "m", "name": "M", "version": "3"}}, tmp_path)
        with pytest.raises(AttributeError):
            config.artifact_id = "other"  # type: ignore[misc]

    def test_with_project_root_moves_default_output_dir(self, tmp_path: Path) -> None:
        config = parse_config({"module": {"id": "m", "name": "M", "version": "3"}}, tmp_path)
        other = tmp_path / "other"
        other.mkdir()
        moved = config.with_project_root(other)
        assert moved.project_root == other.resolve()
        assert moved.output_dir == (other / DEFAULT_OUTPUT_DIR).resolve()
        assert moved.output_name == config.output_name

    def test_with_project_root_moves_nested_output_dir(self, tmp_path: Path) -> None:
        config = parse_config(
            {"output_dir": "build/out", "module": {"id": "m", "name": "M", "version": "3"}},
            tmp_path,
        )
        moved = config.with_project_root(tmp_path / "other")
        assert moved.output_dir == (tmp_path / "other" / "build" / "out").resolve()

    def test_with_project_root_keeps_outside_output_dir(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        outside = (tmp_path / "shared" / "dist").resolve()
        config = parse_config(
            {
                "output_dir": str(outside),
                "module": {"id": "m", "name": "M", "version": "3"},
            },
            root,
        )
        moved = config.with_project_root(tmp_path / "other")
        assert moved.output_dir == outside
