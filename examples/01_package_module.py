#!/usr/bin/env python3
"""Example: Build a module bundle end to end

Creates a throwaway project with two jars, describes it with a
ModuleDescriptor, renders module.xml, and assembles a .modl bundle.

Usage:
    python examples/01_package_module.py

Requirements:
    pip install modl-packager
"""
from __future__ import annotations

import logging
import tempfile
import zipfile
from pathlib import Path

import modl_packager
from modl_packager import (
    ArchiveEntry,
    BundleAssembler,
    Dependency,
    EntryPoint,
    ManifestGenerator,
    ModuleDescriptor,
    bundle_file_name,
)


def _write_jar(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print(f"modl-packager version: {modl_packager.__version__}")

    with tempfile.TemporaryDirectory() as tmp:
        project = Path(tmp) / "project"
        _write_jar(project / "gateway" / "build" / "libs" / "example-gateway.jar")
        _write_jar(project / "designer" / "build" / "libs" / "example-designer.jar")

        # Step 1: Describe the module
        descriptor = ModuleDescriptor(
            id="com.example.module",
            name="Example Module",
            description="Demonstrates bundle assembly",
            version="1.0.0",
            archives=[
                ArchiveEntry(path="gateway/build/libs/example-gateway.jar", scope="G"),
                ArchiveEntry(path="designer/build/libs/example-designer.jar", scope="D"),
            ],
            entry_points=[
                EntryPoint(class_name="com.example.GatewayHook", scope="G"),
                EntryPoint(class_name="com.example.DesignerHook", scope="D"),
            ],
            dependencies=[
                # No scope: logged as a warning, packaging continues
                Dependency(module_id="com.inductiveautomation.vision"),
            ],
        )

        # Step 2: Preview the manifest
        print("\nmodule.xml:")
        print(ManifestGenerator().generate(descriptor).decode("utf-8"))

        # Step 3: Assemble the bundle
        bundle = BundleAssembler().assemble(
            descriptor,
            project_root=project,
            output_dir=project / "dist",
            output_name=bundle_file_name("example-module", descriptor.version or ""),
        )
        with zipfile.ZipFile(bundle) as zf:
            print(f"Bundle {bundle.name} contains: {zf.namelist()}")


if __name__ == "__main__":
    main()
