"""Manifest generation and bundle assembly for modl-packager.

Submodules
----------
- ``manifest``   ManifestGenerator — renders ``module.xml``
- ``assembler``  BundleAssembler — stages archives and writes the ``.modl`` file
"""
from __future__ import annotations

from modl_packager.bundler.assembler import BundleAssembler, bundle_file_name
from modl_packager.bundler.manifest import MANIFEST_FILE_NAME, ManifestGenerator

__all__ = [
    # Manifest
    "MANIFEST_FILE_NAME",
    "ManifestGenerator",
    # Assembler
    "BundleAssembler",
    "bundle_file_name",
]
