"""Bundle assembler — stages a module and compresses it into a ``.modl`` file.

The BundleAssembler is the entry point for the packaging pipeline.  It:

1. Validates the descriptor's required fields.
2. Logs a warning for every missing or invalid scope.
3. Writes ``module.xml`` into a fresh staging directory.
4. Copies every referenced archive into staging under its file name.
5. Compresses staging into ``<output_dir>/<output_name>``, flat.

The bundle is written to a temporary file next to its destination and
moved into place only once complete, so a failed run never leaves a
partial bundle and never damages a bundle from an earlier run.

Classes
-------
- BundleAssembler   Runs the pipeline for one descriptor at a time.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path

from modl_packager.bundler.manifest import MANIFEST_FILE_NAME, ManifestGenerator
from modl_packager.descriptor.loader import PackagingConfig, bundle_file_name
from modl_packager.descriptor.model import ModuleDescriptor, archive_basename
from modl_packager.descriptor.validation import validate_required_fields, validate_scopes
from modl_packager.errors import PackagingError, SourceFileNotFoundError

logger = logging.getLogger(__name__)

STAGING_PREFIX: str = "modl-staging-"
_BUNDLE_MODE: int = 0o666


class BundleAssembler:
    """Assembles module bundles from descriptors.

    Parameters
    ----------
    generator:
        Optional custom :class:`ManifestGenerator`.  A default instance is
        created if ``None``.
    compression:
        ``zipfile`` compression method for bundle entries.  Default:
        ``ZIP_DEFLATED``.
    """

    def __init__(
        self,
        generator: ManifestGenerator | None = None,
        compression: int = zipfile.ZIP_DEFLATED,
    ) -> None:
        self._generator = generator if generator is not None else ManifestGenerator()
        self._compression = compression

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assemble(
        self,
        descriptor: ModuleDescriptor,
        project_root: Path,
        output_dir: Path,
        output_name: str,
    ) -> Path:
        """Build a bundle for *descriptor* and return its absolute path.

        Parameters
        ----------
        descriptor:
            The module to package.
        project_root:
            Directory relative archive paths are resolved against.
        output_dir:
            Directory the bundle is written to.  Created if missing.
        output_name:
            File name of the bundle, e.g. ``"my-module-1.0.0.modl"``.

        Returns
        -------
        Path
            Absolute path of the produced bundle.

        Raises
        ------
        MissingRequiredFieldError
            If ``id``, ``name`` or ``version`` is missing.  Raised before
            anything is written.
        PackagingError
            For every other failure.  The original exception (for example
            :class:`SourceFileNotFoundError` or an ``OSError``) is kept as
            ``__cause__``.
        """
        validate_required_fields(descriptor)
        validate_scopes(descriptor)

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            bundle_path = (output_dir / output_name).resolve()
            staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
            try:
                staged = self._stage(descriptor, project_root, staging_dir)
                self._compress(staging_dir, staged, bundle_path)
            finally:
                _remove_staging(staging_dir)
        except Exception as exc:
            raise PackagingError(f"Failed to package module: {exc}") from exc

        logger.info("Created module package: %s", bundle_path)
        return bundle_path

    def package(self, config: PackagingConfig) -> Path:
        """Assemble the bundle described by a loaded packaging config."""
        return self.assemble(
            descriptor=config.descriptor,
            project_root=config.project_root,
            output_dir=config.output_dir,
            output_name=config.output_name,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _stage(
        self,
        descriptor: ModuleDescriptor,
        project_root: Path,
        staging_dir: Path,
    ) -> list[str]:
        """Write the manifest and copy archives into *staging_dir*.

        Returns
        -------
        list[str]
            Staged file names in bundle order, without duplicates.
        """
        self._generator.write(descriptor, staging_dir / MANIFEST_FILE_NAME)
        staged: list[str] = [MANIFEST_FILE_NAME]
        sources: dict[str, Path] = {}

        for archive in descriptor.archives:
            if archive.path is None:
                continue
            source = _resolve_archive(archive.path, project_root)
            name = archive_basename(archive.path)

            previous = sources.get(name)
            if previous is not None and previous != source:
                logger.warning(
                    "Archive %s overwrites %s in the bundle (same file name %r)",
                    source,
                    previous,
                    name,
                )
            shutil.copyfile(source, staging_dir / name)
            logger.debug("Staged %s as %s", source, name)

            if name not in sources:
                staged.append(name)
            sources[name] = source

        return staged

    def _compress(self, staging_dir: Path, staged: list[str], bundle_path: Path) -> None:
        """Zip *staged* files from *staging_dir* into *bundle_path* atomically."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{bundle_path.name}.", suffix=".tmp", dir=bundle_path.parent
        )
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            with zipfile.ZipFile(tmp_path, "w", compression=self._compression) as zf:
                for name in staged:
                    zf.write(staging_dir / name, arcname=name)
            # mkstemp creates 0600; give the bundle the mode open() would.
            tmp_path.chmod(_BUNDLE_MODE & ~_current_umask())
            os.replace(tmp_path, bundle_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise


def _resolve_archive(path: str, project_root: Path) -> Path:
    """Return the on-disk location of archive *path*, or raise if it is missing."""
    source = project_root / path.replace("\\", "/")
    if not source.is_file():
        raise SourceFileNotFoundError(path, source.resolve())
    return source.resolve()


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _remove_staging(staging_dir: Path) -> None:
    try:
        shutil.rmtree(staging_dir)
    except OSError as exc:
        logger.debug("Could not remove staging directory %s: %s", staging_dir, exc)


__all__ = [
    "STAGING_PREFIX",
    "BundleAssembler",
    "bundle_file_name",
]
