"""module.xml generation.

Renders a :class:`ModuleDescriptor` into the fixed-schema XML manifest the
host platform reads from every bundle:

.. code-block:: xml

    <?xml version="1.0" encoding="UTF-8"?>
    <modules>
      <module>
        <id>com.example.module</id>
        <name>Example Module</name>
        <description>...</description>
        <version>1.0.0</version>
        <requiredignitionversion>8.1.45</requiredignitionversion>
        <requiredframeworkversion>8</requiredframeworkversion>
        <license>license.html</license>
        <documentation>doc/readme.html</documentation>
        <jar scope="G">gateway.jar</jar>
        <hook scope="G">com.example.GatewayHook</hook>
        <depends scope="D">com.inductiveautomation.vision</depends>
      </module>
    </modules>

Optional elements are omitted entirely when the field is ``None``.  Jar
elements carry only the archive's file name, never its build path.
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path

from modl_packager.descriptor.model import ModuleDescriptor, ScopedEntry
from modl_packager.descriptor.validation import validate_required_fields
from modl_packager.errors import InvalidManifestTextError

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME: str = "module.xml"

_XML_DECLARATION: str = '<?xml version="1.0" encoding="UTF-8"?>\n'
_INDENT: str = "  "

# Characters outside the XML 1.0 Char production.
_XML_ILLEGAL_CHARS = re.compile(
    r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


class ManifestGenerator:
    """Renders module descriptors into ``module.xml`` documents.

    The generator is stateless; one instance can render any number of
    descriptors.
    """

    def generate(self, descriptor: ModuleDescriptor) -> bytes:
        """Return the UTF-8 encoded manifest for *descriptor*.

        Raises
        ------
        MissingRequiredFieldError
            If ``id``, ``name`` or ``version`` is missing or blank.
        InvalidManifestTextError
            If a value contains characters that XML 1.0 does not allow.
        """
        validate_required_fields(descriptor)

        root = ET.Element("modules")
        module = ET.SubElement(root, "module")

        _text_element(module, "id", descriptor.id)
        _text_element(module, "name", descriptor.name)
        _text_element(module, "description", descriptor.description)
        _text_element(module, "version", descriptor.version)
        _text_element(module, "requiredignitionversion", descriptor.required_platform_version)
        _text_element(module, "requiredframeworkversion", descriptor.required_framework_version)
        _text_element(module, "license", descriptor.license)
        _text_element(module, "documentation", descriptor.documentation)

        _scoped_elements(module, descriptor.archives)
        _scoped_elements(module, descriptor.entry_points)
        _scoped_elements(module, descriptor.dependencies)

        ET.indent(root, space=_INDENT)
        body = ET.tostring(root, encoding="unicode")
        return (_XML_DECLARATION + body + "\n").encode("utf-8")

    def write(self, descriptor: ModuleDescriptor, output_file: Path) -> Path:
        """Render *descriptor* and write it to *output_file*.

        The document is rendered before the file is opened, so a
        descriptor with missing required fields leaves no file behind.
        An existing file at *output_file* is replaced.

        Returns
        -------
        Path
            The path written.
        """
        document = self.generate(descriptor)
        output_file.write_bytes(document)
        logger.debug("Wrote %s (%d bytes)", output_file, len(document))
        return output_file


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _xml_safe(location: str, text: str) -> str:
    if _XML_ILLEGAL_CHARS.search(text):
        raise InvalidManifestTextError(location, text)
    return text


def _text_element(parent: ET.Element, tag: str, text: str | None) -> None:
    if text is None:
        return
    element = ET.SubElement(parent, tag)
    element.text = _xml_safe(tag, text)


def _scoped_elements(parent: ET.Element, entries: Iterable[ScopedEntry]) -> None:
    for entry in entries:
        tag = entry.kind.element
        element = ET.SubElement(parent, tag)
        if entry.scope is not None:
            element.set("scope", _xml_safe(f"{tag}@scope", entry.scope))
        element.text = _xml_safe(tag, entry.render())


__all__ = [
    "MANIFEST_FILE_NAME",
    "ManifestGenerator",
]
