"""XML document helpers for catalog and manifest parsing."""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from bios_updater.errors import DocumentParseError


def parse_xml(data: bytes) -> ET.Element:
    """Parse an XML document and strip namespaces from tag names.

    Catalog files may declare a default namespace; stripping it keeps path
    lookups like ``GroupManifest/ManifestInformation`` working either way.

    Args:
        data: Raw document bytes (encoding taken from the XML declaration)

    Returns:
        Root element

    Raises:
        DocumentParseError: If the document is not well-formed
    """
    logger = logging.getLogger("bios_updater.documents")

    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        logger.error(f"Failed to parse XML document: {e}")
        raise DocumentParseError(f"Malformed XML document: {e}") from e

    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = element.tag.split("}", 1)[1]

    logger.debug(f"Parsed XML document with root <{root.tag}>")
    return root


def display_text(element: Optional[ET.Element]) -> str:
    """Return the stripped text (CDATA included) of an element's Display child."""
    if element is None:
        return ""
    display = element.find("Display")
    if display is None or display.text is None:
        return ""
    return display.text.strip()
