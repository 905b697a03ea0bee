"""Catalog index lookup: system id -> model manifest path."""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from bios_updater.models.catalog import CatalogIndexEntry

logger = logging.getLogger("bios_updater.catalog")


def parse_catalog_index(root: ET.Element) -> list[CatalogIndexEntry]:
    """Read all GroupManifest entries of a catalog index, in document order.

    Entries without a manifest path are skipped.

    Args:
        root: ``ManifestIndex`` root element

    Returns:
        List of CatalogIndexEntry
    """
    entries = []
    for group in root.findall("GroupManifest"):
        info = group.find("ManifestInformation")
        path = info.get("path") if info is not None else None
        if not path:
            logger.debug("Skipping GroupManifest without ManifestInformation path")
            continue

        system_ids = frozenset(
            model.get("systemID").strip()
            for model in group.findall("SupportedSystems/Brand/Model")
            if model.get("systemID")
        )
        entries.append(CatalogIndexEntry(system_ids=system_ids, manifest_path=path))

    logger.debug(f"Catalog index has {len(entries)} group manifests")
    return entries


def find_manifest_path(root: ET.Element, system_id: str) -> Optional[str]:
    """Locate the model manifest for a system id.

    Args:
        root: ``ManifestIndex`` root element
        system_id: Resolved system identifier (e.g., "07A8")

    Returns:
        Manifest path of the first group listing the system id, or None when
        the system is not in the catalog
    """
    for entry in parse_catalog_index(root):
        if system_id in entry.system_ids:
            logger.info(f"System {system_id} found in catalog: {entry.manifest_path}")
            return entry.manifest_path

    logger.info(f"System {system_id} not found in catalog")
    return None
