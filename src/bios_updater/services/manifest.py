"""Model manifest resolution: pick the BIOS package for a model.

Matching runs in two tiers:

1. BIOS components whose SupportedDevices display text contains the model
   token.
2. Only when tier 1 is empty: BIOS components whose SupportedSystems model
   display text contains the token. Covers manifests with combined device
   codes the token cannot match directly.

The package taken is the last survivor of the winning tier in document
order. Manifests list packages oldest first, so position stands in for
"newest"; versions are not compared here.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, Optional

from pydantic import ValidationError

from bios_updater.models.catalog import ComponentType, PackageCandidate
from bios_updater.utils.documents import display_text

logger = logging.getLogger("bios_updater.manifest")


def _parse_size(value: Optional[str]) -> Optional[int]:
    if value and value.isdigit():
        return int(value)
    return None


def parse_package_candidates(manifest: ET.Element) -> list[PackageCandidate]:
    """Read every SoftwareComponent of a model manifest, in document order.

    Components missing a version or a path, or whose attributes fail
    validation (e.g. a path with a ``..`` segment), are skipped with a warning.

    Args:
        manifest: ``Manifest`` root element

    Returns:
        List of PackageCandidate
    """
    candidates = []
    for component in manifest.findall("SoftwareComponent"):
        version = component.get("dellVersion")
        path = component.get("path")
        if not version or not path:
            logger.warning(
                f"Skipping SoftwareComponent without dellVersion/path: "
                f"{display_text(component.find('Name')) or '<unnamed>'}"
            )
            continue

        type_element = component.find("ComponentType")
        component_type = ComponentType(
            type_element.get("value", "") if type_element is not None else ""
        )

        try:
            candidate = PackageCandidate(
                component_type=component_type,
                name=display_text(component.find("Name")),
                supported_device_displays=tuple(
                    display_text(device)
                    for device in component.findall("SupportedDevices/Device")
                ),
                supported_model_displays=tuple(
                    display_text(model)
                    for model in component.findall("SupportedSystems/Brand/Model")
                ),
                version_raw=version,
                download_path=path,
                hash_md5=component.get("hashMD5"),
                release_date=component.get("releaseDate"),
                size=_parse_size(component.get("size")),
            )
        except ValidationError as e:
            logger.warning(f"Skipping invalid SoftwareComponent {path!r}: {e}")
            continue
        candidates.append(candidate)

    return candidates


def _contains_token(displays: Iterable[str], model_token: str) -> bool:
    if not model_token:
        return False
    return any(model_token in display for display in displays)


def match_by_device(
    candidates: Iterable[PackageCandidate], model_token: str
) -> list[PackageCandidate]:
    """Tier 1: BIOS packages whose device display mentions the token."""
    return [
        c for c in candidates
        if c.component_type == ComponentType.BIOS
        and _contains_token(c.supported_device_displays, model_token)
    ]


def match_by_model(
    candidates: Iterable[PackageCandidate], model_token: str
) -> list[PackageCandidate]:
    """Tier 2: BIOS packages whose supported model display mentions the token."""
    return [
        c for c in candidates
        if c.component_type == ComponentType.BIOS
        and _contains_token(c.supported_model_displays, model_token)
    ]


def select_latest_bios_package(
    manifest: ET.Element, model_token: str
) -> Optional[PackageCandidate]:
    """Select the BIOS package for a model from its manifest.

    Args:
        manifest: ``Manifest`` root element
        model_token: Short model code (e.g., "7490"); empty matches nothing

    Returns:
        Last matching package of the first non-empty tier, or None
    """
    candidates = parse_package_candidates(manifest)

    matches = match_by_device(candidates, model_token)
    if matches:
        logger.debug(f"{len(matches)} BIOS package(s) matched device display {model_token!r}")
    else:
        matches = match_by_model(candidates, model_token)
        if matches:
            logger.info(
                f"No device display match for {model_token!r}, "
                f"{len(matches)} BIOS package(s) matched by model display"
            )

    if not matches:
        logger.warning(f"No BIOS package found for model token {model_token!r}")
        return None

    selected = matches[-1]
    logger.info(f"Selected BIOS package {selected.version_raw} ({selected.download_path})")
    return selected
