"""Global pytest fixtures and configuration."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bios_updater.config import UpdaterSettings  # noqa: E402
from bios_updater.models.identity import RawHardwareIdentity  # noqa: E402


CATALOG_INDEX_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<ManifestIndex baseLocation="downloads.dell.com" version="2024.10.01">
  <GroupManifest releaseID="V1" version="1.0">
    <SupportedSystems>
      <Brand key="4" prefix="LAT">
        <Display><![CDATA[Latitude]]></Display>
        <Model systemID="07A8"><Display><![CDATA[5490]]></Display></Model>
        <Model systemID="07A9"><Display><![CDATA[5590]]></Display></Model>
      </Brand>
    </SupportedSystems>
    <ManifestInformation path="FOLDER05150016M/1/Latitude_07A8.cab" />
  </GroupManifest>
  <GroupManifest releaseID="V2" version="1.0">
    <SupportedSystems>
      <Brand key="3" prefix="PRE">
        <Display><![CDATA[Precision]]></Display>
        <Model systemID="0831"><Display><![CDATA[7490]]></Display></Model>
      </Brand>
    </SupportedSystems>
    <ManifestInformation path="FOLDER06000000M/1/Precision_0831.cab" />
  </GroupManifest>
</ManifestIndex>
"""


def _component(component_type, version, path, devices, models, md5=None):
    device_xml = "".join(
        f"<Device><Display><![CDATA[{d}]]></Display></Device>" for d in devices
    )
    model_xml = "".join(
        f"<Model systemID=\"X\"><Display><![CDATA[{m}]]></Display></Model>" for m in models
    )
    md5_attr = f' hashMD5="{md5}"' if md5 else ""
    return (
        f'<SoftwareComponent dellVersion="{version}" path="{path}" size="1024"{md5_attr}>'
        f"<Name><Display><![CDATA[{component_type} {version}]]></Display></Name>"
        f'<ComponentType value="{component_type}"><Display><![CDATA[{component_type}]]></Display></ComponentType>'
        f"<SupportedDevices>{device_xml}</SupportedDevices>"
        f"<SupportedSystems><Brand key=\"4\">{model_xml}</Brand></SupportedSystems>"
        f"</SoftwareComponent>"
    )


def build_manifest(*components: str) -> bytes:
    """Wrap SoftwareComponent snippets in a Manifest document."""
    body = "".join(components)
    return f'<?xml version="1.0" encoding="utf-8"?><Manifest version="1.0">{body}</Manifest>'.encode()


MODEL_MANIFEST_XML = build_manifest(
    _component("BIOS", "1.10.0", "FOLDER01/1/Latitude_5X90_1.10.0.exe",
               ["Latitude 5490/5590 System BIOS"], ["Latitude 5490", "Latitude 5590"]),
    _component("DRVR", "6.0.1", "FOLDER02/1/Audio_Driver.exe",
               ["Latitude 5490 Audio"], ["Latitude 5490"]),
    _component("BIOS", "1.12.0", "FOLDER03/1/Latitude_5X90_1.12.0.exe",
               ["Latitude 5490/5590 System BIOS"], ["Latitude 5490", "Latitude 5590"],
               md5="0123456789ABCDEF0123456789ABCDEF"),
    _component("BIOS", "1.3.0", "FOLDER04/1/Precision_7X90_1.3.0.exe",
               ["Precision 7X90 System BIOS"], ["Precision 7490"]),
    _component("BIOS", "1.4.0", "FOLDER05/1/Precision_7X90_1.4.0.exe",
               ["Precision 7X90 System BIOS"], ["Precision 7490"]),
)


@pytest.fixture
def catalog_index_xml():
    """Catalog index document with two model families."""
    return CATALOG_INDEX_XML


@pytest.fixture
def model_manifest_xml():
    """Model manifest with BIOS and driver components in release order."""
    return MODEL_MANIFEST_XML


@pytest.fixture
def settings(tmp_path):
    """Settings with tmp and log paths under tmp_path."""
    return UpdaterSettings(
        tmp_dir=str(tmp_path / "tmp"),
        log_file=str(tmp_path / "logs" / "updater.log"),
    )


@pytest.fixture
def raw_identity():
    """Latitude 5490 identity with a SKU number."""
    return RawHardwareIdentity(
        model="Latitude 5490",
        sku_number="07A8",
        oem_strings=["Dell System", "1[07A8]", "3[1.0]"],
        installed_bios_version="1.10.0",
    )


@pytest.fixture
def mock_state_manager():
    """Mock StateManager for unit tests."""
    manager = MagicMock()
    manager.update_status = MagicMock()
    manager.record_decision = MagicMock()
    manager.is_busy = MagicMock(return_value=False)
    return manager


@pytest.fixture
def manifest_builder():
    """Build a parsed Manifest from (type, version, path, devices, models) tuples."""
    from bios_updater.utils.documents import parse_xml

    def build(*components):
        return parse_xml(build_manifest(*(_component(*c) for c in components)))

    return build
