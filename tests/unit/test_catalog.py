"""Unit tests for catalog index parsing and lookup."""

import pytest

from bios_updater.services.catalog import find_manifest_path, parse_catalog_index
from bios_updater.utils.documents import parse_xml


@pytest.mark.unit
class TestCatalogIndex:
    """Test CatalogIndex lookup."""

    @pytest.fixture
    def root(self, catalog_index_xml):
        return parse_xml(catalog_index_xml)

    def test_parse_entries_in_document_order(self, root):
        entries = parse_catalog_index(root)

        assert [e.manifest_path for e in entries] == [
            "FOLDER05150016M/1/Latitude_07A8.cab",
            "FOLDER06000000M/1/Precision_0831.cab",
        ]
        assert entries[0].system_ids == frozenset({"07A8", "07A9"})
        assert entries[1].system_ids == frozenset({"0831"})

    def test_find_manifest_path(self, root):
        assert find_manifest_path(root, "07A9") == "FOLDER05150016M/1/Latitude_07A8.cab"
        assert find_manifest_path(root, "0831") == "FOLDER06000000M/1/Precision_0831.cab"

    def test_unknown_system_returns_none(self, root):
        assert find_manifest_path(root, "FFFF") is None

    def test_system_id_match_is_exact(self, root):
        assert find_manifest_path(root, "07a8") is None
        assert find_manifest_path(root, "07A") is None

    def test_first_matching_group_wins(self):
        root = parse_xml(
            b"""<ManifestIndex>
              <GroupManifest>
                <SupportedSystems><Brand><Model systemID="0AAA"/></Brand></SupportedSystems>
                <ManifestInformation path="first.cab"/>
              </GroupManifest>
              <GroupManifest>
                <SupportedSystems><Brand><Model systemID="0AAA"/></Brand></SupportedSystems>
                <ManifestInformation path="second.cab"/>
              </GroupManifest>
            </ManifestIndex>"""
        )

        assert find_manifest_path(root, "0AAA") == "first.cab"

    def test_group_without_path_skipped(self):
        root = parse_xml(
            b"""<ManifestIndex>
              <GroupManifest>
                <SupportedSystems><Brand><Model systemID="0AAA"/></Brand></SupportedSystems>
              </GroupManifest>
            </ManifestIndex>"""
        )

        assert parse_catalog_index(root) == []
        assert find_manifest_path(root, "0AAA") is None

    def test_namespaced_catalog(self):
        root = parse_xml(
            b"""<ManifestIndex xmlns="openmanage/cm/dm">
              <GroupManifest>
                <SupportedSystems><Brand><Model systemID="0831"/></Brand></SupportedSystems>
                <ManifestInformation path="ns.cab"/>
              </GroupManifest>
            </ManifestIndex>"""
        )

        assert find_manifest_path(root, "0831") == "ns.cab"

    def test_multiple_brands_in_group(self):
        root = parse_xml(
            b"""<ManifestIndex>
              <GroupManifest>
                <SupportedSystems>
                  <Brand><Model systemID="0001"/></Brand>
                  <Brand><Model systemID="0002"/></Brand>
                </SupportedSystems>
                <ManifestInformation path="multi.cab"/>
              </GroupManifest>
            </ManifestIndex>"""
        )

        assert find_manifest_path(root, "0002") == "multi.cab"
